"""
Placeholder substitution for message templates.

A template is a subject / plain text / HTML triple holding ``{{field}}``
markers. Each part is serialized to a JSON string, every marker is replaced
with the escaped field value and the result is parsed back.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import List

from gsheet_automator.records import Record

PLACEHOLDER_RE = re.compile(r"{{[^{}]+}}")
LINE_BREAK = "<br>"

# Order matters: the backslash must be escaped before anything that adds one
_JSON_ESCAPES = (
    ("\\", "\\\\"),
    ('"', '\\"'),
    ("/", "\\/"),
    ("\b", "\\b"),
    ("\f", "\\f"),
    ("\n", "\\n"),
    ("\r", "\\r"),
    ("\t", "\\t"),
)


@dataclass(frozen=True)
class Template:
    subject: str = ""
    text: str = ""
    html: str = ""


@dataclass(frozen=True)
class RenderedMessage:
    subject: str = ""
    text: str = ""
    html: str = ""


def escape_data(value: str) -> str:
    """Escape a string for embedding inside a JSON string literal."""
    for char, replacement in _JSON_ESCAPES:
        value = value.replace(char, replacement)
    return value


def _field_name(marker: str) -> str:
    inner = marker[2:-2]
    # The marker was read from the JSON form, so undo its escaping first
    try:
        return json.loads(f'"{inner}"')
    except json.JSONDecodeError:
        return inner


def placeholders(template: Template) -> List[str]:
    """Distinct placeholder names in order of first appearance."""
    names: List[str] = []
    for part in (template.subject, template.text, template.html):
        for marker in PLACEHOLDER_RE.findall(part or ""):
            name = marker[2:-2]
            if name not in names:
                names.append(name)
    return names


def _render_part(part: str, record: Record) -> str:
    # Each part is its own JSON string, so a marker can never span two parts
    encoded = json.dumps(part or "", ensure_ascii=False)

    def _substitute(match: re.Match) -> str:
        value = record.get(_field_name(match.group(0)))
        return escape_data(value.replace("\n", LINE_BREAK))

    return json.loads(PLACEHOLDER_RE.sub(_substitute, encoded), strict=False)


def render(template: Template, record: Record) -> RenderedMessage:
    """
    Fill a template with the values of one record.

    Missing fields render as empty strings. Newlines in field values become
    ``<br>`` and the value is JSON-escaped; the template's own text is left
    untouched. Unbalanced braces are kept as written.

    Args:
        template: Subject / text / HTML triple with ``{{field}}`` markers
        record: Row values keyed by header name

    Returns:
        RenderedMessage: The filled triple
    """
    return RenderedMessage(
        subject=_render_part(template.subject, record),
        text=_render_part(template.text, record),
        html=_render_part(template.html, record),
    )
