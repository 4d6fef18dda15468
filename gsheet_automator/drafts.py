"""
Gmail draft lookup.

The mail merge template is an ordinary Gmail draft found by its exact
subject line. Its plain and HTML bodies become the Template; its file
attachments and inline images are re-attached to every merged message.
"""

from __future__ import annotations

import base64
import email
import logging
import re
from dataclasses import dataclass, field
from email import policy
from typing import Optional, Tuple

from gsheet_automator.errors import TemplateNotFoundError
from gsheet_automator.gmail_api import GmailAPI
from gsheet_automator.template import Template

logger = logging.getLogger(__name__)

CID_RE = re.compile(r'src=["\']cid:([^"\']+)["\']', re.IGNORECASE)


@dataclass(frozen=True)
class DraftAttachment:
    filename: str
    mime_type: str
    data: bytes
    content_id: Optional[str] = None


@dataclass(frozen=True)
class DraftTemplate:
    draft_id: str
    template: Template
    attachments: Tuple[DraftAttachment, ...] = field(default_factory=tuple)
    inline_images: Tuple[DraftAttachment, ...] = field(default_factory=tuple)


def _header(draft: dict, name: str) -> str:
    headers = draft.get("message", {}).get("payload", {}).get("headers", [])
    for header in headers:
        if header.get("name", "").lower() == name.lower():
            return header.get("value", "")
    return ""


def parse_draft_message(draft_id: str, raw: bytes, subject: str) -> DraftTemplate:
    """
    Split a draft's raw MIME message into a template and its attachments.

    Inline images are kept only when the HTML body references their
    Content-ID; other parts carrying a filename become attachments.
    """
    message = email.message_from_bytes(raw, policy=policy.default)

    text_part = message.get_body(preferencelist=("plain",))
    html_part = message.get_body(preferencelist=("html",))
    text = text_part.get_content() if text_part is not None else ""
    html = html_part.get_content() if html_part is not None else ""
    referenced = set(CID_RE.findall(html))

    attachments = []
    inline_images = []
    for part in message.walk():
        if part.is_multipart() or part is text_part or part is html_part:
            continue
        content_id = (part.get("Content-ID") or "").strip().strip("<>") or None
        item = DraftAttachment(
            filename=part.get_filename() or "",
            mime_type=part.get_content_type(),
            data=part.get_payload(decode=True) or b"",
            content_id=content_id,
        )
        if content_id and content_id in referenced:
            inline_images.append(item)
        elif item.filename:
            attachments.append(item)

    logger.info(
        f"Draft '{subject}': {len(attachments)} attachment(s), "
        f"{len(inline_images)} inline image(s), HTML body length {len(html)}"
    )
    return DraftTemplate(
        draft_id=draft_id,
        template=Template(subject=subject, text=text, html=html),
        attachments=tuple(attachments),
        inline_images=tuple(inline_images),
    )


def find_template_by_subject(gmail: GmailAPI, subject: str) -> DraftTemplate:
    """
    Locate the draft whose subject matches exactly and load it as a template.

    Args:
        gmail: Gmail API service
        subject: Subject line of the draft

    Returns:
        DraftTemplate: The draft's template, attachments and inline images

    Raises:
        TemplateNotFoundError: If no draft has that subject
    """
    logger.info(f"Searching for draft with subject line: '{subject}'")
    for stub in gmail.iter_drafts():
        draft = gmail.get_draft(stub["id"], format="metadata", metadataHeaders=["Subject"])
        if _header(draft, "Subject") != subject:
            continue

        full = gmail.get_draft(stub["id"], format="raw")
        raw = base64.urlsafe_b64decode(full["message"]["raw"])
        return parse_draft_message(stub["id"], raw, subject)

    raise TemplateNotFoundError(subject)
