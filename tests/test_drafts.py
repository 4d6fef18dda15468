"""
Tests for Gmail draft lookup and parsing.
"""

from __future__ import annotations

import base64
from email.mime.application import MIMEApplication
from email.mime.image import MIMEImage
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from unittest.mock import MagicMock

import pytest

from gsheet_automator.drafts import find_template_by_subject, parse_draft_message
from gsheet_automator.errors import TemplateNotFoundError

PNG_BYTES = b"\x89PNG\r\n\x1a\nfake-image"
PDF_BYTES = b"%PDF-1.4 fake"


def _draft_bytes(subject="Welcome {{Name}}", with_image=True, with_html=True):
    msg = MIMEMultipart("mixed")
    alternative = MIMEMultipart("alternative")
    alternative.attach(MIMEText("Hi {{Name}}", "plain", "utf-8"))
    if with_html:
        alternative.attach(
            MIMEText('<p>Hi {{Name}}</p><img src="cid:logo123" alt="logo.png">', "html", "utf-8")
        )

    if with_image:
        related = MIMEMultipart("related")
        related.attach(alternative)
        image = MIMEImage(PNG_BYTES, _subtype="png")
        image.add_header("Content-ID", "<logo123>")
        image.add_header("Content-Disposition", "inline", filename="logo.png")
        related.attach(image)
        msg.attach(related)
    else:
        msg.attach(alternative)

    pdf = MIMEApplication(PDF_BYTES, _subtype="pdf")
    pdf.add_header("Content-Disposition", "attachment", filename="terms.pdf")
    msg.attach(pdf)
    msg["Subject"] = subject
    return msg.as_bytes()


def _metadata(draft_id, subject):
    return {
        "id": draft_id,
        "message": {"payload": {"headers": [{"name": "Subject", "value": subject}]}},
    }


class TestParseDraftMessage:
    """Test splitting a draft into template and attachments."""

    def test_bodies_become_template(self):
        """Test that the plain and HTML bodies are extracted."""
        draft = parse_draft_message("d1", _draft_bytes(), "Welcome {{Name}}")

        assert draft.draft_id == "d1"
        assert draft.template.subject == "Welcome {{Name}}"
        assert draft.template.text == "Hi {{Name}}"
        assert draft.template.html.startswith("<p>Hi {{Name}}</p>")

    def test_inline_image_and_attachment(self):
        """Test that referenced images are inline and files are attachments."""
        draft = parse_draft_message("d1", _draft_bytes(), "Welcome")

        assert len(draft.inline_images) == 1
        image = draft.inline_images[0]
        assert image.content_id == "logo123"
        assert image.mime_type == "image/png"
        assert image.data == PNG_BYTES

        assert len(draft.attachments) == 1
        attachment = draft.attachments[0]
        assert attachment.filename == "terms.pdf"
        assert attachment.mime_type == "application/pdf"
        assert attachment.data == PDF_BYTES

    def test_plain_text_only_draft(self):
        """Test that a draft without HTML has an empty HTML body."""
        draft = parse_draft_message(
            "d1", _draft_bytes(with_image=False, with_html=False), "Welcome"
        )

        assert draft.template.text == "Hi {{Name}}"
        assert draft.template.html == ""
        assert draft.inline_images == ()


class TestFindTemplateBySubject:
    """Test locating a draft by exact subject."""

    def _gmail(self, subjects, raw_bytes):
        gmail = MagicMock()
        gmail.iter_drafts.return_value = [{"id": draft_id} for draft_id in subjects]

        def get_draft(draft_id, format="raw", **kwargs):
            if format == "metadata":
                return _metadata(draft_id, subjects[draft_id])
            raw = base64.urlsafe_b64encode(raw_bytes).decode("utf-8")
            return {"id": draft_id, "message": {"raw": raw}}

        gmail.get_draft.side_effect = get_draft
        return gmail

    def test_exact_match(self):
        """Test that the draft with the matching subject is loaded."""
        gmail = self._gmail(
            {"d1": "Welcome", "d2": "Welcome {{Name}}"}, _draft_bytes()
        )

        draft = find_template_by_subject(gmail, "Welcome {{Name}}")

        assert draft.draft_id == "d2"
        assert draft.template.text == "Hi {{Name}}"
        gmail.get_draft.assert_any_call("d2", format="raw")

    def test_match_is_not_partial(self):
        """Test that a prefix of the subject does not match."""
        gmail = self._gmail({"d1": "Welcome {{Name}}"}, _draft_bytes())

        with pytest.raises(TemplateNotFoundError) as exc_info:
            find_template_by_subject(gmail, "Welcome")

        assert exc_info.value.subject == "Welcome"

    def test_no_drafts(self):
        """Test that an empty mailbox raises TemplateNotFoundError."""
        gmail = self._gmail({}, b"")

        with pytest.raises(TemplateNotFoundError):
            find_template_by_subject(gmail, "Anything")
