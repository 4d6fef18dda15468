"""
MIME assembly and dispatch of merged messages.
"""

from __future__ import annotations

import base64
import logging
from email import encoders
from email.header import Header
from email.mime.base import MIMEBase
from email.mime.image import MIMEImage
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Optional, Sequence

from gsheet_automator.drafts import DraftAttachment
from gsheet_automator.gmail_api import GmailAPI
from gsheet_automator.template import RenderedMessage

logger = logging.getLogger(__name__)


def _attachment_part(attachment: DraftAttachment) -> MIMEBase:
    maintype, subtype = attachment.mime_type.split("/", 1)
    part = MIMEBase(maintype, subtype)
    part.set_payload(attachment.data)
    encoders.encode_base64(part)
    part.add_header("Content-Disposition", "attachment", filename=attachment.filename)
    return part


def _inline_image_part(image: DraftAttachment) -> MIMEBase:
    maintype, subtype = image.mime_type.split("/", 1)
    if maintype == "image":
        part = MIMEImage(image.data, _subtype=subtype)
    else:
        part = MIMEBase(maintype, subtype)
        part.set_payload(image.data)
        encoders.encode_base64(part)
    part.add_header("Content-ID", f"<{image.content_id}>")
    part.add_header("Content-Disposition", "inline", filename=image.filename)
    return part


def build_message(
    to: str,
    message: RenderedMessage,
    attachments: Sequence[DraftAttachment] = (),
    inline_images: Sequence[DraftAttachment] = (),
    sender: Optional[str] = None,
    cc: Optional[str] = None,
    bcc: Optional[str] = None,
    reply_to: Optional[str] = None,
) -> MIMEMultipart:
    """
    Build a multipart message: mixed > related > alternative (plain, html).

    The HTML alternative is omitted when the rendered HTML body is empty.
    """
    alternative = MIMEMultipart("alternative")
    alternative.attach(MIMEText(message.text, "plain", "utf-8"))
    if message.html:
        alternative.attach(MIMEText(message.html, "html", "utf-8"))

    body = alternative
    if inline_images and message.html:
        body = MIMEMultipart("related")
        body.attach(alternative)
        for image in inline_images:
            body.attach(_inline_image_part(image))

    msg = MIMEMultipart("mixed")
    msg.attach(body)
    for attachment in attachments:
        msg.attach(_attachment_part(attachment))

    msg["To"] = to
    msg["Subject"] = Header(message.subject, "utf-8")
    if sender:
        msg["From"] = sender
    if cc:
        msg["Cc"] = cc
    if bcc:
        msg["Bcc"] = bcc
    if reply_to:
        msg["Reply-To"] = reply_to
    return msg


def send_email(gmail: GmailAPI, msg: MIMEMultipart) -> str:
    """Send a built message and return the Gmail message ID."""
    raw = base64.urlsafe_b64encode(msg.as_bytes()).decode("utf-8")
    response = gmail.send_message(raw)
    logger.debug(f"Sent message {response.get('id')} to '{msg['To']}'")
    return response.get("id", "")
