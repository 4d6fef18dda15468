#!/usr/bin/env python3
"""
Mail merge from a worksheet using a Gmail draft as template.

Every row with a recipient and an empty status cell receives one message
rendered from the draft; the status cell then records the send time, or the
error text when the send failed. Rows hidden by a filter are left alone.
"""

from __future__ import annotations

import logging
from datetime import datetime

from gsheet_automator.batch import BatchResult
from gsheet_automator.config import MailMergeConfig
from gsheet_automator.drafts import DraftTemplate, find_template_by_subject
from gsheet_automator.gmail_api import GmailAPI
from gsheet_automator.mailer import build_message, send_email
from gsheet_automator.records import Record
from gsheet_automator.runner import process_sheet
from gsheet_automator.sheet_tab import SheetTab
from gsheet_automator.template import RenderedMessage

logger = logging.getLogger(__name__)

SENT_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def make_send_action(gmail: GmailAPI, draft: DraftTemplate, config: MailMergeConfig, clock=datetime.now):
    """
    Build the per-row action that sends one merged message.

    The returned callable sends to the row's recipient and returns the send
    timestamp written to the status column.
    """

    def _send(record: Record, message: RenderedMessage) -> str:
        recipient = record.get(config.recipient_column).strip()
        msg = build_message(
            recipient,
            message,
            attachments=draft.attachments,
            inline_images=draft.inline_images,
            sender=config.sender,
            cc=config.cc,
            bcc=config.bcc,
            reply_to=config.reply_to,
        )
        send_email(gmail, msg)
        print(f"  ✓ Email sent to '{recipient}' (Row {record.row})")
        return clock().strftime(SENT_TIMESTAMP_FORMAT)

    return _send


def send_emails(config: MailMergeConfig, creds) -> BatchResult:
    """
    Run a mail merge over one worksheet.

    Args:
        config: Mail merge configuration
        creds: Google credentials able to read the sheet and send as the
            mailbox that owns the draft

    Returns:
        BatchResult: Per-row outcomes, already written to the status column

    Raises:
        ConfigError: If the configuration is invalid
        TemplateNotFoundError: If no draft has the configured subject
        ShapeError: If the header row is malformed or a column is missing
    """
    config.validate()

    tab = SheetTab.open(config.sheet, creds)
    print(f"Sending mail merge from '{tab.title}' with subject: '{config.subject}'")

    gmail = GmailAPI.get_instance(creds)
    draft = find_template_by_subject(gmail, config.subject)
    print(f"✓ Found draft '{config.subject}'")

    result = process_sheet(
        tab,
        status_column=config.status_column,
        source_column=config.recipient_column,
        action=make_send_action(gmail, draft, config),
        template=draft.template,
    )

    if result.failed:
        print(f"✗ {result.failed} email(s) failed; see '{config.status_column}' for details")
    print(f"✓ Mail merge finished: {result.summary()}")
    return result
