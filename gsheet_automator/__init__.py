"""
Package exports for gsheet_automator.
"""

from __future__ import annotations

from gsheet_automator.auth import load_credentials
from gsheet_automator.batch import BatchResult, Failure, Skipped, Success, run_batch
from gsheet_automator.config import CopyConfig, FolderConfig, MailMergeConfig, SheetTarget
from gsheet_automator.drive_copies import create_copies as _create_copies
from gsheet_automator.drive_copies import create_folders as _create_folders
from gsheet_automator.mail_merge import send_emails as _send_emails
from gsheet_automator.template import RenderedMessage, Template, render


def send_emails(
    config: MailMergeConfig,
    service_account_credentials: str,
    delegated_user: str | None = None,
) -> BatchResult:
    """Mail-merge the rows of a worksheet using a Gmail draft as template."""
    creds = load_credentials(service_account_credentials, delegated_user=delegated_user)
    return _send_emails(config, creds)


def create_copies(config: CopyConfig, service_account_credentials: str) -> BatchResult:
    """Copy a template file once per row, writing each copy's URL back."""
    creds = load_credentials(service_account_credentials)
    return _create_copies(config, creds)


def create_folders(config: FolderConfig, service_account_credentials: str) -> BatchResult:
    """Create one folder per row, writing each folder's URL back."""
    creds = load_credentials(service_account_credentials)
    return _create_folders(config, creds)


__all__ = [
    "BatchResult",
    "CopyConfig",
    "Failure",
    "FolderConfig",
    "MailMergeConfig",
    "RenderedMessage",
    "SheetTarget",
    "Skipped",
    "Success",
    "Template",
    "create_copies",
    "create_folders",
    "render",
    "run_batch",
    "send_emails",
]
