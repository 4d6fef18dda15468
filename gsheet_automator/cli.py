"""Command-line interface for gsheet_automator."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Callable

from .config import (
    DEFAULT_EMAIL_SENT_COLUMN,
    DEFAULT_FILE_NAME_COLUMN,
    DEFAULT_FILE_URL_COLUMN,
    DEFAULT_FOLDER_NAME_COLUMN,
    DEFAULT_FOLDER_URL_COLUMN,
    DEFAULT_RECIPIENT_COLUMN,
    CopyConfig,
    FolderConfig,
    MailMergeConfig,
    SheetTarget,
)


def _sheet_target(args: argparse.Namespace) -> SheetTarget:
    return SheetTarget(spreadsheet_id=args.spreadsheet_id, tab=args.tab)


def _exit_code(result) -> int:
    return 2 if result.failed else 0


def _run_send_emails(args: argparse.Namespace) -> int:
    """Entrypoint for the `send-emails` subcommand."""
    from .auth import get_oauth_credentials
    from .mail_merge import send_emails

    config = MailMergeConfig(
        sheet=_sheet_target(args),
        subject=args.subject,
        recipient_column=args.recipient_column,
        status_column=args.status_column,
        sender=args.sender,
        cc=args.cc,
        bcc=args.bcc,
        reply_to=args.reply_to,
    )
    config.validate()
    creds = get_oauth_credentials(
        service_account_credentials=args.credentials,
        delegated_user=args.delegated_user,
    )
    return _exit_code(send_emails(config, creds))


def _run_create_copies(args: argparse.Namespace) -> int:
    """Entrypoint for the `create-copies` subcommand."""
    from .auth import get_oauth_credentials
    from .drive_copies import create_copies

    config = CopyConfig(
        sheet=_sheet_target(args),
        template_file_id=args.template_file_id,
        destination_folder_id=args.destination_folder_id,
        name_column=args.name_column,
        url_column=args.url_column,
    )
    config.validate()
    creds = get_oauth_credentials(service_account_credentials=args.credentials)
    return _exit_code(create_copies(config, creds))


def _run_create_folders(args: argparse.Namespace) -> int:
    """Entrypoint for the `create-folders` subcommand."""
    from .auth import get_oauth_credentials
    from .drive_copies import create_folders

    config = FolderConfig(
        sheet=_sheet_target(args),
        destination_folder_id=args.destination_folder_id,
        name_column=args.name_column,
        url_column=args.url_column,
    )
    config.validate()
    creds = get_oauth_credentials(service_account_credentials=args.credentials)
    return _exit_code(create_folders(config, creds))


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--spreadsheet-id",
        required=True,
        help="ID of the spreadsheet holding the rows to process.",
    )
    parser.add_argument(
        "--tab",
        default=None,
        help="Worksheet name. Defaults to the first worksheet.",
    )
    parser.add_argument(
        "--credentials",
        dest="credentials",
        default=None,
        help="Path to the service account JSON key file. Defaults to service-account-credentials.json in the project root.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gsheet_automator",
        description="Sheet-driven mail merge and Drive copy utilities.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log per-row decisions and API retries.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    mail_parser = subparsers.add_parser(
        "send-emails",
        help="Send one email per row using a Gmail draft as template.",
    )
    _add_common_arguments(mail_parser)
    mail_parser.add_argument(
        "--subject",
        required=True,
        help="Exact subject line of the Gmail draft to merge with.",
    )
    mail_parser.add_argument(
        "--recipient-column",
        default=DEFAULT_RECIPIENT_COLUMN,
        help=f'Header of the recipient address column (default: "{DEFAULT_RECIPIENT_COLUMN}").',
    )
    mail_parser.add_argument(
        "--status-column",
        default=DEFAULT_EMAIL_SENT_COLUMN,
        help=f'Header of the column that records send status (default: "{DEFAULT_EMAIL_SENT_COLUMN}").',
    )
    mail_parser.add_argument(
        "--delegated-user",
        default=None,
        help="Mailbox to impersonate through domain-wide delegation (owner of the draft).",
    )
    mail_parser.add_argument("--sender", default=None, help="Optional From header.")
    mail_parser.add_argument("--cc", default=None, help="Optional Cc addresses.")
    mail_parser.add_argument("--bcc", default=None, help="Optional Bcc addresses.")
    mail_parser.add_argument("--reply-to", default=None, help="Optional Reply-To address.")
    mail_parser.set_defaults(func=_run_send_emails)

    copy_parser = subparsers.add_parser(
        "create-copies",
        help="Copy a template file once per row, named from the sheet.",
    )
    _add_common_arguments(copy_parser)
    copy_parser.add_argument(
        "--template-file-id",
        required=True,
        help="ID of the Drive file to copy.",
    )
    copy_parser.add_argument(
        "--destination-folder-id",
        required=True,
        help="ID of the folder that receives the copies.",
    )
    copy_parser.add_argument(
        "--name-column",
        default=DEFAULT_FILE_NAME_COLUMN,
        help=f'Header of the file name column (default: "{DEFAULT_FILE_NAME_COLUMN}").',
    )
    copy_parser.add_argument(
        "--url-column",
        default=DEFAULT_FILE_URL_COLUMN,
        help=f'Header of the column that receives the new file URLs (default: "{DEFAULT_FILE_URL_COLUMN}").',
    )
    copy_parser.set_defaults(func=_run_create_copies)

    folder_parser = subparsers.add_parser(
        "create-folders",
        help="Create one folder per row, named from the sheet.",
    )
    _add_common_arguments(folder_parser)
    folder_parser.add_argument(
        "--destination-folder-id",
        required=True,
        help="ID of the parent folder for the new folders.",
    )
    folder_parser.add_argument(
        "--name-column",
        default=DEFAULT_FOLDER_NAME_COLUMN,
        help=f'Header of the folder name column (default: "{DEFAULT_FOLDER_NAME_COLUMN}").',
    )
    folder_parser.add_argument(
        "--url-column",
        default=DEFAULT_FOLDER_URL_COLUMN,
        help=f'Header of the column that receives the new folder URLs (default: "{DEFAULT_FOLDER_URL_COLUMN}").',
    )
    folder_parser.set_defaults(func=_run_create_folders)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    handler: Callable[[argparse.Namespace], int] | None = getattr(args, "func", None)
    if handler is None:
        parser.print_help()
        return 1

    try:
        return handler(args)
    except Exception as exc:  # pragma: no cover - CLI guardrail
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
