#!/usr/bin/env python3
"""
Named copies of a Drive template file, and named folders, driven by a worksheet.

Each eligible row names one new item; the URL of the item is written back to
the row's URL column. Rows that already have a URL are skipped, so a run can
be repeated after fixing the rows that failed.
"""

from __future__ import annotations

import logging

from gsheet_automator.batch import BatchResult
from gsheet_automator.config import CopyConfig, FolderConfig
from gsheet_automator.errors import ConfigError
from gsheet_automator.gdrive_api import FOLDER_MIME_TYPE, GDriveAPI
from gsheet_automator.records import Record
from gsheet_automator.runner import process_sheet
from gsheet_automator.sheet_tab import SheetTab

logger = logging.getLogger(__name__)


def file_url(item: dict) -> str:
    return item.get("webViewLink") or f"https://drive.google.com/open?id={item['id']}"


def folder_url(item: dict) -> str:
    return item.get("webViewLink") or f"https://drive.google.com/drive/folders/{item['id']}"


def _require_folder(drive: GDriveAPI, folder_id: str) -> dict:
    folder = drive.get_file(folder_id, fields="id, name, mimeType")
    if folder.get("mimeType") != FOLDER_MIME_TYPE:
        raise ConfigError(f"Destination '{folder_id}' is not a folder.")
    return folder


def make_copy_action(drive: GDriveAPI, template_file_id: str, destination_folder_id: str, name_column: str):
    def _copy(record: Record, _message) -> str:
        name = record.get(name_column).strip()
        item = drive.copy_file(template_file_id, name, destination_folder_id)
        print(f"  ✓ Copy created for '{name}' (Row {record.row})")
        return file_url(item)

    return _copy


def make_folder_action(drive: GDriveAPI, destination_folder_id: str, name_column: str):
    def _create(record: Record, _message) -> str:
        name = record.get(name_column).strip()
        item = drive.create_folder(name, destination_folder_id)
        print(f"  ✓ Folder created for '{name}' (Row {record.row})")
        return folder_url(item)

    return _create


def create_copies(config: CopyConfig, creds) -> BatchResult:
    """
    Copy the template file once per eligible row.

    Args:
        config: Copy configuration
        creds: Google credentials with Drive and Sheets access

    Returns:
        BatchResult: Per-row outcomes, already written to the URL column

    Raises:
        ConfigError: If the configuration is invalid or the destination is not a folder
        HttpError: If the template file or destination folder cannot be read
        ShapeError: If the header row is malformed or a column is missing
    """
    config.validate()

    drive = GDriveAPI.get_instance(creds)
    template = drive.get_file(config.template_file_id, fields="id, name, mimeType")
    folder = _require_folder(drive, config.destination_folder_id)
    print(f"Copying '{template.get('name')}' into '{folder.get('name')}'")

    tab = SheetTab.open(config.sheet, creds)
    result = process_sheet(
        tab,
        status_column=config.url_column,
        source_column=config.name_column,
        action=make_copy_action(
            drive, config.template_file_id, config.destination_folder_id, config.name_column
        ),
    )
    print(f"✓ Create copies finished: {result.summary()}")
    return result


def create_folders(config: FolderConfig, creds) -> BatchResult:
    """
    Create one folder per eligible row.

    Args:
        config: Folder configuration
        creds: Google credentials with Drive and Sheets access

    Returns:
        BatchResult: Per-row outcomes, already written to the URL column
    """
    config.validate()

    drive = GDriveAPI.get_instance(creds)
    folder = _require_folder(drive, config.destination_folder_id)
    print(f"Creating folders in '{folder.get('name')}'")

    tab = SheetTab.open(config.sheet, creds)
    result = process_sheet(
        tab,
        status_column=config.url_column,
        source_column=config.name_column,
        action=make_folder_action(drive, config.destination_folder_id, config.name_column),
    )
    print(f"✓ Create folders finished: {result.summary()}")
    return result
