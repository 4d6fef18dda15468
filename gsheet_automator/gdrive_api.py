#!/usr/bin/env python3
"""
Google Drive API service with token bucket rate limiting.

This module provides a singleton GDriveAPI service that wraps the Google Drive API
calls used to copy template files and create folders.

Reads are retried on 429/5xx errors. Copies and folder creations are not: a
retried create can leave a duplicate behind, so a failed call is reported to
the caller as-is.
"""

from __future__ import annotations
import logging
import threading
from typing import Optional
from googleapiclient.discovery import build

from gsheet_automator.token_bucket import TokenBucket
from gsheet_automator.utils import retry_with_exponential_backoff

logger = logging.getLogger(__name__)

FOLDER_MIME_TYPE = "application/vnd.google-apps.folder"
ITEM_FIELDS = "id, name, mimeType, webViewLink"


class GDriveAPI:
    """
    Singleton service that wraps Google Drive API with rate limiting.

    Note: Google Drive API uses a single quota bucket (no read/write distinction).
    """

    _instance: Optional[GDriveAPI] = None
    _lock = threading.Lock()

    def __init__(self, creds):
        """
        Initialize GDriveAPI service.

        Args:
            creds: Google OAuth credentials
        """
        self.creds = creds
        self.service = build("drive", "v3", credentials=creds)
        # 12,000 queries per 60 seconds (single bucket, no read/write distinction)
        self.token_bucket = TokenBucket({"drive": 12000.0})

    @classmethod
    def get_instance(cls, creds) -> GDriveAPI:
        """
        Get or create the singleton instance of GDriveAPI.

        Args:
            creds: Google OAuth credentials

        Returns:
            GDriveAPI instance
        """
        if cls._instance is None:
            with cls._lock:
                # Double-check pattern
                if cls._instance is None:
                    cls._instance = cls(creds)
        return cls._instance

    def get_file(self, file_id: str, **kwargs):
        """
        Get file metadata by ID (rate-limited, retried).

        Args:
            file_id: ID of the file
            **kwargs: Additional arguments to pass to the API call

        Returns:
            File resource dictionary
        """
        self.token_bucket.acquire()

        def _get():
            return (
                self.service.files()
                .get(fileId=file_id, supportsAllDrives=True, **kwargs)
                .execute()
            )

        return retry_with_exponential_backoff(_get)

    def copy_file(self, file_id: str, name: str, parent_id: str):
        """
        Copy a file into a folder under a new name.

        Args:
            file_id: ID of the file to copy
            name: Name of the copy
            parent_id: ID of the destination folder

        Returns:
            File resource dictionary with id, name, mimeType and webViewLink
        """
        self.token_bucket.acquire()
        return (
            self.service.files()
            .copy(
                fileId=file_id,
                body={"name": name, "parents": [parent_id]},
                fields=ITEM_FIELDS,
                supportsAllDrives=True,
            )
            .execute()
        )

    def create_folder(self, name: str, parent_id: str):
        """
        Create a folder inside another folder.

        Args:
            name: Name of the new folder
            parent_id: ID of the parent folder

        Returns:
            File resource dictionary with id, name, mimeType and webViewLink
        """
        self.token_bucket.acquire()
        return (
            self.service.files()
            .create(
                body={"name": name, "mimeType": FOLDER_MIME_TYPE, "parents": [parent_id]},
                fields=ITEM_FIELDS,
                supportsAllDrives=True,
            )
            .execute()
        )
