#!/usr/bin/env python3
"""
Gmail API service with token bucket rate limiting.

Wraps the Gmail API calls needed for a mail merge: paging through drafts,
fetching a draft's raw MIME message and sending a message.
"""

from __future__ import annotations
import logging
import threading
from typing import Iterator, Optional
from googleapiclient.discovery import build

from gsheet_automator.token_bucket import TokenBucket
from gsheet_automator.utils import retry_with_exponential_backoff

logger = logging.getLogger(__name__)

USER_ID = "me"


class GmailAPI:
    """
    Singleton service that wraps Gmail API with rate limiting.

    Draft reads are retried on 429/5xx errors; sends are not, so a message is
    never dispatched twice.
    """

    _instance: Optional[GmailAPI] = None
    _lock = threading.Lock()

    def __init__(self, creds):
        self.creds = creds
        self.service = build("gmail", "v1", credentials=creds)
        # Stay well below the per-user send limits
        self.token_bucket = TokenBucket({"gmail": 120.0})

    @classmethod
    def get_instance(cls, creds) -> GmailAPI:
        if cls._instance is None:
            with cls._lock:
                # Double-check pattern
                if cls._instance is None:
                    cls._instance = cls(creds)
        return cls._instance

    def list_drafts(self, page_token: str | None = None, **kwargs):
        """
        List one page of drafts (rate-limited, retried).

        Returns:
            ListDraftsResponse dictionary
        """
        self.token_bucket.acquire()

        def _list():
            if page_token:
                kwargs["pageToken"] = page_token
            return self.service.users().drafts().list(userId=USER_ID, **kwargs).execute()

        return retry_with_exponential_backoff(_list)

    def iter_drafts(self) -> Iterator[dict]:
        """Yield every draft stub ({"id", "message": {"id", "threadId"}})."""
        page_token = None
        while True:
            response = self.list_drafts(page_token=page_token)
            yield from response.get("drafts", [])
            page_token = response.get("nextPageToken")
            if not page_token:
                return

    def get_draft(self, draft_id: str, format: str = "raw", **kwargs):
        """
        Get a draft by ID (rate-limited, retried).

        Args:
            draft_id: ID of the draft
            format: Message format ("raw", "full" or "metadata")

        Returns:
            Draft resource dictionary
        """
        self.token_bucket.acquire()

        def _get():
            return (
                self.service.users()
                .drafts()
                .get(userId=USER_ID, id=draft_id, format=format, **kwargs)
                .execute()
            )

        return retry_with_exponential_backoff(_get)

    def send_message(self, raw: str):
        """
        Send a message given as base64url-encoded RFC 2822 bytes.

        Returns:
            Message resource dictionary
        """
        self.token_bucket.acquire()
        return (
            self.service.users()
            .messages()
            .send(userId=USER_ID, body={"raw": raw})
            .execute()
        )
