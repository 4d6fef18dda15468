"""
Tests for Google Drive API rate limiting service.
"""

from __future__ import annotations

from unittest.mock import MagicMock, Mock, patch

import pytest
from googleapiclient.errors import HttpError

from gsheet_automator.gdrive_api import FOLDER_MIME_TYPE, ITEM_FIELDS, GDriveAPI


@pytest.fixture
def drive_service():
    with patch("gsheet_automator.gdrive_api.build") as mock_build:
        mock_service = MagicMock()
        mock_build.return_value = mock_service
        yield mock_service


class TestGDriveAPI:
    """Test GDriveAPI singleton and calls."""

    @patch("gsheet_automator.gdrive_api.build")
    def test_singleton_pattern(self, mock_build):
        """Test that GDriveAPI is a singleton."""
        mock_creds = MagicMock()

        instance1 = GDriveAPI.get_instance(mock_creds)
        instance2 = GDriveAPI.get_instance(mock_creds)

        assert instance1 is instance2
        assert instance1.token_bucket.single_bucket_mode is True
        mock_build.assert_called_once_with("drive", "v3", credentials=mock_creds)

    def test_get_file(self, drive_service):
        """Test get_file supports shared drives."""
        mock_get = drive_service.files.return_value.get
        mock_get.return_value.execute.return_value = {"id": "f1", "mimeType": FOLDER_MIME_TYPE}

        api = GDriveAPI(MagicMock())
        result = api.get_file("f1", fields="id, mimeType")

        assert result["id"] == "f1"
        mock_get.assert_called_once_with(fileId="f1", supportsAllDrives=True, fields="id, mimeType")

    @patch("gsheet_automator.utils.time.sleep")
    def test_get_file_retries_on_server_error(self, mock_sleep, drive_service):
        """Test that metadata reads are retried."""
        mock_execute = drive_service.files.return_value.get.return_value.execute
        mock_execute.side_effect = [HttpError(Mock(status=500), b"Server error"), {"id": "f1"}]

        api = GDriveAPI(MagicMock())

        assert api.get_file("f1") == {"id": "f1"}
        assert mock_execute.call_count == 2

    def test_copy_file(self, drive_service):
        """Test copy_file names the copy and places it in the folder."""
        mock_copy = drive_service.files.return_value.copy
        mock_copy.return_value.execute.return_value = {"id": "new", "webViewLink": "https://x"}

        api = GDriveAPI(MagicMock())
        result = api.copy_file("tmpl", "Report - Alice", "folder1")

        assert result == {"id": "new", "webViewLink": "https://x"}
        mock_copy.assert_called_once_with(
            fileId="tmpl",
            body={"name": "Report - Alice", "parents": ["folder1"]},
            fields=ITEM_FIELDS,
            supportsAllDrives=True,
        )

    def test_copy_file_not_retried(self, drive_service):
        """Test that a failed copy is reported without a second attempt."""
        mock_execute = drive_service.files.return_value.copy.return_value.execute
        mock_execute.side_effect = HttpError(Mock(status=500), b"Server error")

        api = GDriveAPI(MagicMock())

        with pytest.raises(HttpError):
            api.copy_file("tmpl", "x", "folder1")
        assert mock_execute.call_count == 1

    def test_create_folder(self, drive_service):
        """Test create_folder creates a folder under the parent."""
        mock_create = drive_service.files.return_value.create
        mock_create.return_value.execute.return_value = {"id": "f2"}

        api = GDriveAPI(MagicMock())
        result = api.create_folder("Team A", "parent1")

        assert result == {"id": "f2"}
        mock_create.assert_called_once_with(
            body={"name": "Team A", "mimeType": FOLDER_MIME_TYPE, "parents": ["parent1"]},
            fields=ITEM_FIELDS,
            supportsAllDrives=True,
        )
