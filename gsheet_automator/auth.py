#!/usr/bin/env python3
"""
Shared authentication module for Google API access.
Provides service account credential management for Google Sheets, Drive, and Gmail APIs.
"""

from google.oauth2 import service_account
import os

# Combined scopes required by all commands
SCOPES = [
    "https://www.googleapis.com/auth/spreadsheets",  # Read rows, write status column
    "https://www.googleapis.com/auth/drive",  # Copy templates, create folders
    "https://www.googleapis.com/auth/gmail.readonly",  # Read draft templates
    "https://www.googleapis.com/auth/gmail.send",  # Send merged messages
]

# Get the project root directory
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
SERVICE_ACCOUNT_CREDENTIALS = os.path.join(
    PROJECT_ROOT, "service-account-credentials.json"
)


def get_oauth_credentials(
    service_account_credentials: str | None = None,
    scopes=None,
    delegated_user: str | None = None,
):
    """
    Get service account credentials using a JSON key file. Defaults to service-account-credentials.json in repo root.

    Args:
        service_account_credentials: Optional path to a service account key JSON.
        scopes: Optional list of scopes to request.
        delegated_user: Optional mailbox to impersonate through domain-wide
            delegation. Required for Gmail, which has no service account mailbox.

    Returns:
        google.oauth2.service_account.Credentials: Service account credentials object

    Raises:
        FileNotFoundError: If the credentials file is not found
    """
    key_path = service_account_credentials or SERVICE_ACCOUNT_CREDENTIALS
    if not os.path.exists(key_path):
        raise FileNotFoundError(
            f"Service account credentials file '{key_path}' not found. "
            "Please download service account credentials from Google Cloud Console."
        )

    requested_scopes = scopes or SCOPES

    creds = service_account.Credentials.from_service_account_file(
        key_path, scopes=requested_scopes
    )
    if delegated_user:
        creds = creds.with_subject(delegated_user)

    return creds


def load_credentials(service_account_credentials: str, delegated_user: str | None = None):
    """
    Load service-account credentials from a provided path.

    Raises:
        ValueError: If service_account_credentials is empty
        FileNotFoundError: If the credentials file is not found
    """
    if not service_account_credentials:
        raise ValueError("service_account_credentials is required.")
    if not os.path.exists(service_account_credentials):
        raise FileNotFoundError(
            f"Credentials file not found: {service_account_credentials}"
        )
    return get_oauth_credentials(
        service_account_credentials=service_account_credentials,
        scopes=SCOPES,
        delegated_user=delegated_user,
    )
