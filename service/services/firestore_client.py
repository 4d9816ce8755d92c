"""
Shared Firestore AsyncClient construction for the Firestore-backed stores.

Uses a service account JSON file; project id comes from config or the file itself.
"""

import json
from pathlib import Path
from typing import Optional, Union


def _project_id_from_credentials_file(credentials_path: Union[Path, str]) -> Optional[str]:
    """Read project_id from a Google service account JSON file if present."""
    path = Path(credentials_path)
    if not path.is_file():
        return None
    try:
        with open(path) as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError):
        return None
    return data.get("project_id") or data.get("projectId")


def create_async_client(
    project_id: Optional[str] = None,
    credentials_path: Optional[Union[Path, str]] = None,
):
    """Return a google.cloud.firestore.AsyncClient for the given credentials."""
    try:
        from google.cloud.firestore import AsyncClient
        from google.oauth2 import service_account
    except ImportError:
        raise ImportError(
            "google-cloud-firestore is required for Firestore stores. pip install google-cloud-firestore"
        )
    if not credentials_path:
        return AsyncClient(project=project_id)
    resolved = str(Path(credentials_path).resolve())
    creds = service_account.Credentials.from_service_account_file(resolved)
    proj = project_id or _project_id_from_credentials_file(resolved)
    return AsyncClient(project=proj, credentials=creds)
