"""
Authentication module.

- GoogleSheetsAuth: OAuth credential handle for the Sheets/Drive APIs, with a
  JSON token cache and refresh-on-expiry.
- get_current_user: FastAPI dependency validating the X-API-Key header.
"""
import json
import logging
import os
from typing import Any, Dict, List, Optional

from fastapi import HTTPException, Header
from google.auth.exceptions import RefreshError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow

from workout_notion_sync.config import settings
from workout_notion_sync.errors import ConfigurationMissingError

logger = logging.getLogger(__name__)

SCOPES = [
    "https://www.googleapis.com/auth/spreadsheets",
    "https://www.googleapis.com/auth/drive.metadata.readonly",
]

OOB_REDIRECT_URI = "urn:ietf:wg:oauth:2.0:oob"


class GoogleSheetsAuth:
    """
    Explicit credential handle passed to GoogleSheetsService.

    Loads the OAuth client secrets and cached token, refreshes the access
    token when it has expired and writes every refreshed token back to the
    cache. Falls back to the interactive installed-app flow when there is no
    usable token.
    """

    def __init__(
        self,
        credentials_path: Optional[str] = None,
        token_path: Optional[str] = None,
        scopes: Optional[List[str]] = None,
    ):
        self.credentials_path = credentials_path or settings.GOOGLE_CREDENTIALS_PATH
        self.token_path = token_path or settings.GOOGLE_TOKEN_PATH
        self.scopes = scopes or SCOPES
        self._credentials: Optional[Credentials] = None

    def authenticate(self) -> Credentials:
        """Return valid credentials, refreshing or re-authorizing as needed."""
        if self._credentials is None:
            self._credentials = self._load_token()

        if self._credentials is not None:
            try:
                self.refresh_if_expired()
                return self._credentials
            except RefreshError as e:
                logger.warning(f"Token refresh failed, requesting a new token: {e}")

        self._credentials = self._run_consent_flow()
        return self._credentials

    @property
    def credentials(self) -> Credentials:
        return self.authenticate()

    def refresh_if_expired(self) -> None:
        """Refresh the access token if it is missing or expired."""
        creds = self._credentials
        if creds is None:
            raise ConfigurationMissingError("No Google credentials loaded")
        if creds.valid:
            return
        if not creds.refresh_token:
            raise RefreshError("Token expired and no refresh token available")

        logger.info("Refreshing Google access token")
        creds.refresh(Request())
        self._store_token(creds)

    def _load_client_config(self) -> Dict[str, Any]:
        if not os.path.exists(self.credentials_path):
            raise ConfigurationMissingError(
                f"Google OAuth client file not found: {self.credentials_path}"
            )
        with open(self.credentials_path, "r", encoding="utf-8") as f:
            client_config = json.load(f)

        client = client_config.get("installed") or client_config.get("web") or {}
        redirect_uris = client.get("redirect_uris") or []
        if any(OOB_REDIRECT_URI in uri for uri in redirect_uris if isinstance(uri, str)):
            raise ConfigurationMissingError(
                f"The OAuth client in {self.credentials_path} uses the deprecated OOB redirect URI, "
                "which Google rejects. Create a 'Desktop app' OAuth client and download its JSON."
            )
        return client_config

    def _load_token(self) -> Optional[Credentials]:
        if not os.path.exists(self.token_path):
            return None
        try:
            return Credentials.from_authorized_user_file(self.token_path, self.scopes)
        except (ValueError, json.JSONDecodeError) as e:
            logger.warning(f"Ignoring unreadable token cache {self.token_path}: {e}")
            return None

    def _run_consent_flow(self) -> Credentials:
        flow = InstalledAppFlow.from_client_config(self._load_client_config(), self.scopes)
        creds = flow.run_local_server(port=0, access_type="offline", prompt="consent")
        self._store_token(creds)
        return creds

    def _store_token(self, creds: Credentials) -> None:
        with open(self.token_path, "w", encoding="utf-8") as f:
            f.write(creds.to_json())
        logger.info(f"Token stored to {self.token_path}")


# ---------------------------------------------------------------------------
# HTTP API key
# ---------------------------------------------------------------------------


async def get_current_user(
    x_api_key: Optional[str] = Header(None, alias="X-API-Key")
) -> str:
    """
    Authenticate via API key.
    Returns user_id string.
    """
    if x_api_key:
        return validate_api_key(x_api_key)

    raise HTTPException(
        status_code=401,
        detail="Missing authentication. Provide an X-API-Key header."
    )


def validate_api_key(api_key: str) -> str:
    """
    Validate API key and return user_id.

    API key format options:
    - Simple: "sk_test_abc123" -> returns "admin"
    - With user: "sk_test_abc123:user_12345" -> returns "user_12345"
    """
    valid_keys = [k.strip() for k in settings.API_KEYS.split(",") if k.strip()]

    if not valid_keys:
        logger.warning("No API keys configured (API_KEYS env var empty)")
        raise HTTPException(status_code=401, detail="API key authentication not configured")

    key_part = api_key.split(":")[0]

    if key_part not in valid_keys:
        raise HTTPException(status_code=401, detail="Invalid API key")

    if ":" in api_key:
        return api_key.split(":", 1)[1]

    return "admin"
