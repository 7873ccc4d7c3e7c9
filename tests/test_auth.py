"""Tests for API key validation and the Google OAuth credential handle."""
import json
from unittest.mock import MagicMock, patch

import pytest
from fastapi import HTTPException
from google.auth.exceptions import RefreshError

from workout_notion_sync.auth import OOB_REDIRECT_URI, GoogleSheetsAuth, validate_api_key
from workout_notion_sync.errors import ConfigurationMissingError


class TestValidateApiKey:

    def test_simple_key(self):
        with patch("workout_notion_sync.auth.settings") as mock_settings:
            mock_settings.API_KEYS = "sk_test_abc, sk_test_def"
            assert validate_api_key("sk_test_def") == "admin"

    def test_key_with_user(self):
        with patch("workout_notion_sync.auth.settings") as mock_settings:
            mock_settings.API_KEYS = "sk_test_abc"
            assert validate_api_key("sk_test_abc:user_42") == "user_42"

    def test_invalid_key(self):
        with patch("workout_notion_sync.auth.settings") as mock_settings:
            mock_settings.API_KEYS = "sk_test_abc"
            with pytest.raises(HTTPException) as exc_info:
                validate_api_key("sk_wrong")
        assert exc_info.value.status_code == 401

    def test_no_keys_configured(self):
        with patch("workout_notion_sync.auth.settings") as mock_settings:
            mock_settings.API_KEYS = ""
            with pytest.raises(HTTPException) as exc_info:
                validate_api_key("anything")
        assert "not configured" in exc_info.value.detail


def test_missing_header_is_401(client):
    from workout_notion_sync.main import app
    app.dependency_overrides.clear()

    response = client.post("/parse/cell", json={"text": "A. Squat"})

    assert response.status_code == 401


# ---------------------------------------------------------------------------
# GoogleSheetsAuth
# ---------------------------------------------------------------------------


@pytest.fixture
def paths(tmp_path):
    return {
        "credentials_path": str(tmp_path / "credentials.json"),
        "token_path": str(tmp_path / "token.json"),
    }


def write_client_config(path, redirect_uris):
    with open(path, "w") as f:
        json.dump({"installed": {"client_id": "cid", "client_secret": "sec", "redirect_uris": redirect_uris}}, f)


class TestGoogleSheetsAuth:

    def test_valid_cached_token(self, paths):
        creds = MagicMock(valid=True)
        with open(paths["token_path"], "w") as f:
            f.write("{}")
        with patch("workout_notion_sync.auth.Credentials.from_authorized_user_file", return_value=creds) as load:
            auth = GoogleSheetsAuth(**paths)
            assert auth.authenticate() is creds
            assert auth.credentials is creds

        load.assert_called_once()
        creds.refresh.assert_not_called()

    def test_expired_token_refreshed_and_stored(self, paths):
        creds = MagicMock(valid=False, refresh_token="r")
        creds.to_json.return_value = '{"token": "new"}'
        auth = GoogleSheetsAuth(**paths)
        auth._credentials = creds

        assert auth.authenticate() is creds

        creds.refresh.assert_called_once()
        with open(paths["token_path"]) as f:
            assert json.load(f) == {"token": "new"}

    def test_refresh_failure_falls_back_to_consent(self, paths):
        write_client_config(paths["credentials_path"], ["http://localhost"])
        stale = MagicMock(valid=False, refresh_token="r")
        stale.refresh.side_effect = RefreshError("revoked")
        fresh = MagicMock()
        fresh.to_json.return_value = "{}"

        auth = GoogleSheetsAuth(**paths)
        auth._credentials = stale
        with patch("workout_notion_sync.auth.InstalledAppFlow.from_client_config") as from_config:
            from_config.return_value.run_local_server.return_value = fresh
            assert auth.authenticate() is fresh

        from_config.return_value.run_local_server.assert_called_once_with(
            port=0, access_type="offline", prompt="consent"
        )

    def test_no_refresh_token_triggers_consent(self, paths):
        write_client_config(paths["credentials_path"], ["http://localhost"])
        fresh = MagicMock()
        fresh.to_json.return_value = "{}"
        auth = GoogleSheetsAuth(**paths)
        auth._credentials = MagicMock(valid=False, refresh_token=None)

        with patch("workout_notion_sync.auth.InstalledAppFlow.from_client_config") as from_config:
            from_config.return_value.run_local_server.return_value = fresh
            assert auth.authenticate() is fresh

    def test_missing_client_file(self, paths):
        auth = GoogleSheetsAuth(**paths)
        with pytest.raises(ConfigurationMissingError, match="client file not found"):
            auth.authenticate()

    def test_oob_redirect_rejected(self, paths):
        write_client_config(paths["credentials_path"], [OOB_REDIRECT_URI, "http://localhost"])
        auth = GoogleSheetsAuth(**paths)
        with pytest.raises(ConfigurationMissingError, match="OOB"):
            auth.authenticate()

    def test_unreadable_token_cache_ignored(self, paths):
        with open(paths["token_path"], "w") as f:
            f.write("{broken")
        write_client_config(paths["credentials_path"], [OOB_REDIRECT_URI])
        auth = GoogleSheetsAuth(**paths)
        # Falls through to the consent flow, which then rejects the OOB client
        with pytest.raises(ConfigurationMissingError):
            auth.authenticate()

    def test_refresh_without_credentials(self, paths):
        with pytest.raises(ConfigurationMissingError):
            GoogleSheetsAuth(**paths).refresh_if_expired()
