"""
Test fixtures for workout-notion-sync.

Provides fake Notion / Google collaborators and sample cell text so tests run
offline and deterministically.
"""

import json
import sys
from pathlib import Path
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

# Repo root: .../workout-notion-sync
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

# Make src/ importable so tests can do `import workout_notion_sync...`
for p in {ROOT, SRC}:
    p_str = str(p)
    if p_str not in sys.path:
        sys.path.insert(0, p_str)

from workout_notion_sync.main import app
from workout_notion_sync.auth import get_current_user
from workout_notion_sync.services.notion_service import NotionService


# ---------------------------------------------------------------------------
# Auth Mock
# ---------------------------------------------------------------------------


TEST_USER_ID = "test-user-123"


async def mock_get_current_user() -> str:
    """Mock auth dependency that returns a test user."""
    return TEST_USER_ID


@pytest.fixture
def client() -> TestClient:
    """Per-test FastAPI TestClient with auth overridden."""
    app.dependency_overrides[get_current_user] = mock_get_current_user
    yield TestClient(app)
    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Sample Data Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def sample_cell_text() -> str:
    """Typical coach-written cell."""
    return (
        "Focus on tempo this week\n"
        "A. Warm-up\n"
        "5 min cardio\n"
        "https://youtu.be/abc12345678\n"
        "\n"
        "B1. Squat 4x8\n"
        "Pause at bottom youtube.com/shorts/dQw4w9WgXcQ\n"
        "Upper body:\n"
        "Push-ups 3x12\n"
        "Rows 3x10"
    )


@pytest.fixture
def config_file(tmp_path) -> Path:
    """A valid config.json in a temp directory."""
    path = tmp_path / "config.json"
    path.write_text(json.dumps({
        "notion": {"token": "secret_test", "parentPageId": "parent-123"},
        "defaults": {"sheetOwner": "coach@example.com", "sheetTitle": "Training Plan", "cellRange": "B2:E5"},
        "week": 3,
    }))
    return path


@pytest.fixture
def mock_notion_client() -> MagicMock:
    client = MagicMock()
    client.pages.create.return_value = {"id": "page-abc"}
    return client


@pytest.fixture
def notion_service(mock_notion_client) -> NotionService:
    return NotionService(token="secret_test", parent_page_id="parent-123", client=mock_notion_client)
