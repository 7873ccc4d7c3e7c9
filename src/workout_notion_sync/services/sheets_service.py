"""Google Sheets / Drive client wrapper: locate a sheet, read cells, write cell notes."""

import logging
from typing import Any, Dict, List, Optional

from googleapiclient.discovery import build

from workout_notion_sync.auth import GoogleSheetsAuth
from workout_notion_sync.errors import RemoteCallError
from workout_notion_sync.models import SheetInfo
from workout_notion_sync.utils import cell_reference_to_indices

logger = logging.getLogger(__name__)

SPREADSHEET_MIME_TYPE = "application/vnd.google-apps.spreadsheet"


class GoogleSheetsService:
    """Wrapper around the Sheets v4 and Drive v3 discovery clients."""

    def __init__(self, auth: GoogleSheetsAuth):
        self.auth = auth
        self._sheets = None
        self._drive = None

    def _sheets_api(self):
        creds = self.auth.authenticate()
        if self._sheets is None:
            self._sheets = build("sheets", "v4", credentials=creds, cache_discovery=False)
        return self._sheets

    def _drive_api(self):
        creds = self.auth.authenticate()
        if self._drive is None:
            self._drive = build("drive", "v3", credentials=creds, cache_discovery=False)
        return self._drive

    def find_sheet(self, owner_email: str, title: str) -> Optional[SheetInfo]:
        """
        Find a spreadsheet by exact title among files owned by owner_email.

        Returns:
            SheetInfo for the first match, or None
        """
        escaped = title.replace("\\", "\\\\").replace("'", "\\'")
        query = (
            f"name='{escaped}' and '{owner_email}' in owners "
            f"and mimeType='{SPREADSHEET_MIME_TYPE}'"
        )
        try:
            response = self._drive_api().files().list(
                q=query,
                fields="files(id, name, webViewLink)",
            ).execute()
        except Exception as e:
            raise RemoteCallError("find_sheet", f"'{title}' owned by {owner_email}", e) from e

        files = response.get("files") or []
        if not files:
            logger.warning(f"No spreadsheet titled '{title}' owned by {owner_email}")
            return None

        file = files[0]
        return SheetInfo(id=file["id"], name=file["name"], url=file.get("webViewLink"))

    def get_range(self, spreadsheet_id: str, range_spec: str) -> List[List[Any]]:
        """Cell values for an A1 range. Trailing empty cells and rows are omitted by the API."""
        try:
            response = self._sheets_api().spreadsheets().values().get(
                spreadsheetId=spreadsheet_id,
                range=range_spec,
            ).execute()
        except Exception as e:
            raise RemoteCallError("get_range", f"{spreadsheet_id}!{range_spec}", e) from e

        values = response.get("values") or []
        logger.info(f"Read {len(values)} rows from {range_spec}")
        return values

    def get_sheet_metadata(self, spreadsheet_id: str) -> Dict[str, Any]:
        """Spreadsheet and per-sheet properties."""
        try:
            return self._sheets_api().spreadsheets().get(
                spreadsheetId=spreadsheet_id,
                fields="properties,sheets.properties",
            ).execute()
        except Exception as e:
            raise RemoteCallError("get_sheet_metadata", spreadsheet_id, e) from e

    def set_cell_note(
        self,
        spreadsheet_id: str,
        row_index: int,
        col_index: int,
        text: str,
        sheet_id: int = 0,
    ) -> None:
        """Replace the note on one cell (zero-based row/column)."""
        request = {
            "updateCells": {
                "rows": [{"values": [{"note": text}]}],
                "fields": "note",
                "range": {
                    "sheetId": sheet_id,
                    "startRowIndex": row_index,
                    "endRowIndex": row_index + 1,
                    "startColumnIndex": col_index,
                    "endColumnIndex": col_index + 1,
                },
            }
        }
        try:
            self._sheets_api().spreadsheets().batchUpdate(
                spreadsheetId=spreadsheet_id,
                body={"requests": [request]},
            ).execute()
        except Exception as e:
            raise RemoteCallError("set_cell_note", f"{spreadsheet_id} ({row_index}, {col_index})", e) from e

    def add_note_to_cell(self, spreadsheet_id: str, cell_reference: str, text: str, sheet_id: int = 0) -> None:
        """set_cell_note addressed by an A1 reference such as 'B2'."""
        row_index, col_index = cell_reference_to_indices(cell_reference)
        self.set_cell_note(spreadsheet_id, row_index, col_index, text, sheet_id=sheet_id)
        logger.info(f"Wrote note to {cell_reference}")
