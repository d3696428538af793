import logging
from typing import Any, Dict, List

from google.oauth2 import service_account
from googleapiclient.discovery import build

from ..layout.engine import a1_range
from .models import CellStyle, CellValue, TableHandle

logger = logging.getLogger(__name__)


class SheetError(Exception):
    """Custom exception for sheet-related errors"""

    pass


class GoogleSheetsClient:
    """Handles all Google Sheets operations"""

    SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]

    def __init__(
        self,
        spreadsheet_id: str,
        credentials_path: str,
    ):
        self.spreadsheet_id = spreadsheet_id
        self.credentials_path = credentials_path
        self.service = self._build_sheets_service()

    def _build_sheets_service(self):
        """Create and return an authorized Sheets API service object"""
        try:
            creds = service_account.Credentials.from_service_account_file(
                self.credentials_path, scopes=self.SCOPES
            )
            return build("sheets", "v4", credentials=creds)
        except Exception as e:
            logger.error(f"Failed to build sheets service: {e}")
            raise SheetError(f"Could not initialize sheets service: {str(e)}") from e

    @staticmethod
    def _qualified_range(table: TableHandle, cells: str) -> str:
        """Prefix an A1 range with the quoted sheet title"""
        title = table.name.replace("'", "''")
        return f"'{title}'!{cells}"

    @staticmethod
    def _grid_range(
        table: TableHandle, row: int, column: int, row_span: int, column_span: int
    ) -> Dict[str, int]:
        """Convert 1-based coordinates to a 0-based, end-exclusive GridRange"""
        return {
            "sheetId": table.sheet_id,
            "startRowIndex": row - 1,
            "endRowIndex": row - 1 + row_span,
            "startColumnIndex": column - 1,
            "endColumnIndex": column - 1 + column_span,
        }

    def get_or_create_table(self, name: str) -> TableHandle:
        """Return the sheet with the given title, adding it if it doesn't exist"""
        try:
            result = (
                self.service.spreadsheets()
                .get(spreadsheetId=self.spreadsheet_id, fields="sheets.properties")
                .execute()
            )
        except Exception as e:
            logger.error(f"Error reading spreadsheet sheets: {e}")
            raise SheetError(f"Failed to look up sheet {name}: {str(e)}") from e

        for sheet in result.get("sheets", []):
            properties = sheet.get("properties", {})
            if properties.get("title") == name:
                return TableHandle(name=name, sheet_id=properties["sheetId"])

        logger.info(f"Creating sheet: {name}")
        try:
            response = (
                self.service.spreadsheets()
                .batchUpdate(
                    spreadsheetId=self.spreadsheet_id,
                    body={"requests": [{"addSheet": {"properties": {"title": name}}}]},
                )
                .execute()
            )
        except Exception as e:
            logger.error(f"Error creating sheet: {e}")
            raise SheetError(f"Failed to create sheet {name}: {str(e)}") from e

        sheet_id = response["replies"][0]["addSheet"]["properties"]["sheetId"]
        return TableHandle(name=name, sheet_id=sheet_id)

    def write_range(
        self,
        table: TableHandle,
        row: int,
        column: int,
        row_span: int,
        column_span: int,
        values: List[List[CellValue]],
    ) -> None:
        """Write values or formulas into a rectangle of cells"""
        if len(values) != row_span or any(len(line) != column_span for line in values):
            raise ValueError(
                f"Values do not fill a {row_span}x{column_span} range starting at row {row}"
            )

        range_name = self._qualified_range(
            table, a1_range(row, column, row_span, column_span)
        )
        try:
            self.service.spreadsheets().values().update(
                spreadsheetId=self.spreadsheet_id,
                range=range_name,
                valueInputOption="USER_ENTERED",
                body={"values": values},
            ).execute()
        except Exception as e:
            logger.error(f"Error writing range {range_name}: {e}")
            raise SheetError(f"Failed to write range {range_name}: {str(e)}") from e

    def style_range(
        self,
        table: TableHandle,
        row: int,
        column: int,
        row_span: int,
        column_span: int,
        style: CellStyle,
    ) -> None:
        """Apply alignment and an outer border to a rectangle of cells"""
        grid_range = self._grid_range(table, row, column, row_span, column_span)
        requests: List[Dict[str, Any]] = []

        cell_format = {}
        if style.horizontal_alignment is not None:
            cell_format["horizontalAlignment"] = style.horizontal_alignment.value
        if style.vertical_alignment is not None:
            cell_format["verticalAlignment"] = style.vertical_alignment.value
        if cell_format:
            requests.append(
                {
                    "repeatCell": {
                        "range": grid_range,
                        "cell": {"userEnteredFormat": cell_format},
                        "fields": f"userEnteredFormat({','.join(cell_format)})",
                    }
                }
            )

        if style.outer_border:
            border = {"style": "SOLID"}
            requests.append(
                {
                    "updateBorders": {
                        "range": grid_range,
                        "top": border,
                        "bottom": border,
                        "left": border,
                        "right": border,
                    }
                }
            )

        if not requests:
            return

        try:
            self.service.spreadsheets().batchUpdate(
                spreadsheetId=self.spreadsheet_id, body={"requests": requests}
            ).execute()
        except Exception as e:
            logger.error(f"Error styling sheet {table.name}: {e}")
            raise SheetError(f"Failed to style sheet {table.name}: {str(e)}") from e

    def last_populated_row(self, table: TableHandle) -> int:
        """Return the index of the last row with content, 0 for an empty sheet"""
        range_name = self._qualified_range(table, "A:J")
        try:
            result = (
                self.service.spreadsheets()
                .values()
                .get(spreadsheetId=self.spreadsheet_id, range=range_name)
                .execute()
            )
        except Exception as e:
            logger.error(f"Error reading sheet rows: {e}")
            raise SheetError(f"Failed to read rows of {table.name}: {str(e)}") from e

        return len(result.get("values", []))
