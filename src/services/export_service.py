"""Spreadsheet export of registered entries."""
import io
import logging
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union

import pandas as pd

from src.models.attendee import AttendeeRecord
from src.utils.config import EXPORT_PREFIX, EXPORT_SHEET_NAME
from src.utils.exceptions import NothingToExportError

logger = logging.getLogger(__name__)


def export_filename(today: Optional[date] = None) -> str:
    """
    Build the export filename.

    Args:
        today: Date to embed (defaults to the current UTC date)

    Returns:
        str: e.g. "NOESIS_registrations_2025-11-15.xlsx"
    """
    if today is None:
        today = datetime.now(timezone.utc).date()
    return f"{EXPORT_PREFIX}{today.isoformat()}.xlsx"


def build_export_rows(records: Sequence[AttendeeRecord]) -> List[Dict[str, str]]:
    """One row per record, keys in record order."""
    return [record.to_dict() for record in records]


def export_to_excel(records: Sequence[AttendeeRecord]) -> bytes:
    """
    Serialize records to an .xlsx workbook.

    Args:
        records: Records in current store order

    Returns:
        bytes: Workbook with a single "Registrations" sheet

    Raises:
        NothingToExportError: If there are no records
    """
    if not records:
        raise NothingToExportError("Nothing to export")

    # dtype=str keeps phone numbers and numeric ids as text
    df = pd.DataFrame(build_export_rows(records), dtype=str)

    buffer = io.BytesIO()
    with pd.ExcelWriter(buffer, engine="openpyxl") as xw:
        df.to_excel(xw, sheet_name=EXPORT_SHEET_NAME, index=False)
        _force_text_cells(xw.sheets[EXPORT_SHEET_NAME])

    logger.debug("Built workbook for %d entries", len(records))
    return buffer.getvalue()


def _force_text_cells(sheet) -> None:
    """Store every string cell as text; openpyxl turns "=..." values into formulas."""
    for row in sheet.iter_rows():
        for cell in row:
            if isinstance(cell.value, str):
                cell.data_type = "s"


def write_export(
    records: Sequence[AttendeeRecord],
    directory: Union[str, Path],
    today: Optional[date] = None,
) -> Path:
    """
    Write the workbook to disk under the export filename.

    Raises:
        NothingToExportError: If there are no records
    """
    content = export_to_excel(records)

    out_dir = Path(directory)
    out_dir.mkdir(parents=True, exist_ok=True)
    out_path = out_dir / export_filename(today)
    out_path.write_bytes(content)
    return out_path
