from __future__ import annotations

import logging
from pathlib import Path
from zipfile import BadZipFile

from heatsheet.config import DEFAULT_TABLE, HEADER_SCAN_ROWS, SUPPORTED_SUFFIXES
from heatsheet.models import DIMENSION_ORDER, FieldId

logger = logging.getLogger(__name__)

HEAT_LANE = "HEAT_LANE"

HEADER_ALIASES = {
    FieldId.RACE: {"race", "event", "дистанция", "вид"},
    FieldId.HEAT: {"heat"},
    FieldId.LANE: {"lane", "дорожка"},
    FieldId.NAME: {"name", "swimmer", "фи", "ф. и.", "фио", "участник"},
    FieldId.AGEGROUP: {"age group", "agegroup", "age", "возрастная группа", "группа"},
    FieldId.ACADEMY: {"academy", "club", "team", "команда", "школа"},
    HEAT_LANE: {"heat/lane", "заплыв", "заплыв/дорожка"},
}


class ExcelImportError(ValueError):
    """Raised when a results file cannot be parsed as supported Excel."""


def _normalize(value: object) -> str:
    return str(value or "").strip().lower()


def _find_columns(header_row: list[object]) -> dict[str, int]:
    mapping: dict[str, int] = {}
    for idx, raw in enumerate(header_row):
        h = _normalize(raw)
        for key, aliases in HEADER_ALIASES.items():
            if h in aliases and key not in mapping:
                mapping[key] = idx
    return mapping


def _parse_heat_lane(text: object) -> tuple[str | None, int | None]:
    raw = str(text or "").strip().replace(" ", "")
    if not raw or "/" not in raw:
        return None, None
    a, b = raw.split("/", 1)
    if a.isdigit() and b.isdigit():
        return f"Heat {int(a)}", int(b)
    return None, None


def _file_debug_message(file_path: Path) -> str:
    exists = file_path.exists()
    size = file_path.stat().st_size if exists else 0
    return f"Selected: {file_path}; exists={exists}; size={size}; suffix={file_path.suffix.lower()}"


def _validate_input_file(file_path: Path) -> None:
    suffix = file_path.suffix.lower()
    if suffix == ".xls":
        raise ExcelImportError("The .xls format is not supported. Save the file as .xlsx and try again.")
    if not file_path.exists():
        raise ExcelImportError("The selected file does not exist.")
    if file_path.stat().st_size == 0:
        raise ExcelImportError("The selected file is empty (0 bytes).")
    if suffix not in SUPPORTED_SUFFIXES:
        raise ExcelImportError("Only .xlsx and .xlsm files are supported.")


def _header_index(rows: list[tuple]) -> int:
    for i, row in enumerate(rows[:HEADER_SCAN_ROWS]):
        if any(_normalize(c) in HEADER_ALIASES[FieldId.NAME] for c in row):
            return i
    return 0


def _sheet_rows(title: str, rows: list[tuple]) -> list[list[object]]:
    header_idx = _header_index(rows)
    cols = _find_columns(list(rows[header_idx]))
    if FieldId.NAME not in cols:
        logger.debug("Skipping sheet %r: no swimmer name column", title)
        return []

    result: list[list[object]] = []
    for row in rows[header_idx + 1 :]:
        if all(c is None or str(c).strip() == "" for c in row):
            continue
        values = {key: row[idx] if idx < len(row) else None for key, idx in cols.items()}
        if FieldId.RACE not in cols:
            values[FieldId.RACE] = title
        if HEAT_LANE in values:
            heat, lane = _parse_heat_lane(values.pop(HEAT_LANE))
            values.setdefault(FieldId.HEAT, heat)
            values.setdefault(FieldId.LANE, lane)
        result.append([values.get(field_id) for field_id in DIMENSION_ORDER])
    return result


def results_fields() -> list[dict[str, str]]:
    return [{"id": field_id, "name": field_id.title()} for field_id in DIMENSION_ORDER]


def load_results_workbook(path: Path, sheet: str | None = None) -> tuple[list[list[object]], list[dict[str, str]]]:
    """Read a results workbook into flat rows plus field descriptors.

    Every row is laid out in ``DIMENSION_ORDER``. A sheet without a race
    column contributes its title as the race name.
    """
    logger.debug(_file_debug_message(path))
    _validate_input_file(path)

    try:
        from openpyxl import load_workbook
        from openpyxl.utils.exceptions import InvalidFileException
    except ModuleNotFoundError as exc:
        raise ExcelImportError("openpyxl is not installed. Install the application dependencies.") from exc

    try:
        wb = load_workbook(path, data_only=True)
    except (BadZipFile, InvalidFileException) as exc:
        raise ExcelImportError("Could not open the Excel file. Check that it is a valid .xlsx/.xlsm file.") from exc

    try:
        if sheet is not None and sheet not in wb.sheetnames:
            raise ExcelImportError(f"Sheet {sheet!r} not found in {path.name}.")
        worksheets = [wb[sheet]] if sheet is not None else wb.worksheets
        rows: list[list[object]] = []
        for ws in worksheets:
            sheet_rows = list(ws.iter_rows(values_only=True))
            if sheet_rows:
                rows.extend(_sheet_rows(ws.title, sheet_rows))
    finally:
        wb.close()

    logger.info("Loaded %d result rows from %s", len(rows), path.name)
    return rows, results_fields()


def build_message(rows: list, fields: list, table: str = DEFAULT_TABLE) -> dict:
    return {"data": {"tables": {table: rows}, "fields": {table: fields}}}
