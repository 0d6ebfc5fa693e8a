"""Parse uploaded count sheets (Excel workbooks or CSV) into count rows."""

from __future__ import annotations

import csv
import io
import re
from pathlib import PurePath
from typing import TYPE_CHECKING, Final

import xlrd
from openpyxl import load_workbook

from assetsync.domain.errors import ValidationError

from .schema import CountSheetRow

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator, Mapping, Sequence

    from assetsync.domain.ports.files import Upload
    from assetsync.domain.stocktake.dto import CountImportRow

EXCEL_EXTENSIONS: Final[frozenset[str]] = frozenset({".xlsx", ".xlsm"})
LEGACY_EXCEL_EXTENSIONS: Final[frozenset[str]] = frozenset({".xls"})
TEXT_EXTENSIONS: Final[frozenset[str]] = frozenset({".csv", ".txt", ""})

HEADER_ALIASES: Final[Mapping[str, tuple[str, ...]]] = {
    "asset_no": ("AssetNo", "Asset Number", "asset_no"),
    "status_code": ("StatusCode", "Status", "Result"),
    "note_text": ("NoteText", "Note", "Remark"),
    "count_method": ("CountMethod", "Method", "Source"),
}

_HEADER_NOISE = re.compile(r"[\s_.\-]+")


def normalize_header(value: object) -> str:
    text = str(value if value is not None else "").strip().lower().lstrip("\ufeff")
    return _HEADER_NOISE.sub("", text)


_ALIAS_LOOKUP: Final[dict[str, str]] = {
    normalize_header(alias): field
    for field, aliases in HEADER_ALIASES.items()
    for alias in aliases
}


def parse_count_sheet(upload: Upload) -> list[CountImportRow]:
    """Return the count rows in ``upload``; rows without an asset number are dropped."""

    if not upload.content:
        raise ValidationError("Import file is empty")

    extension = PurePath(upload.original_name or "").suffix.strip().lower()
    if extension in EXCEL_EXTENSIONS:
        records = _read_workbook(upload.content)
    elif extension in LEGACY_EXCEL_EXTENSIONS:
        records = _read_legacy_workbook(upload.content)
    elif extension in TEXT_EXTENSIONS:
        records = _read_csv(upload.content)
    else:
        raise ValidationError("Unsupported import file type. Use .csv, .xlsx, .xlsm or .xls")

    rows: list[CountImportRow] = []
    for record in records:
        mapped = _map_headers(record)
        if not str(mapped.get("asset_no") or "").strip():
            continue
        rows.append(CountSheetRow.model_validate(mapped).to_import_row())
    return rows


def _map_headers(record: Mapping[str, object]) -> dict[str, object]:
    mapped: dict[str, object] = {}
    for header, value in record.items():
        field = _ALIAS_LOOKUP.get(normalize_header(header))
        if field is not None and field not in mapped:
            mapped[field] = value
    mapped.setdefault("status_code", None)
    return mapped


def _read_csv(content: bytes) -> Iterable[dict[str, object]]:
    try:
        text = content.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise ValidationError("Import file is not valid UTF-8 text") from exc
    reader = csv.DictReader(io.StringIO(text, newline=""))
    for row in reader:
        values = {key: (value or "").strip() for key, value in row.items() if key is not None}
        if any(values.values()):
            yield values


def _read_workbook(content: bytes) -> list[dict[str, object]]:
    try:
        workbook = load_workbook(io.BytesIO(content), read_only=True, data_only=True)
    except Exception as exc:
        raise ValidationError(f"Import workbook could not be read: {exc}") from exc
    try:
        if not workbook.sheetnames:
            return []
        sheet = workbook[workbook.sheetnames[0]]
        return _sheet_records(sheet.iter_rows(values_only=True))
    finally:
        workbook.close()


def _read_legacy_workbook(content: bytes) -> list[dict[str, object]]:
    try:
        book = xlrd.open_workbook(file_contents=content, on_demand=True)
    except Exception as exc:
        raise ValidationError(f"Import workbook could not be read: {exc}") from exc
    try:
        if book.nsheets == 0:
            return []
        sheet = book.sheet_by_index(0)
        return _sheet_records(sheet.row_values(index) for index in range(sheet.nrows))
    finally:
        book.release_resources()


def _sheet_records(rows: Iterator[Sequence[object]]) -> list[dict[str, object]]:
    """Map each row after the first onto the first row's header names."""

    header = next(rows, None)
    if header is None:
        return []
    headers = [str(cell).strip() if cell is not None else "" for cell in header]
    records: list[dict[str, object]] = []
    for values in rows:
        record = {
            name: _cell_text(values[index] if index < len(values) else None)
            for index, name in enumerate(headers)
            if name
        }
        if any(record.values()):
            records.append(record)
    return records


def _cell_text(value: object) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()
