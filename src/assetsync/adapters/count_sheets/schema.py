"""Pydantic model for one row of a bulk count sheet."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, field_validator

from assetsync.domain.codes import to_count_method, to_status_code
from assetsync.domain.model.enums import CountMethod
from assetsync.domain.stocktake.dto import CountImportRow
from assetsync.domain.validation import to_text


class CountSheetRow(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    asset_no: str
    status_code: str
    count_method: str = CountMethod.EXCEL.value
    note_text: str | None = None

    @field_validator("asset_no", mode="before")
    @classmethod
    def _trim_asset_no(cls, value: object) -> str:
        return str(value if value is not None else "").strip()

    @field_validator("status_code", mode="before")
    @classmethod
    def _normalize_status(cls, value: object) -> str:
        return to_status_code(value)

    @field_validator("count_method", mode="before")
    @classmethod
    def _normalize_method(cls, value: object) -> str:
        # sheets without a method column were exported from the spreadsheet workflow
        if value is None or not str(value).strip():
            return CountMethod.EXCEL.value
        return to_count_method(value)

    @field_validator("note_text", mode="before")
    @classmethod
    def _clip_note(cls, value: object) -> str | None:
        return to_text(value)

    def to_import_row(self) -> CountImportRow:
        return CountImportRow(
            asset_no=self.asset_no,
            status_code=self.status_code,
            count_method=self.count_method,
            note_text=self.note_text,
        )
