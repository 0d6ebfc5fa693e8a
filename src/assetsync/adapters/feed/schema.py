"""Pydantic model describing one row of the fixed-asset feed."""

from __future__ import annotations

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


class FeedBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True, str_strip_whitespace=True)


class FeedAssetRow(FeedBaseModel):
    asset_no: str | None = Field(default=None, validation_alias=AliasChoices("Asset", "AssetNo"))
    sub_number: str | None = Field(
        default=None, validation_alias=AliasChoices("Subnumber", "SNo.")
    )
    description: str | None = Field(
        default=None, validation_alias=AliasChoices("Asset description", "Description")
    )
    plant_code: str | None = Field(default=None, validation_alias="Plant")
    cost_center: str | None = Field(default=None, validation_alias="Cost Center")
    capitalized_on: str | None = Field(default=None, validation_alias="Capitalized on")
    deactivated_on: str | None = Field(default=None, validation_alias="Deactivation on")

    _normalize_blanks = field_validator(
        "asset_no",
        "sub_number",
        "description",
        "plant_code",
        "cost_center",
        "capitalized_on",
        "deactivated_on",
        mode="before",
    )(_blank_to_none)

    @property
    def business_key(self) -> str | None:
        """Asset number, suffixed with ``-<subnumber>`` for non-zero subnumbers."""

        if self.asset_no is None:
            return None
        sub = (self.sub_number or "").lstrip("0")
        return f"{self.asset_no}-{sub}" if sub else self.asset_no

    @property
    def is_source_active(self) -> bool:
        return self.deactivated_on is None or _is_empty_date(self.deactivated_on)


def _is_empty_date(value: str) -> bool:
    # the feed writes unset dates as all-zero placeholders
    return not value.strip("0./- ")
