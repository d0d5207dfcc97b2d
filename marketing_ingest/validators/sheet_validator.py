"""
marketing_ingest/validators/sheet_validator.py

Structural validation of a located sheet before its rows are normalized.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Sequence

from marketing_ingest.domain.sheet_table import Sheet
from marketing_ingest.mappers.field_values import normalize_header


@dataclass(frozen=True)
class SheetErrorDetail:
    """
    Structured sheet validation error detail.
    """

    code: str
    message: str
    field: str | None = None
    context: dict[str, Any] | None = None


class DatasetMalformedError(ValueError):
    """
    Raised when a located sheet has a structure no normalizer can read.
    """

    def __init__(self, *, message: str, errors: Sequence[SheetErrorDetail] = ()) -> None:
        super().__init__(message)
        self.message = message
        self.errors = tuple(errors)

    def to_dict(self) -> dict[str, Any]:
        return {
            "message": self.message,
            "errors": [
                {
                    "code": error.code,
                    "message": error.message,
                    "field": error.field,
                    "context": error.context,
                }
                for error in self.errors
            ],
        }


class SheetValidator:
    """
    Checks that a sheet exposes the columns a normalizer depends on.

    ``required_fields`` must all be present. When ``known_fields`` is given,
    at least one of them must be present too, which rejects sheets that share
    no columns at all with the expected export.
    """

    def __init__(
        self,
        *,
        aliases: Mapping[str, Sequence[str]],
        required_fields: Sequence[str] = (),
        known_fields: Sequence[str] = (),
    ) -> None:
        self._aliases = {field: tuple(values) for field, values in aliases.items()}
        self._required_fields = tuple(required_fields)
        self._known_fields = tuple(known_fields)

    def validate(self, sheet: Sheet) -> None:
        if not sheet.headers:
            raise DatasetMalformedError(
                message=f"Sheet '{sheet.name}' has no header row.",
                errors=[SheetErrorDetail(code="empty_headers", message="No header row was found.")],
            )

        present = {normalize_header(header) for header in sheet.headers}
        errors: list[SheetErrorDetail] = []

        for field in self._required_fields:
            if not self._has_field(field, present):
                errors.append(
                    SheetErrorDetail(
                        code="required_column_missing",
                        message="Required column is missing.",
                        field=field,
                        context={"accepted_headers": list(self._aliases.get(field, ()))},
                    )
                )

        if self._known_fields and not any(self._has_field(field, present) for field in self._known_fields):
            errors.append(
                SheetErrorDetail(
                    code="no_known_columns",
                    message="None of the expected columns are present.",
                    context={"headers": list(sheet.headers)},
                )
            )

        if errors:
            missing = ", ".join(error.field for error in errors if error.field) or "all expected columns"
            raise DatasetMalformedError(
                message=f"Sheet '{sheet.name}' is malformed. Missing: {missing}.",
                errors=errors,
            )

    def _has_field(self, field: str, present_headers: set[str]) -> bool:
        return any(normalize_header(alias) in present_headers for alias in self._aliases.get(field, ()))
