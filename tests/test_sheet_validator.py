from __future__ import annotations

import unittest

from marketing_ingest.domain.sheet_table import Sheet
from marketing_ingest.validators.sheet_validator import DatasetMalformedError, SheetValidator

ALIASES = {
    "date": ("时间", "Date"),
    "cost": ("消费", "Spend"),
}


class TestSheetValidator(unittest.TestCase):
    def test_required_column_present(self) -> None:
        validator = SheetValidator(aliases=ALIASES, required_fields=("date",))

        validator.validate(Sheet(name="小王投放", headers=("DATE", "消费")))

    def test_required_column_missing(self) -> None:
        validator = SheetValidator(aliases=ALIASES, required_fields=("date",))

        with self.assertRaises(DatasetMalformedError) as ctx:
            validator.validate(Sheet(name="小王投放", headers=("消费",)))

        self.assertIn("date", ctx.exception.message)
        self.assertEqual(ctx.exception.errors[0].code, "required_column_missing")
        self.assertEqual(ctx.exception.to_dict()["errors"][0]["field"], "date")

    def test_no_known_columns(self) -> None:
        validator = SheetValidator(aliases=ALIASES, known_fields=("date", "cost"))

        with self.assertRaises(DatasetMalformedError) as ctx:
            validator.validate(Sheet(name="Sheet1", headers=("foo", "bar")))

        self.assertEqual(ctx.exception.errors[0].code, "no_known_columns")

    def test_sheet_without_header_row(self) -> None:
        validator = SheetValidator(aliases=ALIASES)

        with self.assertRaises(DatasetMalformedError) as ctx:
            validator.validate(Sheet(name="Empty"))

        self.assertEqual(ctx.exception.errors[0].code, "empty_headers")


if __name__ == "__main__":
    unittest.main()
