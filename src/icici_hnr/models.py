"""Data models for ICICI capital-gains rows and conversion results.

Copyright (C) 2025 Tim Waugh

This program is free software: you can redistribute it and/or modify
it under the terms of the GNU General Public License as published by
the Free Software Foundation, either version 3 of the License, or
(at your option) any later version.

This program is distributed in the hope that it will be useful,
but WITHOUT ANY WARRANTY; without even the implied warranty of
MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE. See the
GNU General Public License for more details.

You should have received a copy of the GNU General Public License
along with this program. If not, see <https://www.gnu.org/licenses/>.
"""

from collections.abc import Sequence
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

DEFAULT_SOURCE_DATE_FORMAT = "%d-%b-%Y"

# Column order of an ICICI capital-gains export row
COLUMNS = (
    "security",
    "quantity",
    "sale_date",
    "sale_rate",
    "sale_value",
    "sale_expense",
    "purchase_date",
    "purchase_rate",
    "purchase_value",
    "purchase_expense",
    "purchase_indexed_cost",
    "profit_or_loss",
)


class CapitalGainRecord(BaseModel):
    """Model for one row of an ICICI capital-gains CSV export."""

    security: str = Field(..., min_length=1, description="Security (stock) name")
    quantity: str = Field(..., description="Quantity sold, as exported")
    sale_date: date = Field(..., description="Date of sale")
    sale_rate: int = Field(..., description="Sale rate per unit")
    sale_value: int = Field(..., description="Total sale value")
    sale_expense: int = Field(..., description="Expenses on sale")
    purchase_date: date = Field(..., description="Date of purchase")
    purchase_rate: int = Field(..., description="Purchase rate per unit")
    purchase_value: int = Field(..., description="Total purchase value")
    purchase_expense: int = Field(..., description="Expenses on purchase")
    purchase_indexed_cost: int = Field(
        ..., description="Inflation indexed cost of acquisition"
    )
    profit_or_loss: str = Field(..., description="Profit/loss, as exported")

    model_config = ConfigDict(frozen=True)

    @field_validator("sale_date", "purchase_date", mode="before")
    @classmethod
    def parse_date(cls, v, info: ValidationInfo):
        """Parse dates exported as e.g. 15-Jan-2017."""
        if isinstance(v, date):
            return v
        date_format = DEFAULT_SOURCE_DATE_FORMAT
        if info.context and info.context.get("date_format"):
            date_format = info.context["date_format"]
        try:
            return datetime.strptime(str(v).strip(), date_format).date()
        except ValueError:
            raise ValueError(f"Invalid date value: {v!r} (expected {date_format})")

    @field_validator(
        "sale_rate",
        "sale_value",
        "sale_expense",
        "purchase_rate",
        "purchase_value",
        "purchase_expense",
        "purchase_indexed_cost",
        mode="before",
    )
    @classmethod
    def truncate_amount(cls, v):
        """Parse a decimal amount and drop its fractional part."""
        if isinstance(v, int):
            return v
        try:
            amount = Decimal(str(v).strip())
            # int() truncates toward zero
            return int(amount)
        except (InvalidOperation, ValueError, OverflowError):
            raise ValueError(f"Invalid amount value: {v!r}")

    @classmethod
    def from_fields(
        cls, fields: Sequence[str], date_format: str = DEFAULT_SOURCE_DATE_FORMAT
    ) -> "CapitalGainRecord":
        """Create a record from the split columns of an export row."""
        if len(fields) != len(COLUMNS):
            raise ValueError(
                f"Expected {len(COLUMNS)} fields, got {len(fields)}"
            )
        return cls.model_validate(
            dict(zip(COLUMNS, fields)), context={"date_format": date_format}
        )

    def formatted_sale_date(self, fmt: str = "%d/%m/%Y") -> str:
        return self.sale_date.strftime(fmt)

    def formatted_purchase_date(self, fmt: str = "%d/%m/%Y") -> str:
        return self.purchase_date.strftime(fmt)


class SkippedRow(BaseModel):
    """An input line that was not converted."""

    line_number: int = Field(..., description="1-based line number in the input")
    line: str = Field(..., description="Raw line text")
    reason: str = Field(..., description="Why the line was skipped")


class ParseResult(BaseModel):
    """Records read from an export file, in input order."""

    records: list[CapitalGainRecord] = Field(
        default_factory=list, description="Parsed records"
    )
    skipped: list[SkippedRow] = Field(
        default_factory=list, description="Rows that were skipped"
    )

    @property
    def success(self) -> bool:
        """Check if every data row was converted."""
        return len(self.skipped) == 0


class ConversionResult(BaseModel):
    """Result of converting an export file to an HNR XML document."""

    output_path: Path = Field(..., description="Absolute path of the written file")
    record_count: int = Field(..., description="Number of CG entries written")
    skipped: list[SkippedRow] = Field(
        default_factory=list, description="Rows that were skipped"
    )
