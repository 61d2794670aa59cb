"""Core converter functionality for ICICI to HNR conversion.

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

import logging
from pathlib import Path
from typing import Optional, Union

from pydantic import ValidationError

from .builder import HnrDocumentBuilder
from .config import Config
from .models import (
    COLUMNS,
    CapitalGainRecord,
    ConversionResult,
    ParseResult,
    SkippedRow,
)

# Rows that are not converted are reported here, one record per row
SKIPPED_ROWS_LOGGER = f"{__name__}.skipped"


class RowError(ValueError):
    """Raised when a data line cannot be turned into a record."""


class IciciConverter:
    """Main converter class for ICICI capital-gains CSV files."""

    def __init__(self, config: Optional[Config] = None):
        """Initialize the converter with configuration."""
        self.logger = logging.getLogger(__name__)
        self.skipped_logger = logging.getLogger(SKIPPED_ROWS_LOGGER)
        self.config = config or Config()

    def validate_csv_file(self, input_file: Union[str, Path]) -> bool:
        """Validate that the input CSV file has the expected format."""
        input_file = Path(input_file)

        if not input_file.exists():
            self.logger.error(f"Input file does not exist: {input_file}")
            return False

        try:
            with open(input_file, encoding="utf-8") as f:
                header = f.readline().strip()
                first_row = ""
                for line in f:
                    if line.strip():
                        first_row = line.strip()
                        break

        except (OSError, UnicodeDecodeError) as e:
            self.logger.error(f"Error reading input file: {e}")
            return False

        if not header:
            self.logger.warning("Input file is empty")
            return True

        self.logger.debug(f"Header: {header}")

        if not header.startswith(self.config.header_token):
            self.logger.warning(
                f"Header does not start with '{self.config.header_token}'. "
                "Is this an ICICI capital gains export?"
            )

        if first_row:
            field_count = len(first_row.split(","))
            if field_count != len(COLUMNS):
                self.logger.warning(
                    f"First data row has {field_count} fields, expected {len(COLUMNS)}"
                )

        return True

    def parse_line(self, line: str) -> CapitalGainRecord:
        """Parse a single data line into a record."""
        fields = line.split(",")

        if len(fields) != len(COLUMNS):
            raise RowError(f"expected {len(COLUMNS)} fields, got {len(fields)}")

        if not fields[0]:
            raise RowError("empty security name")

        try:
            return CapitalGainRecord.from_fields(
                fields, date_format=self.config.source_date_format
            )
        except ValidationError as e:
            reasons = "; ".join(
                f"{'.'.join(str(loc) for loc in err['loc'])}: {err['msg']}"
                for err in e.errors()
            )
            raise RowError(reasons) from e

    def parse_file(self, input_file: Union[str, Path]) -> ParseResult:
        """Read and parse every data row of an ICICI capital-gains export."""
        input_file = Path(input_file)
        result = ParseResult()

        with open(input_file, encoding="utf-8") as f:
            # The header is never inspected
            f.readline()

            for line_num, raw_line in enumerate(f, 2):
                line = raw_line.strip()

                if self.config.header_token and line.startswith(
                    self.config.header_token
                ):
                    self.logger.debug(f"Ignoring repeated header on line {line_num}")
                    continue

                try:
                    record = self.parse_line(line)
                except RowError as e:
                    self.skipped_logger.warning(
                        f"Skipping line {line_num} ({e}): {line}"
                    )
                    result.skipped.append(
                        SkippedRow(line_number=line_num, line=line, reason=str(e))
                    )
                    continue

                result.records.append(record)

        self.logger.info(f"Parsed {len(result.records)} records")
        if result.skipped:
            self.logger.warning(f"Skipped {len(result.skipped)} rows")

        return result

    def convert_file(
        self,
        input_file: Union[str, Path],
        pan: str,
        assessment_year: str,
        output_file: Union[str, Path],
    ) -> ConversionResult:
        """Convert an ICICI export into an HNR capital gains XML file."""
        parsed = self.parse_file(input_file)

        builder = HnrDocumentBuilder(self.config)
        xml = builder.build(parsed.records, pan, assessment_year)
        output_path = builder.write(xml, output_file)

        return ConversionResult(
            output_path=output_path,
            record_count=len(parsed.records),
            skipped=parsed.skipped,
        )
