"""Configuration management for ICICI to HNR converter.

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

import os
from pathlib import Path
from typing import Literal, Optional, Union

import yaml
from pydantic import BaseModel, Field

from .models import DEFAULT_SOURCE_DATE_FORMAT

DEFAULT_TRANSACTION_TYPE = (
    "Equity shares in listed companies in India - equity oriented mutual "
    "funds(listed - unlisted)in India"
)

DEFAULT_CONFIG_PATH = Path("~/.config/icici-hnr/config.yaml").expanduser()


class Config(BaseModel):
    """Main configuration model."""

    transaction_type: str = Field(
        default=DEFAULT_TRANSACTION_TYPE,
        description="Text written to the Type element of every CG entry",
    )

    stt_paid: str = Field(
        default="Yes",
        description="Value of the STT_Paid element of every CG entry",
    )

    source_date_format: str = Field(
        default=DEFAULT_SOURCE_DATE_FORMAT,
        description="strptime format of dates in the ICICI export",
    )

    output_date_format: str = Field(
        default="%d/%m/%Y",
        description="strftime format of dates in the HNR XML",
    )

    header_token: str = Field(
        default="Stock",
        description="Leading text of header lines repeated inside the export",
    )

    date_of_sale_source: Literal["sale_value", "sale_date"] = Field(
        default="sale_value",
        description=(
            "Record field written to DateOfSale. HNR uploads have historically "
            "carried the sale value here"
        ),
    )

    @classmethod
    def load_from_file(cls, config_path: Optional[Union[str, Path]] = None) -> "Config":
        """Load configuration from file with fallback to defaults."""
        if config_path is None:
            possible_paths = [
                DEFAULT_CONFIG_PATH,
                Path("~/.config/icici-hnr/config.yml").expanduser(),
                Path("icici_hnr_config.yaml"),  # Current directory fallback
                Path("icici_hnr_config.yml"),
            ]

            for path in possible_paths:
                if path.exists():
                    config_path = path
                    break

        if config_path is None:
            return cls()

        config_path = Path(config_path)

        if not config_path.exists():
            return cls()

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)

            if data is None:
                return cls()

            return cls(**data)

        except (yaml.YAMLError, ValueError, TypeError) as e:
            raise ValueError(f"Error loading config file {config_path}: {e}")

    @classmethod
    def load_from_env(cls) -> "Config":
        """Load configuration from environment variables."""
        env_names = {
            "transaction_type": "ICICI_HNR_TRANSACTION_TYPE",
            "stt_paid": "ICICI_HNR_STT_PAID",
            "source_date_format": "ICICI_HNR_SOURCE_DATE_FORMAT",
            "output_date_format": "ICICI_HNR_OUTPUT_DATE_FORMAT",
            "date_of_sale_source": "ICICI_HNR_DATE_OF_SALE_SOURCE",
        }

        config_data = {}
        for field_name, env_name in env_names.items():
            if os.getenv(env_name):
                config_data[field_name] = os.getenv(env_name)

        return cls(**config_data)

    def save_to_file(self, config_path: Union[str, Path]) -> None:
        """Save configuration to file."""
        config_path = Path(config_path)
        config_path.parent.mkdir(parents=True, exist_ok=True)

        data = self.model_dump()

        with open(config_path, "w", encoding="utf-8") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)

    def uses_sale_date_for_date_of_sale(self) -> bool:
        """Check if DateOfSale should carry the actual sale date."""
        return self.date_of_sale_source == "sale_date"


def create_sample_config(config_path: Union[str, Path]) -> None:
    """Create a sample configuration file."""
    config_path = Path(config_path)

    Config().save_to_file(config_path)

    with open(config_path, "r", encoding="utf-8") as f:
        content = f.read()

    commented_content = f"""# ICICI to HNR Capital Gains Converter Configuration
# Edit this file to adjust the generated XML

{content}
#
# Configuration Notes:
# - transaction_type: Type text written for every CG entry
# - stt_paid: STT_Paid value written for every CG entry
# - source_date_format / output_date_format: strptime/strftime patterns
# - header_token: lines starting with this text are treated as headers
# - date_of_sale_source: "sale_value" keeps what HNR uploads have always
#   carried in DateOfSale, "sale_date" writes the real date of sale
"""

    with open(config_path, "w", encoding="utf-8") as f:
        f.write(commented_content)
