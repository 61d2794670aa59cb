"""HNR capital gains XML document generation.

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
import xml.etree.ElementTree as ET
from collections.abc import Iterable
from pathlib import Path
from typing import Optional, Union
from xml.dom import minidom

from .config import Config
from .models import CapitalGainRecord

INDENT = "    "


class HnrDocumentBuilder:
    """Build the CG_Details document uploaded to HNR."""

    def __init__(self, config: Optional[Config] = None):
        self.logger = logging.getLogger(__name__)
        self.config = config or Config()

    def build_tree(
        self, records: Iterable[CapitalGainRecord], pan: str, assessment_year: str
    ) -> ET.Element:
        """Create the CG_Details element tree for the given records."""
        root = ET.Element("CG_Details")

        ET.SubElement(root, "PAN").text = pan
        ET.SubElement(root, "AY").text = assessment_year
        # Summary sections HNR expects but which are not filled from ICICI data
        ET.SubElement(root, "In_INR")
        ET.SubElement(root, "cg_INR")

        for record in records:
            root.append(self._build_entry(record))

        return root

    def _build_entry(self, record: CapitalGainRecord) -> ET.Element:
        """Create one CG entry; child order is fixed by HNR."""
        date_fmt = self.config.output_date_format

        if self.config.uses_sale_date_for_date_of_sale():
            date_of_sale = record.formatted_sale_date(date_fmt)
        else:
            date_of_sale = str(record.sale_value)

        cg = ET.Element("CG")
        ET.SubElement(cg, "Type").text = self.config.transaction_type
        ET.SubElement(cg, "Particulars").text = record.security
        ET.SubElement(cg, "DateOfSale").text = date_of_sale
        ET.SubElement(cg, "SaleValue").text = str(record.sale_value)
        # Misspelt in HNR's schema
        ET.SubElement(cg, "SaleExpences").text = str(record.sale_expense)
        ET.SubElement(cg, "DateOfPurchase").text = record.formatted_purchase_date(
            date_fmt
        )
        ET.SubElement(cg, "PurchaseCost").text = str(record.purchase_indexed_cost)
        ET.SubElement(cg, "PurchaseExpenses").text = str(record.purchase_expense)
        ET.SubElement(cg, "STT_Paid").text = self.config.stt_paid
        return cg

    def build(
        self, records: Iterable[CapitalGainRecord], pan: str, assessment_year: str
    ) -> str:
        """Build and serialize the document with 4-space indentation."""
        root = self.build_tree(records, pan, assessment_year)
        rough = ET.tostring(root, encoding="utf-8")
        pretty = minidom.parseString(rough).toprettyxml(
            indent=INDENT, encoding="UTF-8"
        )
        return pretty.decode("utf-8")

    def write(self, xml: str, dest: Union[str, Path]) -> Path:
        """Write the serialized document, replacing any existing file."""
        dest = Path(dest).absolute()

        with open(dest, "w", encoding="utf-8") as f:
            f.write(xml)

        self.logger.debug(f"File saved: {dest}")
        return dest
