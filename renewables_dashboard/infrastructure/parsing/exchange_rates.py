"""Exchange-rate workbook parser producing the ``exchange-rates.json`` document."""
from __future__ import annotations

from io import BytesIO
from pathlib import Path
from typing import Any

from renewables_dashboard.config import EXCHANGE_RATES_WORKBOOK
from renewables_dashboard.domain.errors import WorkbookError
from renewables_dashboard.infrastructure.parsing.utils import (
    compute_file_hash,
    ensure_bytes,
    first_present,
    is_blank,
    parse_number,
    parse_year,
    read_first_sheet,
    utc_now_iso,
)

NOK_EUR_COLUMNS = ("EUR/NOK", "NOK per EUR", "NOK/EUR")
GBP_NOK_COLUMNS = ("GBP/NOK", "GBP to NOK")


def exchange_rates_to_payload(
    source: BytesIO | Path | bytes,
    filename: str = EXCHANGE_RATES_WORKBOOK,
) -> dict[str, Any]:
    raw_bytes = ensure_bytes(source)
    rows = read_first_sheet(raw_bytes, filename)
    if not rows:
        raise WorkbookError(filename, "No data found in exchange rates Excel file")

    nok_eur: dict[str, Any] = {}
    gbp_nok: dict[str, Any] = {}
    for row in rows:
        if is_blank(row.get("Year")):
            continue
        year = str(parse_year(row.get("Year"), 0))
        # zero and unparseable rates are stored as null
        nok_eur[year] = parse_number(first_present(row, NOK_EUR_COLUMNS)) or None
        gbp_nok[year] = parse_number(first_present(row, GBP_NOK_COLUMNS)) or None

    return {
        "lastUpdated": utc_now_iso(),
        "metadata": {
            "source": "NBIM Financial Statements - Excel Import",
            "baseCurrency": "NOK",
            "description": "Exchange rate assumptions used for portfolio calculations",
            "excelFile": filename,
            "sha256": compute_file_hash(raw_bytes),
        },
        "rates": {"NOK_EUR": nok_eur, "GBP_NOK": gbp_nok},
        "notes": {
            "NOK_EUR": "Norwegian kroner per euro (EUR/NOK rate)",
            "GBP_NOK": "Norwegian kroner per British pound",
        },
    }
