"""Cashflow workbook parser producing the ``cashflow.json`` document."""
from __future__ import annotations

from datetime import date
from decimal import Decimal
from io import BytesIO
from pathlib import Path
from typing import Any, Mapping

from renewables_dashboard.config import CASHFLOW_WORKBOOK
from renewables_dashboard.domain.errors import WorkbookError
from renewables_dashboard.domain.models import FULL_YEAR
from renewables_dashboard.infrastructure.parsing.utils import (
    clean_text,
    compute_file_hash,
    ensure_bytes,
    first_present,
    parse_number,
    parse_year,
    read_first_sheet,
    utc_now_iso,
)

PERIOD_COLUMNS = ("Period", "Half")

# Output field -> accepted column headers, first non-blank wins.
FLOW_COLUMNS: dict[str, tuple[str, ...]] = {
    "receipts_interest": ("Receipts_Interest", "Receipts Interest", "Interest"),
    "receipts_dividends": ("Receipts_Dividends", "Receipts Dividends", "Dividends"),
    "receipts_interest_div_total": ("Receipts Total", "Total Receipts"),
    "payments_new_investments": ("New_Investments", "New Investments", "Payments New"),
    "payments_development_assets": ("Development_Assets", "Development Assets", "Development"),
    "receipts_from_ongoing_ops": ("Repayments_loan", "Loan Repayment", "Ongoing Operations", "Operations"),
    "net_cf_to_from_investments": ("Net_Investment CF", "Net Investment CF", "Net Investments"),
    "net_cf_unlisted_infra": ("Net_CF", "Net Unlisted CF", "Net CF"),
    "cash_flow_from_ongoing_ops": ("CF_Ongoing_Ops", "Operational CF", "Operations CF"),
}


def row_to_cashflow(row: Mapping[str, Any], default_year: int) -> dict[str, Any]:
    entry: dict[str, Any] = {
        "year": parse_year(row.get("Year"), default_year),
        "period": clean_text(first_present(row, PERIOD_COLUMNS), FULL_YEAR),
    }
    for field_name, columns in FLOW_COLUMNS.items():
        value = parse_number(first_present(row, columns))
        entry[field_name] = value if value is not None else Decimal("0")
    return entry


def cashflow_to_payload(
    source: BytesIO | Path | bytes,
    filename: str = CASHFLOW_WORKBOOK,
    today: date | None = None,
) -> dict[str, Any]:
    raw_bytes = ensure_bytes(source)
    rows = read_first_sheet(raw_bytes, filename)
    if not rows:
        raise WorkbookError(filename, "No data found in cashflow Excel file")

    default_year = (today or date.today()).year
    return {
        "lastUpdated": utc_now_iso(),
        "metadata": {
            "source": "NBIM Unlisted Infrastructure Reports - Excel Import",
            "currency": "NOK millions",
            "description": "Cash flow data for unlisted renewable infrastructure investments",
            "excelFile": filename,
            "sha256": compute_file_hash(raw_bytes),
        },
        "cashflows": [row_to_cashflow(row, default_year) for row in rows],
    }
