"""Acquisitions workbook parser producing the ``acquisitions.json`` document."""
from __future__ import annotations

from datetime import date
from io import BytesIO
from pathlib import Path
from typing import Any, Mapping

from renewables_dashboard.config import ACQUISITIONS_WORKBOOK
from renewables_dashboard.domain.errors import WorkbookError
from renewables_dashboard.domain.models import UNKNOWN
from renewables_dashboard.infrastructure.parsing.utils import (
    clean_text,
    compute_file_hash,
    ensure_bytes,
    first_present,
    parse_number,
    parse_year,
    read_first_sheet,
    slugify,
    utc_now_iso,
)

NAME_COLUMNS = ("Project Name", "Project", "Name")
COST_COLUMNS = (
    "Acquisition Cost\n(million)",
    "Acquisition Cost\r\n(million)",
    "Acquisition Cost (million)",
    "Acquisition Cost",
    "Cost",
    "Investment",
)
CURRENCY_COLUMNS = ("Currency", "Curr")
STAKE_COLUMNS = ("Stake %", "Stake", "Ownership")
CAPACITY_COLUMNS = ("Total Capacity (MW)", "Total Capacity MW", "Capacity", "MW")
CAPACITY_BY_STAKE_COLUMNS = ("Capacity by NBIM stake", "NBIM Capacity", "Stake Capacity")
YEAR_COLUMNS = ("Acquisition Year", "Year")
MONTH_COLUMNS = ("Acquisition Month", "Month")
ACQUISITION_STATUS_COLUMNS = ("Acquisition Status", "Acq Status")
CURRENT_STATUS_COLUMNS = ("Current Status", "Status")
TECHNOLOGY_COLUMNS = ("Technology", "Tech")
GEOGRAPHY_COLUMNS = ("Geography", "Country", "Location")
OPERATOR_COLUMNS = ("Operator", "Developer")


def row_to_investment(row: Mapping[str, Any], index: int, default_year: int) -> dict[str, Any]:
    name = clean_text(first_present(row, NAME_COLUMNS), f"Project {index + 1}")
    return {
        "id": slugify(name),
        "name": name,
        "acquisitionCost": parse_number(first_present(row, COST_COLUMNS)),
        "originalCurrency": clean_text(first_present(row, CURRENCY_COLUMNS), "EUR").upper(),
        "stake": parse_number(first_present(row, STAKE_COLUMNS)),
        "totalCapacity": parse_number(first_present(row, CAPACITY_COLUMNS)),
        "capacityByStake": parse_number(first_present(row, CAPACITY_BY_STAKE_COLUMNS)),
        "acquisitionYear": parse_year(first_present(row, YEAR_COLUMNS), default_year),
        "acquisitionMonth": clean_text(first_present(row, MONTH_COLUMNS), UNKNOWN),
        "acquisitionStatus": clean_text(first_present(row, ACQUISITION_STATUS_COLUMNS), UNKNOWN),
        "currentStatus": clean_text(first_present(row, CURRENT_STATUS_COLUMNS), UNKNOWN),
        "technology": clean_text(first_present(row, TECHNOLOGY_COLUMNS), UNKNOWN),
        "geography": clean_text(first_present(row, GEOGRAPHY_COLUMNS), UNKNOWN),
        "operator": clean_text(first_present(row, OPERATOR_COLUMNS), UNKNOWN),
    }


def acquisitions_to_payload(
    source: BytesIO | Path | bytes,
    filename: str = ACQUISITIONS_WORKBOOK,
    today: date | None = None,
) -> dict[str, Any]:
    raw_bytes = ensure_bytes(source)
    rows = read_first_sheet(raw_bytes, filename)
    if not rows:
        raise WorkbookError(filename, "No data found in acquisitions Excel file")

    default_year = (today or date.today()).year
    return {
        "lastUpdated": utc_now_iso(),
        "metadata": {
            "totalProjects": len(rows),
            "dataSource": "NBIM Investment Records - Excel Import",
            "currency": "Mixed (EUR/GBP/NOK converted to EUR)",
            "excelFile": filename,
            "sha256": compute_file_hash(raw_bytes),
        },
        "investments": [row_to_investment(row, idx, default_year) for idx, row in enumerate(rows)],
    }
