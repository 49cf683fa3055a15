"""Shapes aggregated results into table rows and Chart.js series."""
from __future__ import annotations

from decimal import Decimal
from typing import Any, Mapping, Sequence

from renewables_dashboard.domain.currency import CurrencyConverter
from renewables_dashboard.domain.metrics import is_offshore_wind
from renewables_dashboard.domain.models import CashflowPeriodRecord, ExchangeRateTable, InvestmentRecord
from renewables_dashboard.domain.results import ConvertedCashflow, GeographyBreakdown, TechnologyBreakdown
from renewables_dashboard.presentation.formatting import round_half_up

PRIMARY = "#667eea"
SECONDARY = "#764ba2"
PALETTE = ["#667eea", "#764ba2", "#f093fb", "#f5576c", "#4facfe", "#00f2fe"]

ZERO = Decimal("0")


def _rounded(value: Decimal) -> int:
    return int(round_half_up(value))


def investment_rows(
    investments: Sequence[InvestmentRecord],
    rates: ExchangeRateTable,
    converter: CurrencyConverter,
) -> list[dict[str, Any]]:
    """Source fields plus ``acquisitionCostEur`` and ``nbimCapacity`` (null when not derivable)."""
    rows: list[dict[str, Any]] = []
    for investment in investments:
        cost = converter.convert_to_eur(
            investment.acquisition_cost,
            investment.original_currency,
            investment.acquisition_year,
            rates,
        )
        rows.append(
            {
                **investment.as_json(),
                "acquisitionCostEur": cost,
                "nbimCapacity": investment.effective_capacity_by_stake(),
            }
        )
    return rows


def _year_label(year: int | None) -> str:
    return "Unknown" if year is None else str(year)


def yearly_chart_data(yearly: Mapping[int | None, Decimal]) -> dict[str, Any]:
    labelled = {_year_label(year): value for year, value in yearly.items()}
    years = sorted(labelled)
    return {
        "labels": years,
        "datasets": [
            {
                "label": "Investment (€M)",
                "data": [_rounded(labelled[year]) for year in years],
                "backgroundColor": PRIMARY,
                "borderColor": PRIMARY,
                "borderWidth": 1,
            }
        ],
    }


def technology_chart_data(breakdown: Mapping[str, TechnologyBreakdown]) -> dict[str, Any]:
    technologies = list(breakdown)
    return {
        "labels": technologies,
        "datasets": [
            {
                "data": [_rounded(breakdown[tech].value) for tech in technologies],
                "backgroundColor": PALETTE[: len(technologies)],
                "borderWidth": 2,
                "borderColor": "#fff",
            }
        ],
    }


def geography_chart_data(breakdown: Mapping[str, GeographyBreakdown]) -> dict[str, Any]:
    geographies = sorted(breakdown, key=lambda geo: breakdown[geo].value, reverse=True)
    return {
        "labels": geographies,
        "datasets": [
            {
                "label": "Investment (€M)",
                "data": [_rounded(breakdown[geo].value) for geo in geographies],
                "backgroundColor": SECONDARY,
                "borderColor": SECONDARY,
                "borderWidth": 1,
            }
        ],
    }


CASHFLOW_SERIES = (
    ("New Investments", "payments_new_investments", "#f5576c", "rgba(245, 87, 108, 0.1)"),
    ("Operational Cash Flow", "cash_flow_from_ongoing_ops", "#667eea", "rgba(102, 126, 234, 0.1)"),
    ("Receipts Interest", "receipts_interest", "#4facfe", "rgba(79, 172, 254, 0.1)"),
)


def cashflow_chart_data(full_year: Sequence[ConvertedCashflow]) -> dict[str, Any]:
    ordered = sorted(full_year, key=lambda item: item.year)
    return {
        "labels": [str(item.year) for item in ordered],
        "datasets": [
            {
                "label": label,
                "data": [item.flows.get(field, ZERO) for item in ordered],
                "borderColor": border,
                "backgroundColor": background,
                "fill": False,
            }
            for label, field, border, background in CASHFLOW_SERIES
        ],
    }


def cashflow_chart_payload(
    full_year: Sequence[ConvertedCashflow],
    all_periods: Sequence[ConvertedCashflow],
    source_records: Sequence[CashflowPeriodRecord],
) -> dict[str, Any]:
    return {
        "chartData": cashflow_chart_data(full_year),
        "allData": [item.as_json() for item in all_periods],
        "allDataNOK": [record.as_json() for record in source_records],
    }


CASHFLOW_TOTALS = {
    "totalNewInvestments": "payments_new_investments",
    "totalInterestReceipts": "receipts_interest",
    "totalReceiptsDividends": "receipts_dividends",
    "totalDevelopmentAssets": "payments_development_assets",
    "totalLoanRepayments": "receipts_from_ongoing_ops",
}


def cashflow_totals(full_year: Sequence[ConvertedCashflow]) -> dict[str, Decimal]:
    return {
        key: sum((item.flows.get(field, ZERO) for item in full_year), ZERO)
        for key, field in CASHFLOW_TOTALS.items()
    }


def offshore_bubble_chart_data(rows: Sequence[Mapping[str, Any]]) -> dict[str, Any]:
    """One bubble per offshore wind asset: acquisition year, EUR cost, radius from owned MW."""
    points = []
    for row in rows:
        if not is_offshore_wind(row.get("technology")):
            continue
        capacity = max(Decimal(row.get("nbimCapacity") or ZERO), ZERO)
        points.append(
            {
                "x": row.get("acquisitionYear"),
                "y": _rounded(row.get("acquisitionCostEur") or ZERO),
                "r": max(4, min(40, _rounded(capacity.sqrt()))),
                "label": row.get("name"),
                "capacity": _rounded(capacity),
            }
        )
    return {
        "datasets": [
            {
                "label": "Offshore wind investments",
                "data": points,
                "backgroundColor": "rgba(102, 126, 234, 0.5)",
                "borderColor": PRIMARY,
            }
        ]
    }
