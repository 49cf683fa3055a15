"""Static HTML dashboard rendering."""
from __future__ import annotations

import html
import logging
import re
from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path
from typing import Any, Mapping, Sequence

from renewables_dashboard.config import DASHBOARD_TEMPLATE
from renewables_dashboard.domain.models import CashflowPeriodRecord, ExchangeRateDataset
from renewables_dashboard.domain.results import MetricsSummary, NormalizedCashflow
from renewables_dashboard.infrastructure.storage.json_store import dumps_compact
from renewables_dashboard.presentation.formatting import (
    format_currency_without_unit,
    format_gigawatts,
    format_integer,
    format_last_updated,
    format_number,
    format_one_decimal,
)
from renewables_dashboard.presentation.projection import (
    cashflow_chart_payload,
    cashflow_totals,
    geography_chart_data,
    offshore_bubble_chart_data,
    technology_chart_data,
    yearly_chart_data,
)

logger = logging.getLogger(__name__)

PLACEHOLDER = re.compile(r"\{\{([A-Z_]+)\}\}")

TABLE_COLUMNS = (
    "Project",
    "Investment (EUR)",
    "Original Currency",
    "Stake",
    "Total Capacity",
    "NBIM Capacity",
    "Year",
    "Month",
    "Technology",
    "Geography",
    "Operator",
    "Acquisition Status",
    "Current Status",
)


@dataclass(frozen=True)
class DashboardContent:
    metrics: MetricsSummary
    investments: Sequence[Mapping[str, Any]]
    cashflow: NormalizedCashflow
    cashflow_source: Sequence[CashflowPeriodRecord]
    exchange_rates: ExchangeRateDataset
    last_updated: str | None


def _cell(value: Any, fallback: str = "N/A", suffix: str = "") -> str:
    if value is None or value == "":
        return html.escape(fallback)
    if isinstance(value, Decimal):
        value = format(value.normalize(), "f")
    return html.escape(f"{value}{suffix}")


def render_investments_table(rows: Sequence[Mapping[str, Any]]) -> str:
    header = "".join(f"<th>{column}</th>" for column in TABLE_COLUMNS)
    body_parts = []
    for row in rows:
        capacity = row.get("nbimCapacity")
        cells = [
            _cell(row.get("name")),
            f"€{format_number(row.get('acquisitionCostEur') or Decimal('0'))}M",
            _cell(row.get("originalCurrency")),
            _cell(row.get("stake"), suffix="%"),
            _cell(row.get("totalCapacity"), suffix=" MW"),
            f"{format_integer(capacity)} MW" if capacity else "N/A",
            _cell(row.get("acquisitionYear")),
            _cell(row.get("acquisitionMonth"), "Unknown"),
            _cell(row.get("technology"), "Unknown"),
            _cell(row.get("geography"), "Unknown"),
            _cell(row.get("operator"), "Unknown"),
            _cell(row.get("acquisitionStatus"), "Unknown"),
            _cell(row.get("currentStatus"), "Unknown"),
        ]
        body_parts.append("<tr>" + "".join(f"<td>{cell}</td>" for cell in cells) + "</tr>")
    body_html = "".join(body_parts)
    return f'<table class="data-table"><thead><tr>{header}</tr></thead><tbody>{body_html}</tbody></table>'


def _script_json(payload: Any) -> str:
    # keep embedded JSON from closing the surrounding <script> element
    return dumps_compact(payload).replace("</", "<\\/")


def build_replacements(content: DashboardContent) -> dict[str, str]:
    metrics = content.metrics
    totals = cashflow_totals(content.cashflow.full_year)
    return {
        "LAST_UPDATED": html.escape(format_last_updated(content.last_updated)),
        "TOTAL_INVESTMENT": format_currency_without_unit(metrics.total_investment),
        "TOTAL_PROJECTS": str(metrics.total_projects),
        "TOTAL_CAPACITY_ALL": format_integer(metrics.total_capacity_all),
        "TOTAL_CAPACITY": format_integer(metrics.total_capacity_by_stake),
        "AVG_DEPLOYMENT": format_number(metrics.avg_investment_per_year),
        "OFFSHORE_INVESTMENT": format_number(metrics.offshore_investment),
        "OFFSHORE_PERCENTAGE": format_integer(metrics.offshore_percentage_of_total),
        "OFFSHORE_OPERATIONAL_PERCENTAGE": format_integer(metrics.offshore_operational_percentage),
        "OFFSHORE_CAPACITY_GW": format_gigawatts(metrics.offshore_capacity_by_stake),
        "OFFSHORE_OPERATIONAL_GW": format_gigawatts(metrics.offshore_operational_capacity),
        "OFFSHORE_CAPACITY": format_integer(metrics.offshore_capacity_by_stake),
        "OPERATIONAL_PERCENTAGE": format_integer(metrics.operational_percentage),
        "TOTAL_NEW_INVESTMENTS": format_one_decimal(totals["totalNewInvestments"]),
        "TOTAL_INTEREST_RECEIPTS": format_one_decimal(totals["totalInterestReceipts"]),
        "TOTAL_RECEIPTS_DIVIDENDS": format_one_decimal(totals["totalReceiptsDividends"]),
        "TOTAL_DEVELOPMENT_ASSETS": format_one_decimal(totals["totalDevelopmentAssets"]),
        "TOTAL_LOAN_REPAYMENTS": format_one_decimal(totals["totalLoanRepayments"]),
        "INVESTMENTS_TABLE": render_investments_table(content.investments),
        "YEARLY_CHART_DATA": _script_json(yearly_chart_data(metrics.yearly_investments)),
        "TECHNOLOGY_CHART_DATA": _script_json(technology_chart_data(metrics.technology_breakdown)),
        "GEOGRAPHY_CHART_DATA": _script_json(geography_chart_data(metrics.geography_breakdown)),
        "CASHFLOW_CHART_DATA": _script_json(
            cashflow_chart_payload(
                content.cashflow.full_year, content.cashflow.all_periods, content.cashflow_source
            )
        ),
        "OFFSHORE_BUBBLE_CHART_DATA": _script_json(offshore_bubble_chart_data(content.investments)),
        "EXCHANGE_RATES_DATA": _script_json(content.exchange_rates.as_json()),
    }


def fill_template(template: str, replacements: Mapping[str, str]) -> str:
    """Substitute every ``{{NAME}}`` in one pass; unknown placeholders are left untouched."""

    def substitute(match: re.Match[str]) -> str:
        return replacements.get(match.group(1), match.group(0))

    return PLACEHOLDER.sub(substitute, template)


def load_template(templates_dir: Path | None) -> str:
    if templates_dir is not None:
        path = Path(templates_dir) / DASHBOARD_TEMPLATE
        if path.is_file():
            return path.read_text(encoding="utf-8")
        logger.info("Template %s not found, using the built-in dashboard", path)
    return DEFAULT_TEMPLATE


def render_dashboard(content: DashboardContent, templates_dir: Path | None = None) -> str:
    return fill_template(load_template(templates_dir), build_replacements(content))


DEFAULT_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>NBIM Offshore Wind Investment Dashboard</title>
    <script src="https://cdn.jsdelivr.net/npm/chart.js"></script>
    <style>
        * { margin: 0; padding: 0; box-sizing: border-box; }
        body { font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif; line-height: 1.6; color: #333; background: #f5f7fa; }
        .container { max-width: 1200px; margin: 0 auto; padding: 20px; }
        .header { background: linear-gradient(135deg, #667eea 0%, #764ba2 100%); color: white; padding: 40px 20px; text-align: center; margin-bottom: 30px; border-radius: 10px; }
        .metrics-grid { display: grid; grid-template-columns: repeat(auto-fit, minmax(200px, 1fr)); gap: 20px; margin-bottom: 30px; }
        .metric-card { background: white; padding: 25px; border-radius: 10px; box-shadow: 0 4px 6px rgba(0,0,0,0.1); text-align: center; }
        .metric-value { font-size: 2.2rem; font-weight: bold; color: #667eea; }
        .metric-label { color: #666; margin-top: 10px; }
        .chart-container { background: white; padding: 30px; border-radius: 10px; box-shadow: 0 4px 6px rgba(0,0,0,0.1); margin-bottom: 30px; }
        .chart-wrapper { position: relative; height: 400px; }
        .table-container { background: white; border-radius: 10px; box-shadow: 0 4px 6px rgba(0,0,0,0.1); overflow-x: auto; }
        table { width: 100%; border-collapse: collapse; }
        th, td { padding: 12px; text-align: left; border-bottom: 1px solid #eee; }
        th { background: #f8f9fa; font-weight: 600; }
        tr:hover { background: #f8f9fa; }
        .footer { text-align: center; margin-top: 40px; color: #666; }
        @media (max-width: 768px) { .metrics-grid { grid-template-columns: 1fr; } }
    </style>
</head>
<body>
    <div class="container">
        <div class="header">
            <h1>NBIM Offshore Wind Investment Dashboard</h1>
            <p>Overview of unlisted renewable infrastructure investments</p>
            <p>Last updated: {{LAST_UPDATED}}</p>
        </div>

        <div class="metrics-grid">
            <div class="metric-card"><div class="metric-value">€{{TOTAL_INVESTMENT}}</div><div class="metric-label">Total Investment</div></div>
            <div class="metric-card"><div class="metric-value">{{TOTAL_PROJECTS}}</div><div class="metric-label">Total Projects</div></div>
            <div class="metric-card"><div class="metric-value">{{TOTAL_CAPACITY}} MW</div><div class="metric-label">Capacity by stake ({{TOTAL_CAPACITY_ALL}} MW total)</div></div>
            <div class="metric-card"><div class="metric-value">€{{AVG_DEPLOYMENT}}M</div><div class="metric-label">Average Investment per Year</div></div>
            <div class="metric-card"><div class="metric-value">€{{OFFSHORE_INVESTMENT}}</div><div class="metric-label">Offshore Wind Investment ({{OFFSHORE_PERCENTAGE}}% of total)</div></div>
            <div class="metric-card"><div class="metric-value">{{OFFSHORE_CAPACITY_GW}} GW</div><div class="metric-label">Offshore Wind Capacity ({{OFFSHORE_CAPACITY}} MW)</div></div>
            <div class="metric-card"><div class="metric-value">{{OFFSHORE_OPERATIONAL_GW}} GW</div><div class="metric-label">Operational Offshore ({{OFFSHORE_OPERATIONAL_PERCENTAGE}}%)</div></div>
            <div class="metric-card"><div class="metric-value">{{OPERATIONAL_PERCENTAGE}}%</div><div class="metric-label">Operational Assets</div></div>
        </div>

        <div class="metrics-grid">
            <div class="metric-card"><div class="metric-value">€{{TOTAL_NEW_INVESTMENTS}}M</div><div class="metric-label">New Investments</div></div>
            <div class="metric-card"><div class="metric-value">€{{TOTAL_INTEREST_RECEIPTS}}M</div><div class="metric-label">Interest Receipts</div></div>
            <div class="metric-card"><div class="metric-value">€{{TOTAL_RECEIPTS_DIVIDENDS}}M</div><div class="metric-label">Dividend Receipts</div></div>
            <div class="metric-card"><div class="metric-value">€{{TOTAL_DEVELOPMENT_ASSETS}}M</div><div class="metric-label">Development Assets</div></div>
            <div class="metric-card"><div class="metric-value">€{{TOTAL_LOAN_REPAYMENTS}}M</div><div class="metric-label">Loan Repayments</div></div>
        </div>

        <div class="chart-container"><h2>Investment by Year</h2><div class="chart-wrapper"><canvas id="yearlyChart"></canvas></div></div>
        <div class="chart-container"><h2>Technology Breakdown</h2><div class="chart-wrapper"><canvas id="technologyChart"></canvas></div></div>
        <div class="chart-container"><h2>Geographic Distribution</h2><div class="chart-wrapper"><canvas id="geographyChart"></canvas></div></div>
        <div class="chart-container"><h2>Offshore Wind Portfolio</h2><div class="chart-wrapper"><canvas id="offshoreChart"></canvas></div></div>
        <div class="chart-container"><h2>Cash Flow Analysis</h2><div class="chart-wrapper"><canvas id="cashflowChart"></canvas></div></div>

        <div class="table-container">
            <h2 style="padding: 20px;">Investment Details</h2>
            {{INVESTMENTS_TABLE}}
        </div>

        <div class="footer"><p>Generated from Excel data</p></div>
    </div>

    <script>
        const yearlyData = {{YEARLY_CHART_DATA}};
        const technologyData = {{TECHNOLOGY_CHART_DATA}};
        const geographyData = {{GEOGRAPHY_CHART_DATA}};
        const cashflowData = {{CASHFLOW_CHART_DATA}};
        const offshoreData = {{OFFSHORE_BUBBLE_CHART_DATA}};
        const exchangeRates = {{EXCHANGE_RATES_DATA}};

        const euroAxis = { y: { beginAtZero: true, title: { display: true, text: 'Investment (€M)' } } };

        new Chart(document.getElementById('yearlyChart'), {
            type: 'bar', data: yearlyData,
            options: { responsive: true, maintainAspectRatio: false, plugins: { legend: { display: false } }, scales: euroAxis }
        });
        new Chart(document.getElementById('technologyChart'), {
            type: 'doughnut', data: technologyData,
            options: { responsive: true, maintainAspectRatio: false }
        });
        new Chart(document.getElementById('geographyChart'), {
            type: 'bar', data: geographyData,
            options: { responsive: true, maintainAspectRatio: false, plugins: { legend: { display: false } }, scales: euroAxis }
        });
        new Chart(document.getElementById('offshoreChart'), {
            type: 'bubble', data: offshoreData,
            options: { responsive: true, maintainAspectRatio: false, scales: euroAxis }
        });
        new Chart(document.getElementById('cashflowChart'), {
            type: 'line', data: cashflowData.chartData,
            options: { responsive: true, maintainAspectRatio: false, scales: { y: { title: { display: true, text: 'Amount (€M)' } } } }
        });
    </script>
</body>
</html>
"""
