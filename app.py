"""Streamlit front-end for previewing the renewables dashboard."""
from __future__ import annotations

from typing import Any, Mapping, Sequence

import pandas as pd
import streamlit as st

from renewables_dashboard import (
    BuildDashboardUseCase,
    ConvertWorkbooksUseCase,
    DashboardContext,
    DataValidator,
    ExcelWorkbookSource,
    InMemoryDashboardRepository,
)
from renewables_dashboard.application.dto import DashboardBuild
from renewables_dashboard.config import SETTINGS
from renewables_dashboard.domain.errors import PipelineError
from renewables_dashboard.domain.results import MetricsSummary, ValidationReport
from renewables_dashboard.infrastructure.storage.json_store import dumps
from renewables_dashboard.presentation.formatting import format_number


st.set_page_config(page_title="Renewables Dashboard", layout="wide")
st.title("Renewable Acquisitions Dashboard")


def run_pipeline(
    acquisitions_file: Any, cashflow_file: Any, rates_file: Any
) -> tuple[DashboardBuild, ValidationReport]:
    source = ExcelWorkbookSource(
        acquisitions_file.getvalue(),
        cashflow_file.getvalue(),
        rates_file.getvalue(),
        acquisitions_name=acquisitions_file.name,
        cashflow_name=cashflow_file.name,
        exchange_rates_name=rates_file.name,
    )
    acquisitions, cashflow, rates = ConvertWorkbooksUseCase(source, SETTINGS.json_dir).payloads()
    repository = InMemoryDashboardRepository(acquisitions, cashflow, rates)
    report = DataValidator(
        min_year=SETTINGS.min_year,
        max_years_ahead=SETTINGS.max_years_ahead,
        max_plausible_rate=SETTINGS.max_plausible_rate,
    ).validate(acquisitions, cashflow, rates)
    build = BuildDashboardUseCase(DashboardContext(repository=repository), SETTINGS.templates_dir).execute()
    return build, report


def breakdown_dataframe(metrics: MetricsSummary) -> tuple[pd.DataFrame, pd.DataFrame]:
    technology = pd.DataFrame(
        [
            {"technology": tech, "value_eur_m": float(item.value), "count": item.count, "capacity_mw": float(item.capacity)}
            for tech, item in metrics.technology_breakdown.items()
        ]
    )
    geography = pd.DataFrame(
        [
            {"geography": geo, "value_eur_m": float(item.value), "count": item.count}
            for geo, item in metrics.geography_breakdown.items()
        ]
    )
    return technology, geography


def rows_to_dataframe(rows: Sequence[Mapping[str, Any]]) -> pd.DataFrame:
    frame = pd.DataFrame(list(rows))
    for column in ("acquisitionCost", "acquisitionCostEur", "stake", "totalCapacity", "capacityByStake", "nbimCapacity"):
        if column in frame.columns:
            frame[column] = pd.to_numeric(frame[column], errors="coerce")
    return frame


if "result" not in st.session_state:
    st.session_state["result"] = None

col1, col2, col3 = st.columns(3)
with col1:
    acquisitions_file = st.file_uploader("Upload acquisitions workbook", type=["xls", "xlsx"])
with col2:
    cashflow_file = st.file_uploader("Upload cashflow workbook", type=["xls", "xlsx"])
with col3:
    rates_file = st.file_uploader("Upload exchange rates workbook", type=["xls", "xlsx"])

run_btn = st.button("Build Dashboard", disabled=not (acquisitions_file and cashflow_file and rates_file))
if run_btn and acquisitions_file and cashflow_file and rates_file:
    with st.spinner("Building..."):
        try:
            build, report = run_pipeline(acquisitions_file, cashflow_file, rates_file)
        except PipelineError as exc:
            st.error(str(exc))
        else:
            st.session_state["result"] = {"build": build, "report": report}

result = st.session_state.get("result")
if not result:
    st.info("Upload the three workbooks and build the dashboard.")
else:
    build: DashboardBuild = result["build"]
    report: ValidationReport = result["report"]
    metrics = build.content.metrics

    st.subheader("Summary")
    m1, m2, m3, m4 = st.columns(4)
    m1.metric("Total investment (EUR)", f"€{format_number(metrics.total_investment)}M")
    m2.metric("Projects", metrics.total_projects)
    m3.metric("Capacity by stake", f"{float(metrics.total_capacity_by_stake):,.0f} MW")
    m4.metric("Operational share", f"{float(metrics.operational_percentage):.1f}%")

    if report.has_issues():
        with st.expander(f"Validation: {len(report.errors)} errors, {len(report.warnings)} warnings"):
            for error in report.errors:
                st.error(error)
            for warning in report.warnings:
                st.warning(warning)

    tabs = st.tabs(["Investments", "Breakdowns", "Cashflow", "Downloads"])
    with tabs[0]:
        st.dataframe(rows_to_dataframe(build.content.investments))
    with tabs[1]:
        technology_df, geography_df = breakdown_dataframe(metrics)
        st.dataframe(technology_df)
        st.dataframe(geography_df)
    with tabs[2]:
        st.dataframe(pd.DataFrame([item.as_json() for item in build.content.cashflow.all_periods]).astype(str))
    with tabs[3]:
        st.download_button(
            "Download dashboard HTML",
            data=build.html.encode("utf-8"),
            file_name="index.html",
            mime="text/html",
        )
        st.download_button(
            "Download data.json",
            data=dumps(build.api_payload).encode("utf-8"),
            file_name="data.json",
            mime="application/json",
        )
