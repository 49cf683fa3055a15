import json
from pathlib import Path

import pandas as pd
import pytest

from renewables_dashboard import (
    BuildDashboardUseCase,
    ConvertWorkbooksUseCase,
    DashboardContext,
    DataValidator,
    ExcelWorkbookSource,
    GenerateDashboardUseCase,
    JsonDashboardRepository,
    ValidateDataUseCase,
)
from renewables_dashboard.domain.errors import ValidationFailedError, WorkbookError


def write_workbooks(excel_dir: Path) -> Path:
    excel_dir.mkdir(parents=True, exist_ok=True)
    pd.DataFrame(
        {
            "Project Name": ["Hornsea One", "Fosen Onshore"],
            "Acquisition Cost": [100, 50],
            "Currency": ["EUR", "NOK"],
            "Stake %": [None, 50],
            "Total Capacity (MW)": [None, 200],
            "Capacity by NBIM stake": [500, None],
            "Acquisition Year": [2021, 2021],
            "Current Status": ["Operational", "Development"],
            "Technology": ["Offshore Wind", "Onshore Wind"],
            "Geography": ["United Kingdom", "Norway"],
        }
    ).to_excel(excel_dir / "NBIM_Acquisitions.xlsx", index=False)
    pd.DataFrame(
        {
            "Year": [2021, 2021],
            "Period": ["1H", "Full year"],
            "Receipts_Interest": [10, 30],
        }
    ).to_excel(excel_dir / "NBIM_Cashflow.xlsx", index=False)
    pd.DataFrame({"Year": [2021], "EUR/NOK": [10], "GBP/NOK": [12]}).to_excel(
        excel_dir / "NBIM_ExchangeRates.xlsx", index=False
    )
    return excel_dir


def test_convert_writes_three_json_documents(tmp_path: Path):
    source = ExcelWorkbookSource.from_directory(write_workbooks(tmp_path / "excel"))

    result = ConvertWorkbooksUseCase(source, tmp_path / "json").execute()

    assert [path.name for path in result.written] == ["acquisitions.json", "cashflow.json", "exchange-rates.json"]
    assert (result.investments, result.cashflows, result.rate_years) == (2, 2, 1)
    acquisitions = json.loads((tmp_path / "json" / "acquisitions.json").read_text())
    assert acquisitions["investments"][0]["capacityByStake"] == 500


def test_missing_workbook_is_reported(tmp_path: Path):
    with pytest.raises(WorkbookError, match="NBIM_Acquisitions.xlsx"):
        ExcelWorkbookSource.from_directory(tmp_path)


def test_converted_workbooks_build_expected_metrics(tmp_path: Path):
    source = ExcelWorkbookSource.from_directory(write_workbooks(tmp_path / "excel"))
    ConvertWorkbooksUseCase(source, tmp_path / "json").execute()

    build = BuildDashboardUseCase(DashboardContext(repository=JsonDashboardRepository(tmp_path / "json"))).execute()

    assert build.content.metrics.total_investment == 105
    assert build.content.metrics.total_capacity_by_stake == 600


def test_validation_failure_raises(tmp_path: Path, json_dir: Path):
    (json_dir / "acquisitions.json").write_text(json.dumps({"investments": [{"acquisitionCost": 5}]}))

    with pytest.raises(ValidationFailedError, match="Validation failed with 1 errors"):
        ValidateDataUseCase(JsonDashboardRepository(json_dir), DataValidator()).execute()


def test_non_strict_validation_returns_report(json_dir: Path):
    (json_dir / "acquisitions.json").write_text(json.dumps({"investments": []}))

    report = ValidateDataUseCase(JsonDashboardRepository(json_dir), DataValidator(), strict=False).execute()

    assert report.has_errors()


def test_generate_writes_html_and_api_payload(tmp_path: Path, json_dir: Path):
    builder = BuildDashboardUseCase(DashboardContext(repository=JsonDashboardRepository(json_dir)))

    build = GenerateDashboardUseCase(builder, tmp_path / "public").execute()

    assert (tmp_path / "public" / "index.html").read_text(encoding="utf-8") == build.html
    data = json.loads((tmp_path / "public" / "api" / "data.json").read_text(encoding="utf-8"))
    assert data["metrics"]["totalInvestmentEur"] == 105
    assert data["metrics"]["totalCapacityByStake"] == 600
    assert data["exchangeRates"]["rates"]["NOK_EUR"] == {"2021": 10, "2022": 11}
    assert len(build.written) == 2
