from decimal import Decimal
from pathlib import Path

from renewables_dashboard import BuildDashboardUseCase, DashboardContext, InMemoryDashboardRepository
from renewables_dashboard.presentation.dashboard import (
    PLACEHOLDER,
    build_replacements,
    fill_template,
    render_investments_table,
)


def build(acquisitions_payload, cashflow_payload, rates_payload, templates_dir=None):
    repository = InMemoryDashboardRepository(acquisitions_payload, cashflow_payload, rates_payload)
    return BuildDashboardUseCase(DashboardContext(repository=repository), templates_dir).execute()


def test_fill_template_is_single_pass():
    assert fill_template("{{A}} {{B}} {{A}}", {"A": "x"}) == "x {{B}} x"
    assert fill_template("{{A}}", {"A": "{{B}}", "B": "y"}) == "{{B}}"


def test_investments_table_escapes_cells():
    table = render_investments_table(
        [{"name": "<script>alert(1)</script>", "acquisitionCostEur": Decimal("2500"), "nbimCapacity": None}]
    )

    assert "&lt;script&gt;" in table
    assert "<script>" not in table
    assert "€2.5BM" in table
    assert "<td>N/A</td>" in table


def test_builtin_template_is_fully_filled(acquisitions_payload, cashflow_payload, rates_payload):
    result = build(acquisitions_payload, cashflow_payload, rates_payload)

    assert PLACEHOLDER.search(result.html) is None
    assert "Hornsea One" in result.html
    assert "1 May 2024, 10:15 UTC" in result.html


def test_replacements_cover_summary_figures(acquisitions_payload, cashflow_payload, rates_payload):
    result = build(acquisitions_payload, cashflow_payload, rates_payload)

    replacements = build_replacements(result.content)

    assert replacements["TOTAL_INVESTMENT"] == "105"
    assert replacements["TOTAL_PROJECTS"] == "2"
    assert replacements["TOTAL_CAPACITY"] == "600"
    assert replacements["OPERATIONAL_PERCENTAGE"] == "95"
    assert replacements["OFFSHORE_CAPACITY_GW"] == "0.5"
    assert replacements["TOTAL_INTEREST_RECEIPTS"] == "7.0"


def test_custom_template_keeps_unknown_placeholders(tmp_path: Path, acquisitions_payload, cashflow_payload, rates_payload):
    (tmp_path / "dashboard-template.html").write_text("<p>{{TOTAL_PROJECTS}}</p>{{NOT_A_FIELD}}", encoding="utf-8")

    result = build(acquisitions_payload, cashflow_payload, rates_payload, templates_dir=tmp_path)

    assert result.html == "<p>2</p>{{NOT_A_FIELD}}"


def test_api_payload_shape(acquisitions_payload, cashflow_payload, rates_payload):
    payload = build(acquisitions_payload, cashflow_payload, rates_payload).api_payload

    assert set(payload) == {"metrics", "investments", "cashflow", "exchangeRates", "lastUpdated"}
    assert payload["metrics"]["totalInvestmentEur"] == Decimal("105")
    assert payload["investments"][1]["acquisitionCostEur"] == Decimal("5")
    assert [item["period"] for item in payload["cashflow"]["allData"]] == ["1H", "2H"]
