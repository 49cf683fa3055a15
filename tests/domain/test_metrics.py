import logging
from decimal import Decimal

from renewables_dashboard.domain.metrics import MetricsAggregator, classify_status, is_offshore_wind
from renewables_dashboard.domain.models import ExchangeRateTable, InvestmentRecord

RATES = ExchangeRateTable(nok_eur={"2021": Decimal("10")})


def make_investment(name: str, cost: str, currency: str = "EUR", **kwargs) -> InvestmentRecord:
    return InvestmentRecord(
        id=name.lower(),
        name=name,
        acquisition_cost=Decimal(cost),
        original_currency=currency,
        **kwargs,
    )


def portfolio() -> list[InvestmentRecord]:
    return [
        make_investment(
            "Offshore",
            "100",
            acquisition_year=2021,
            technology="Offshore Wind",
            capacity_by_stake=Decimal("500"),
            current_status="Operational",
        ),
        make_investment(
            "Onshore",
            "50",
            currency="NOK",
            acquisition_year=2021,
            technology="Onshore Wind",
            stake=Decimal("50"),
            total_capacity=Decimal("200"),
            current_status="Development",
        ),
    ]


def test_end_to_end_summary():
    summary = MetricsAggregator().aggregate(portfolio(), RATES)

    assert summary.total_investment == Decimal("105")
    assert summary.total_capacity_by_stake == Decimal("600")
    assert summary.total_capacity_all == Decimal("200")
    assert summary.offshore_investment == Decimal("100")
    assert summary.offshore_capacity_by_stake == Decimal("500")
    assert summary.offshore_operational_capacity == Decimal("500")
    assert summary.offshore_operational_percentage == Decimal("100")
    assert summary.operational_percentage.quantize(Decimal("0.01")) == Decimal("95.24")
    assert summary.status_breakdown.development == Decimal("5")
    assert summary.avg_investment_per_year == Decimal("105")
    assert summary.yearly_investments == {2021: Decimal("105")}
    assert summary.total_projects == 2


def test_technology_breakdown_partitions_total():
    investments = portfolio() + [make_investment("Solar", "12.5", technology="Solar PV", acquisition_year=2022)]

    summary = MetricsAggregator().aggregate(investments, RATES)

    assert sum(item.value for item in summary.technology_breakdown.values()) == summary.total_investment
    assert sum(item.count for item in summary.technology_breakdown.values()) == summary.total_projects
    assert summary.technology_breakdown["Onshore Wind"].capacity == Decimal("100")


def test_aggregation_is_repeatable():
    aggregator = MetricsAggregator()

    first = aggregator.aggregate(portfolio(), RATES)
    second = aggregator.aggregate(portfolio(), RATES)

    assert first == second


def test_empty_portfolio_has_zero_ratios():
    summary = MetricsAggregator().aggregate([], RATES)

    assert summary.total_investment == 0
    assert summary.operational_percentage == 0
    assert summary.avg_investment_per_year == 0
    assert summary.offshore_percentage_of_total == 0
    assert summary.offshore_operational_percentage == 0


def test_missing_rate_keeps_original_cost(caplog):
    investments = [make_investment("Legacy", "100", currency="GBP", acquisition_year=1999)]

    with caplog.at_level(logging.WARNING):
        summary = MetricsAggregator().aggregate(investments, RATES)

    assert summary.total_investment == Decimal("100")
    assert "Missing exchange rate for GBP in 1999" in caplog.text


def test_missing_year_is_bucketed_as_unknown():
    summary = MetricsAggregator().aggregate([make_investment("Undated", "10")], RATES)

    assert summary.yearly_investments == {None: Decimal("10")}
    assert summary.as_json()["yearlyInvestments"] == {"Unknown": Decimal("10")}


def test_status_keywords_follow_priority_order():
    assert classify_status("Operational, phase 2 in development") == "operational"
    assert classify_status("Development and construction") == "development"
    assert classify_status("Under Construction") == "construction"
    assert classify_status("Decommissioned") is None
    assert classify_status(None) is None


def test_offshore_wind_matches_substring():
    assert is_offshore_wind("Offshore Wind (floating)")
    assert not is_offshore_wind("Onshore Wind")
    assert not is_offshore_wind(None)


def test_merged_accumulators_match_single_pass():
    aggregator = MetricsAggregator()
    first, second = portfolio()

    merged = aggregator.accumulate([first], RATES).merge(aggregator.accumulate([second], RATES))

    assert merged.summarize() == aggregator.accumulate([first, second], RATES).summarize()
