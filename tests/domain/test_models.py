from decimal import Decimal

from renewables_dashboard.domain.models import CashflowPeriodRecord, ExchangeRateTable, InvestmentRecord


def test_capacity_by_stake_prefers_direct_value():
    investment = InvestmentRecord(
        id="a", name="A", stake=Decimal("50"), total_capacity=Decimal("200"), capacity_by_stake=Decimal("80")
    )

    assert investment.effective_capacity_by_stake() == Decimal("80")


def test_capacity_by_stake_is_derived_from_stake():
    investment = InvestmentRecord(id="a", name="A", stake=Decimal("25"), total_capacity=Decimal("400"))

    assert investment.effective_capacity_by_stake() == Decimal("100")


def test_capacity_by_stake_is_none_without_inputs():
    assert InvestmentRecord(id="a", name="A", stake=Decimal("25")).effective_capacity_by_stake() is None
    assert InvestmentRecord(id="a", name="A", capacity_by_stake=Decimal("0")).effective_capacity_by_stake() is None


def test_cashflow_minus_subtracts_every_flow():
    full = CashflowPeriodRecord(year=2021, period="Full year", receipts_interest=Decimal("30"), net_cf_unlisted_infra=Decimal("7"))
    first = CashflowPeriodRecord(year=2021, period="1H", receipts_interest=Decimal("10"), net_cf_unlisted_infra=Decimal("9"))

    second = full.minus(first, "2H")

    assert second.period == "2H"
    assert second.receipts_interest == Decimal("20")
    assert second.net_cf_unlisted_infra == Decimal("-2")
    assert second.receipts_dividends == Decimal("0")


def test_rate_lookup_accepts_int_and_str_years():
    rates = ExchangeRateTable(nok_eur={"2021": Decimal("10"), "2022": None})

    assert rates.nok_eur_for(2021) == Decimal("10")
    assert rates.nok_eur_for("2021") == Decimal("10")
    assert rates.nok_eur_for(2022) is None
    assert rates.nok_eur_for(None) is None
    assert rates.as_json() == {"NOK_EUR": {"2021": Decimal("10"), "2022": None}, "GBP_NOK": {}}
