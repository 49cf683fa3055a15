from decimal import Decimal

from renewables_dashboard.domain.cashflow import CashflowNormalizer, group_by_year
from renewables_dashboard.domain.models import CashflowPeriodRecord, ExchangeRateTable, normalize_period

UNIT_RATES = ExchangeRateTable(nok_eur={"2021": Decimal("1"), "2022": Decimal("1")})


def record(year: int, period: str, **flows: str) -> CashflowPeriodRecord:
    return CashflowPeriodRecord(year=year, period=period, **{name: Decimal(value) for name, value in flows.items()})


def test_second_half_is_full_year_minus_first_half():
    cashflows = [
        record(2021, "1H", receipts_interest="10", payments_new_investments="-100"),
        record(2021, "Full year", receipts_interest="30", payments_new_investments="-250"),
    ]

    result = CashflowNormalizer().normalize(cashflows, UNIT_RATES)

    assert [(item.year, item.period) for item in result.all_periods] == [(2021, "1H"), (2021, "2H")]
    second_half = result.all_periods[1]
    assert second_half.derived
    assert second_half.flows["receipts_interest"] == Decimal("20")
    assert second_half.flows["payments_new_investments"] == Decimal("-150")
    assert len(result.full_year) == 1


def test_no_second_half_without_full_year():
    result = CashflowNormalizer().normalize([record(2021, "1H", receipts_interest="10")], UNIT_RATES)

    assert [item.period for item in result.all_periods] == ["1H"]
    assert result.incomplete_years == (2021,)
    assert result.full_year == ()


def test_sourced_second_half_is_ignored():
    cashflows = [
        record(2021, "1H", receipts_interest="10"),
        record(2021, "2H", receipts_interest="999"),
        record(2021, "Full year", receipts_interest="30"),
    ]

    result = CashflowNormalizer().normalize(cashflows, UNIT_RATES)

    assert result.all_periods[1].flows["receipts_interest"] == Decimal("20")


def test_missing_rate_keeps_nok_values():
    result = CashflowNormalizer().normalize([record(2019, "Full year", receipts_interest="42.5")], UNIT_RATES)

    converted = result.full_year[0]
    assert converted.currency == "NOK"
    assert converted.exchange_rate is None
    assert converted.flows["receipts_interest"] == Decimal("42.5")
    assert result.missing_rate_years == (2019,)


def test_conversion_rounds_half_up_to_cents():
    rates = ExchangeRateTable(nok_eur={"2021": Decimal("3"), "2022": Decimal("1")})
    cashflows = [
        record(2021, "Full year", receipts_interest="10"),
        record(2022, "Full year", receipts_interest="0.125"),
    ]

    result = CashflowNormalizer().normalize(cashflows, rates)

    assert result.full_year[0].flows["receipts_interest"] == Decimal("3.33")
    assert result.full_year[0].currency == "EUR"
    assert result.full_year[0].exchange_rate == Decimal("3")
    assert result.full_year[1].flows["receipts_interest"] == Decimal("0.13")


def test_periods_are_ordered_by_year():
    cashflows = [
        record(2022, "Full year", receipts_interest="8"),
        record(2022, "H1", receipts_interest="3"),
        record(2021, "Full Year", receipts_interest="6"),
        record(2021, " 1h ", receipts_interest="2"),
    ]

    result = CashflowNormalizer().normalize(cashflows, UNIT_RATES)

    assert [(item.year, item.period) for item in result.all_periods] == [
        (2021, "1H"),
        (2021, "2H"),
        (2022, "1H"),
        (2022, "2H"),
    ]
    assert [item.year for item in result.full_year] == [2021, 2022]


def test_duplicate_rows_keep_the_last_one():
    grouped = group_by_year([record(2021, "1H", receipts_interest="1"), record(2021, "1H", receipts_interest="5")])

    assert grouped[2021]["1H"].receipts_interest == Decimal("5")


def test_period_labels_are_normalized():
    assert normalize_period("Full year") == "Full year"
    assert normalize_period("FULL YEAR 2021") == "Full year"
    assert normalize_period("h1") == "1H"
    assert normalize_period("2 H") == "2H"
    assert normalize_period("Q3") is None
    assert normalize_period(None) is None


def test_as_json_exposes_all_and_full_year_series():
    cashflows = [record(2021, "1H", receipts_interest="10"), record(2021, "Full year", receipts_interest="30")]

    payload = CashflowNormalizer().normalize(cashflows, UNIT_RATES).as_json()

    assert [item["period"] for item in payload["allData"]] == ["1H", "2H"]
    assert payload["fullYearData"][0]["originalCurrency"] == "NOK"
    assert payload["fullYearData"][0]["receipts_interest"] == Decimal("30")
