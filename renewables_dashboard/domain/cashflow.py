"""Cashflow period reconstruction and NOK to target-currency conversion."""
from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import replace
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Mapping, Sequence

from .models import (
    FIRST_HALF,
    FULL_YEAR,
    SECOND_HALF,
    CashflowPeriodRecord,
    ExchangeRateTable,
    normalize_period,
)
from .results import ConvertedCashflow, NormalizedCashflow

logger = logging.getLogger(__name__)

SOURCE_CURRENCY = "NOK"
CENT = Decimal("0.01")


def group_by_year(cashflows: Iterable[CashflowPeriodRecord]) -> dict[int, dict[str, CashflowPeriodRecord]]:
    """Index records as ``year -> period -> record``; later duplicates win."""
    grouped: dict[int, dict[str, CashflowPeriodRecord]] = defaultdict(dict)
    for record in cashflows:
        period = normalize_period(record.period)
        if period is None:
            logger.warning("Cashflow %s: unrecognised period %r, skipping", record.year, record.period)
            continue
        if period == SECOND_HALF:
            logger.debug("Cashflow %s: ignoring sourced 2H row, second half is derived", record.year)
            continue
        if period in grouped[record.year]:
            logger.warning("Cashflow %s: duplicate %s row, keeping the last one", record.year, period)
        grouped[record.year][period] = replace(record, period=period)
    return dict(grouped)


def derive_second_half(full_year: CashflowPeriodRecord, first_half: CashflowPeriodRecord) -> CashflowPeriodRecord:
    """2H is never reported directly: it is Full year minus 1H for every flow."""
    return full_year.minus(first_half, period=SECOND_HALF)


class CashflowNormalizer:
    """Builds the half-year series and converts NOK cashflows into the target currency."""

    def __init__(self, target_currency: str = "EUR") -> None:
        self._target = target_currency

    def normalize(self, cashflows: Sequence[CashflowPeriodRecord], rates: ExchangeRateTable) -> NormalizedCashflow:
        grouped = group_by_year(cashflows)

        working: list[tuple[CashflowPeriodRecord, bool]] = []
        full_year_records: list[CashflowPeriodRecord] = []
        incomplete: list[int] = []

        for year in sorted(grouped):
            periods = grouped[year]
            first_half = periods.get(FIRST_HALF)
            full_year = periods.get(FULL_YEAR)
            if first_half is not None:
                working.append((first_half, False))
                if full_year is not None:
                    working.append((derive_second_half(full_year, first_half), True))
                else:
                    incomplete.append(year)
                    logger.warning("Cashflow %s: 1H reported without Full year, no 2H derived", year)
            if full_year is not None:
                full_year_records.append(full_year)

        missing_rate_years: set[int] = set()
        all_periods = [
            self._convert(record, rates, derived, missing_rate_years) for record, derived in working
        ]
        full_year_converted = [
            self._convert(record, rates, False, missing_rate_years) for record in full_year_records
        ]

        return NormalizedCashflow(
            full_year=tuple(full_year_converted),
            all_periods=tuple(all_periods),
            incomplete_years=tuple(incomplete),
            missing_rate_years=tuple(sorted(missing_rate_years)),
        )

    def _convert(
        self,
        record: CashflowPeriodRecord,
        rates: ExchangeRateTable,
        derived: bool,
        missing_rate_years: set[int],
    ) -> ConvertedCashflow:
        rate = rates.nok_eur_for(record.year)
        if rate is None:
            if record.year not in missing_rate_years:
                logger.warning("Missing EUR/NOK exchange rate for %s, keeping NOK values", record.year)
            missing_rate_years.add(record.year)
            return ConvertedCashflow(
                year=record.year,
                period=record.period,
                flows=record.flows(),
                currency=SOURCE_CURRENCY,
                original_currency=SOURCE_CURRENCY,
                exchange_rate=None,
                derived=derived,
            )
        return ConvertedCashflow(
            year=record.year,
            period=record.period,
            flows=convert_flows(record.flows(), rate),
            currency=self._target,
            original_currency=SOURCE_CURRENCY,
            exchange_rate=rate,
            derived=derived,
        )


def convert_flows(flows: Mapping[str, Decimal], rate: Decimal) -> dict[str, Decimal]:
    return {name: (value / rate).quantize(CENT, rounding=ROUND_HALF_UP) for name, value in flows.items()}
