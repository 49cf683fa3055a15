"""Pre-flight checks over the normalized JSON payloads."""
from __future__ import annotations

from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping

from .results import ValidationReport


def _as_decimal(value: Any) -> Decimal | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return Decimal(str(value))
    except InvalidOperation:
        return None


class DataValidator:
    """Collects errors and warnings for the acquisitions, cashflow and rate payloads.

    Errors block dashboard generation; warnings are reported only.
    """

    def __init__(
        self,
        min_year: int = 2000,
        max_years_ahead: int = 5,
        max_plausible_rate: Decimal = Decimal("50"),
        today: date | None = None,
    ) -> None:
        self._min_year = min_year
        self._max_year = (today or date.today()).year + max_years_ahead
        self._max_rate = max_plausible_rate

    def validate(
        self,
        acquisitions: Mapping[str, Any],
        cashflow: Mapping[str, Any],
        exchange_rates: Mapping[str, Any],
    ) -> ValidationReport:
        errors: list[str] = []
        warnings: list[str] = []
        investments_checked = self._check_acquisitions(acquisitions, errors, warnings)
        cashflows_checked, cashflow_years = self._check_cashflow(cashflow, errors, warnings)
        nok_eur_years, gbp_nok_years = self._check_exchange_rates(exchange_rates, errors, warnings)
        return ValidationReport(
            errors=tuple(errors),
            warnings=tuple(warnings),
            investments_checked=investments_checked,
            cashflows_checked=cashflows_checked,
            cashflow_years=cashflow_years,
            nok_eur_years=nok_eur_years,
            gbp_nok_years=gbp_nok_years,
        )

    def _year_is_valid(self, value: Any) -> bool:
        if isinstance(value, bool) or not isinstance(value, int):
            return False
        return self._min_year <= value <= self._max_year

    def _check_acquisitions(self, data: Mapping[str, Any], errors: list[str], warnings: list[str]) -> int:
        investments = data.get("investments")
        if not isinstance(investments, list):
            errors.append("Acquisitions: investments array is missing or invalid")
            return 0
        if not investments:
            errors.append("Acquisitions: No investments found")
            return 0

        for index, investment in enumerate(investments):
            prefix = f"Acquisitions[{index}]"
            if not isinstance(investment, Mapping):
                errors.append(f"{prefix}: Investment entry is not an object")
                continue
            if not investment.get("name"):
                errors.append(f"{prefix}: Missing project name")
            cost = _as_decimal(investment.get("acquisitionCost"))
            if cost is None or cost <= 0:
                warnings.append(f"{prefix}: Invalid or missing acquisition cost")
            if not investment.get("originalCurrency"):
                warnings.append(f"{prefix}: Missing currency information")
            if not self._year_is_valid(investment.get("acquisitionYear")):
                warnings.append(f"{prefix}: Invalid acquisition year")
            stake = _as_decimal(investment.get("stake"))
            if stake is not None and (stake < 0 or stake > 100):
                warnings.append(f"{prefix}: Invalid stake percentage")
        return len(investments)

    def _check_cashflow(
        self, data: Mapping[str, Any], errors: list[str], warnings: list[str]
    ) -> tuple[int, int]:
        cashflows = data.get("cashflows")
        if not isinstance(cashflows, list):
            errors.append("Cashflow: cashflows array is missing or invalid")
            return 0, 0
        if not cashflows:
            warnings.append("Cashflow: No cashflow data found")
            return 0, 0

        years: set[Any] = set()
        for index, entry in enumerate(cashflows):
            prefix = f"Cashflow[{index}]"
            if not isinstance(entry, Mapping):
                errors.append(f"{prefix}: Cashflow entry is not an object")
                continue
            year = entry.get("year")
            if not self._year_is_valid(year):
                warnings.append(f"{prefix}: Invalid year")
            years.add(year)
            if not entry.get("period"):
                warnings.append(f"{prefix}: Missing period information")
        return len(cashflows), len(years)

    def _check_exchange_rates(
        self, data: Mapping[str, Any], errors: list[str], warnings: list[str]
    ) -> tuple[int, int]:
        rates = data.get("rates")
        if not isinstance(rates, Mapping):
            errors.append("Exchange rates: rates object is missing")
            return 0, 0

        counts: list[int] = []
        for key, label in (("NOK_EUR", "NOK/EUR"), ("GBP_NOK", "GBP/NOK")):
            table = rates.get(key) or {}
            if not isinstance(table, Mapping):
                errors.append(f"Exchange rates: {label} rates must be an object keyed by year")
                counts.append(0)
                continue
            if not table:
                warnings.append(f"Exchange rates: No {label} rates found")
            counts.append(len(table))
            for year, raw in table.items():
                rate = _as_decimal(raw)
                if rate is None:
                    continue
                if rate <= 0 or rate > self._max_rate:
                    warnings.append(f"Exchange rates: Suspicious {label} rate for {year}: {raw}")
        return counts[0], counts[1]
