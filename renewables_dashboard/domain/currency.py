"""Currency conversion into the reporting currency using yearly rate tables."""
from __future__ import annotations

import enum
from dataclasses import dataclass
from decimal import Context, Decimal, getcontext

from .models import ExchangeRateTable

ZERO = Decimal("0")


class ConversionIssue(str, enum.Enum):
    MISSING_RATE = "missing_rate"
    UNKNOWN_CURRENCY = "unknown_currency"


@dataclass(frozen=True)
class Conversion:
    """Result of converting one amount; ``issue`` is set when the amount fell back unconverted."""

    amount: Decimal
    source_currency: str | None
    year: int | str | None
    issue: ConversionIssue | None = None

    @property
    def converted(self) -> bool:
        return self.issue is None

    def describe_issue(self) -> str:
        if self.issue is ConversionIssue.MISSING_RATE:
            return f"Missing exchange rate for {self.source_currency} in {self.year}, using original value"
        if self.issue is ConversionIssue.UNKNOWN_CURRENCY:
            return f"Unknown currency: {self.source_currency}, using original value"
        return ""


class CurrencyConverter:
    """Converts EUR, GBP and NOK amounts into EUR.

    GBP has no direct EUR rate in the source data, so GBP amounts travel
    through NOK: ``amount * GBP_NOK[year] / NOK_EUR[year]``. When a needed
    rate is missing the original amount is returned and the conversion is
    flagged, never raised.
    """

    def __init__(self, target_currency: str = "EUR", context: Context | None = None) -> None:
        self._target = target_currency
        self._context = context or getcontext()

    @property
    def target_currency(self) -> str:
        return self._target

    def convert(
        self,
        amount: Decimal | None,
        currency: str | None,
        year: int | str | None,
        rates: ExchangeRateTable,
    ) -> Conversion:
        if not amount:
            return Conversion(amount=amount or ZERO, source_currency=currency, year=year)
        if currency == self._target:
            return Conversion(amount=amount, source_currency=currency, year=year)

        if currency == "GBP":
            gbp_nok = rates.gbp_nok_for(year)
            nok_eur = rates.nok_eur_for(year)
            if gbp_nok is None or nok_eur is None:
                return Conversion(amount, currency, year, issue=ConversionIssue.MISSING_RATE)
            nok_value = self._context.multiply(amount, gbp_nok)
            return Conversion(self._context.divide(nok_value, nok_eur), currency, year)

        if currency == "NOK":
            nok_eur = rates.nok_eur_for(year)
            if nok_eur is None:
                return Conversion(amount, currency, year, issue=ConversionIssue.MISSING_RATE)
            return Conversion(self._context.divide(amount, nok_eur), currency, year)

        return Conversion(amount, currency, year, issue=ConversionIssue.UNKNOWN_CURRENCY)

    def convert_to_eur(
        self,
        amount: Decimal | None,
        currency: str | None,
        year: int | str | None,
        rates: ExchangeRateTable,
    ) -> Decimal:
        return self.convert(amount, currency, year, rates).amount
