"""Domain models for the renewables dashboard pipeline.

These dataclasses capture the canonical schema of the normalized JSON
sources: acquired assets, half-year/annual cashflow periods and the yearly
exchange-rate table used to express everything in the target currency.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from decimal import Decimal
from typing import Any, Mapping

UNKNOWN = "Unknown"

FIRST_HALF = "1H"
SECOND_HALF = "2H"
FULL_YEAR = "Full year"

CASHFLOW_FIELDS = (
    "receipts_interest",
    "receipts_dividends",
    "payments_new_investments",
    "payments_development_assets",
    "receipts_from_ongoing_ops",
    "net_cf_to_from_investments",
    "net_cf_unlisted_infra",
    "cash_flow_from_ongoing_ops",
    "receipts_interest_div_total",
)


def normalize_period(label: str | None) -> str | None:
    """Map free-text period labels onto 1H / 2H / Full year."""
    if label is None:
        return None
    value = str(label).strip().lower()
    if "full" in value:
        return FULL_YEAR
    compact = value.replace(" ", "")
    if compact in {"1h", "h1"}:
        return FIRST_HALF
    if compact in {"2h", "h2"}:
        return SECOND_HALF
    return None


@dataclass(frozen=True)
class InvestmentRecord:
    """One acquired asset as exported from the acquisitions workbook."""

    id: str
    name: str
    acquisition_cost: Decimal | None = None
    original_currency: str | None = "EUR"
    stake: Decimal | None = None
    total_capacity: Decimal | None = None
    capacity_by_stake: Decimal | None = None
    acquisition_year: int | None = None
    acquisition_month: str = UNKNOWN
    acquisition_status: str = UNKNOWN
    current_status: str = UNKNOWN
    technology: str = UNKNOWN
    geography: str = UNKNOWN
    operator: str = UNKNOWN

    def effective_capacity_by_stake(self) -> Decimal | None:
        """Direct capacity-by-stake if non-zero, else total * stake / 100."""
        if self.capacity_by_stake:
            return self.capacity_by_stake
        if self.stake and self.total_capacity:
            return self.total_capacity * self.stake / Decimal(100)
        return None

    def as_json(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "acquisitionCost": self.acquisition_cost,
            "originalCurrency": self.original_currency,
            "stake": self.stake,
            "totalCapacity": self.total_capacity,
            "capacityByStake": self.capacity_by_stake,
            "acquisitionYear": self.acquisition_year,
            "acquisitionMonth": self.acquisition_month,
            "acquisitionStatus": self.acquisition_status,
            "currentStatus": self.current_status,
            "technology": self.technology,
            "geography": self.geography,
            "operator": self.operator,
        }


@dataclass(frozen=True)
class CashflowPeriodRecord:
    """One reporting period of NOK-denominated cashflows for one year."""

    year: int
    period: str
    receipts_interest: Decimal = Decimal("0")
    receipts_dividends: Decimal = Decimal("0")
    payments_new_investments: Decimal = Decimal("0")
    payments_development_assets: Decimal = Decimal("0")
    receipts_from_ongoing_ops: Decimal = Decimal("0")
    net_cf_to_from_investments: Decimal = Decimal("0")
    net_cf_unlisted_infra: Decimal = Decimal("0")
    cash_flow_from_ongoing_ops: Decimal = Decimal("0")
    receipts_interest_div_total: Decimal = Decimal("0")

    def flows(self) -> dict[str, Decimal]:
        return {name: getattr(self, name) for name in CASHFLOW_FIELDS}

    def minus(self, other: CashflowPeriodRecord, period: str) -> CashflowPeriodRecord:
        """Field-wise ``self - other`` relabelled as ``period``."""
        differences = {name: getattr(self, name) - getattr(other, name) for name in CASHFLOW_FIELDS}
        return replace(self, period=period, **differences)

    def as_json(self) -> dict[str, Any]:
        return {"year": self.year, "period": self.period, **self.flows()}


@dataclass(frozen=True)
class ExchangeRateTable:
    """Yearly rates: ``NOK_EUR`` (NOK per EUR) and ``GBP_NOK`` (NOK per GBP)."""

    nok_eur: Mapping[str, Decimal | None] = field(default_factory=dict)
    gbp_nok: Mapping[str, Decimal | None] = field(default_factory=dict)

    def nok_eur_for(self, year: int | str | None) -> Decimal | None:
        return self._lookup(self.nok_eur, year)

    def gbp_nok_for(self, year: int | str | None) -> Decimal | None:
        return self._lookup(self.gbp_nok, year)

    @staticmethod
    def _lookup(table: Mapping[str, Decimal | None], year: int | str | None) -> Decimal | None:
        if year is None:
            return None
        rate = table.get(str(year))
        # null and zero rates are unusable as divisors
        if not rate:
            return None
        return rate

    def as_json(self) -> dict[str, dict[str, Decimal | None]]:
        return {"NOK_EUR": dict(self.nok_eur), "GBP_NOK": dict(self.gbp_nok)}


@dataclass(frozen=True)
class AcquisitionsDataset:
    investments: tuple[InvestmentRecord, ...]
    last_updated: str | None = None
    metadata: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class CashflowDataset:
    cashflows: tuple[CashflowPeriodRecord, ...]
    metadata: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ExchangeRateDataset:
    rates: ExchangeRateTable
    metadata: Mapping[str, Any] = field(default_factory=dict)
    notes: Mapping[str, str] = field(default_factory=dict)

    def as_json(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"rates": self.rates.as_json(), "metadata": dict(self.metadata)}
        if self.notes:
            payload["notes"] = dict(self.notes)
        return payload

