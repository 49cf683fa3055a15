"""JSON-backed repositories for the normalized dashboard datasets."""
from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any, Mapping

from renewables_dashboard.config import ACQUISITIONS_JSON, CASHFLOW_JSON, EXCHANGE_RATES_JSON
from renewables_dashboard.domain.errors import DataLoadError
from renewables_dashboard.domain.models import (
    CASHFLOW_FIELDS,
    FULL_YEAR,
    UNKNOWN,
    AcquisitionsDataset,
    CashflowDataset,
    CashflowPeriodRecord,
    ExchangeRateDataset,
    ExchangeRateTable,
    InvestmentRecord,
)
from renewables_dashboard.domain.repositories import DashboardDataRepository, RawPayloadRepository
from renewables_dashboard.infrastructure.parsing.utils import slugify
from renewables_dashboard.infrastructure.storage.json_store import load_json


def _decimal(value: Any) -> Decimal | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        result = Decimal(str(value))
    except InvalidOperation:
        return None
    return result if result.is_finite() else None


def _int(value: Any) -> int | None:
    number = _decimal(value)
    return int(number) if number is not None else None


def _text(value: Any, default: str = UNKNOWN) -> str:
    if value is None:
        return default
    s = str(value).strip()
    return s or default


def _entries(items: list[Any], filename: str) -> list[Mapping[str, Any]]:
    for index, item in enumerate(items):
        if not isinstance(item, Mapping):
            raise DataLoadError(filename, f"entry {index} is not an object")
    return items


def investment_from_json(raw: Mapping[str, Any], index: int) -> InvestmentRecord:
    name = _text(raw.get("name"), f"Project {index + 1}")
    currency = raw.get("originalCurrency")
    return InvestmentRecord(
        id=_text(raw.get("id"), "") or slugify(name),
        name=name,
        acquisition_cost=_decimal(raw.get("acquisitionCost")),
        original_currency=str(currency).strip().upper() if currency else None,
        stake=_decimal(raw.get("stake")),
        total_capacity=_decimal(raw.get("totalCapacity")),
        capacity_by_stake=_decimal(raw.get("capacityByStake")),
        acquisition_year=_int(raw.get("acquisitionYear")),
        acquisition_month=_text(raw.get("acquisitionMonth")),
        acquisition_status=_text(raw.get("acquisitionStatus")),
        current_status=_text(raw.get("currentStatus")),
        technology=_text(raw.get("technology")),
        geography=_text(raw.get("geography")),
        operator=_text(raw.get("operator")),
    )


def cashflow_from_json(raw: Mapping[str, Any]) -> CashflowPeriodRecord:
    year = _int(raw.get("year"))
    if year is None:
        raise ValueError(f"cashflow entry without a year: {dict(raw)!r}")
    flows = {name: _decimal(raw.get(name)) or Decimal("0") for name in CASHFLOW_FIELDS}
    return CashflowPeriodRecord(year=year, period=_text(raw.get("period"), FULL_YEAR), **flows)


def rates_from_json(raw: Mapping[str, Any]) -> ExchangeRateTable:
    def table(name: str) -> dict[str, Decimal | None]:
        values = raw.get(name) or {}
        if not isinstance(values, Mapping):
            raise ValueError(f"{name} rates must be an object keyed by year")
        return {str(year): _decimal(rate) for year, rate in values.items()}

    return ExchangeRateTable(nok_eur=table("NOK_EUR"), gbp_nok=table("GBP_NOK"))


def acquisitions_from_payload(data: Mapping[str, Any]) -> AcquisitionsDataset:
    investments = data.get("investments")
    if not isinstance(investments, list):
        raise DataLoadError(ACQUISITIONS_JSON, "investments array is missing or invalid")
    if not investments:
        raise DataLoadError(ACQUISITIONS_JSON, "no investments found")
    return AcquisitionsDataset(
        investments=tuple(
            investment_from_json(item, idx)
            for idx, item in enumerate(_entries(investments, ACQUISITIONS_JSON))
        ),
        last_updated=data.get("lastUpdated"),
        metadata=data.get("metadata") or {},
    )


def cashflow_from_payload(data: Mapping[str, Any]) -> CashflowDataset:
    cashflows = data.get("cashflows")
    if not isinstance(cashflows, list):
        raise DataLoadError(CASHFLOW_JSON, "cashflows array is missing or invalid")
    try:
        records = tuple(cashflow_from_json(item) for item in _entries(cashflows, CASHFLOW_JSON))
    except ValueError as exc:
        raise DataLoadError(CASHFLOW_JSON, str(exc)) from exc
    return CashflowDataset(cashflows=records, metadata=data.get("metadata") or {})


def exchange_rates_from_payload(data: Mapping[str, Any]) -> ExchangeRateDataset:
    rates = data.get("rates")
    if not isinstance(rates, Mapping):
        raise DataLoadError(EXCHANGE_RATES_JSON, "rates object is missing")
    try:
        table = rates_from_json(rates)
    except ValueError as exc:
        raise DataLoadError(EXCHANGE_RATES_JSON, str(exc)) from exc
    return ExchangeRateDataset(
        rates=table,
        metadata=data.get("metadata") or {},
        notes=data.get("notes") or {},
    )


class JsonDashboardRepository(DashboardDataRepository, RawPayloadRepository):
    def __init__(self, json_dir: Path) -> None:
        self._json_dir = Path(json_dir)

    def _load(self, filename: str) -> dict[str, Any]:
        return load_json(self._json_dir / filename)

    def load_acquisitions(self) -> AcquisitionsDataset:
        return acquisitions_from_payload(self._load(ACQUISITIONS_JSON))

    def load_cashflow(self) -> CashflowDataset:
        return cashflow_from_payload(self._load(CASHFLOW_JSON))

    def load_exchange_rates(self) -> ExchangeRateDataset:
        return exchange_rates_from_payload(self._load(EXCHANGE_RATES_JSON))

    def load_payloads(self) -> tuple[dict[str, Any], dict[str, Any], dict[str, Any]]:
        """Read the three documents concurrently; the first failure propagates."""
        with ThreadPoolExecutor(max_workers=3) as pool:
            futures = [
                pool.submit(self._load, filename)
                for filename in (ACQUISITIONS_JSON, CASHFLOW_JSON, EXCHANGE_RATES_JSON)
            ]
            acquisitions, cashflow, rates = (future.result() for future in futures)
        return acquisitions, cashflow, rates

    def load_all(self) -> tuple[AcquisitionsDataset, CashflowDataset, ExchangeRateDataset]:
        acquisitions, cashflow, rates = self.load_payloads()
        return (
            acquisitions_from_payload(acquisitions),
            cashflow_from_payload(cashflow),
            exchange_rates_from_payload(rates),
        )


class InMemoryDashboardRepository(DashboardDataRepository, RawPayloadRepository):
    """Serves payloads already held in memory, e.g. freshly converted uploads."""

    def __init__(
        self,
        acquisitions: Mapping[str, Any],
        cashflow: Mapping[str, Any],
        exchange_rates: Mapping[str, Any],
    ) -> None:
        self._payloads = (acquisitions, cashflow, exchange_rates)

    def load_acquisitions(self) -> AcquisitionsDataset:
        return acquisitions_from_payload(self._payloads[0])

    def load_cashflow(self) -> CashflowDataset:
        return cashflow_from_payload(self._payloads[1])

    def load_exchange_rates(self) -> ExchangeRateDataset:
        return exchange_rates_from_payload(self._payloads[2])

    def load_payloads(self) -> tuple[Mapping[str, Any], Mapping[str, Any], Mapping[str, Any]]:
        return self._payloads

    def load_all(self) -> tuple[AcquisitionsDataset, CashflowDataset, ExchangeRateDataset]:
        return self.load_acquisitions(), self.load_cashflow(), self.load_exchange_rates()
