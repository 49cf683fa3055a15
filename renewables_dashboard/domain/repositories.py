"""Repository interfaces anchoring the domain layer."""
from __future__ import annotations

from typing import Any, Mapping, Protocol

from .models import AcquisitionsDataset, CashflowDataset, ExchangeRateDataset


class DashboardDataRepository(Protocol):
    """Provides the three normalized datasets the dashboard is built from."""

    def load_acquisitions(self) -> AcquisitionsDataset:
        ...

    def load_cashflow(self) -> CashflowDataset:
        ...

    def load_exchange_rates(self) -> ExchangeRateDataset:
        ...

    def load_all(self) -> tuple[AcquisitionsDataset, CashflowDataset, ExchangeRateDataset]:
        ...


class RawPayloadRepository(Protocol):
    """Provides the normalized JSON payloads untouched, for validation."""

    def load_payloads(self) -> tuple[Mapping[str, Any], Mapping[str, Any], Mapping[str, Any]]:
        ...


class WorkbookSource(Protocol):
    """Provides spreadsheet payloads converted into their JSON document shape."""

    def acquisitions_payload(self) -> dict[str, Any]:
        ...

    def cashflow_payload(self) -> dict[str, Any]:
        ...

    def exchange_rates_payload(self) -> dict[str, Any]:
        ...
