"""Excel-backed sources for the acquisitions, cashflow and exchange-rate workbooks."""
from __future__ import annotations

from io import BytesIO
from pathlib import Path
from typing import Any

from renewables_dashboard.config import (
    ACQUISITIONS_WORKBOOK,
    CASHFLOW_WORKBOOK,
    EXCHANGE_RATES_WORKBOOK,
)
from renewables_dashboard.domain.errors import WorkbookError
from renewables_dashboard.domain.repositories import WorkbookSource
from renewables_dashboard.infrastructure.parsing.acquisitions import acquisitions_to_payload
from renewables_dashboard.infrastructure.parsing.cashflow import cashflow_to_payload
from renewables_dashboard.infrastructure.parsing.exchange_rates import exchange_rates_to_payload
from renewables_dashboard.infrastructure.parsing.utils import ensure_bytes


def _read_workbook(path: Path) -> bytes:
    try:
        return path.read_bytes()
    except FileNotFoundError:
        raise WorkbookError(path.name, f"workbook not found at {path}") from None


class ExcelWorkbookSource(WorkbookSource):
    def __init__(
        self,
        acquisitions: BytesIO | Path | bytes,
        cashflow: BytesIO | Path | bytes,
        exchange_rates: BytesIO | Path | bytes,
        acquisitions_name: str = ACQUISITIONS_WORKBOOK,
        cashflow_name: str = CASHFLOW_WORKBOOK,
        exchange_rates_name: str = EXCHANGE_RATES_WORKBOOK,
    ) -> None:
        self._acquisitions = ensure_bytes(acquisitions)
        self._cashflow = ensure_bytes(cashflow)
        self._exchange_rates = ensure_bytes(exchange_rates)
        self._names = (acquisitions_name, cashflow_name, exchange_rates_name)

    @classmethod
    def from_directory(cls, excel_dir: Path) -> ExcelWorkbookSource:
        excel_dir = Path(excel_dir)
        return cls(
            _read_workbook(excel_dir / ACQUISITIONS_WORKBOOK),
            _read_workbook(excel_dir / CASHFLOW_WORKBOOK),
            _read_workbook(excel_dir / EXCHANGE_RATES_WORKBOOK),
        )

    def acquisitions_payload(self) -> dict[str, Any]:
        return acquisitions_to_payload(self._acquisitions, filename=self._names[0])

    def cashflow_payload(self) -> dict[str, Any]:
        return cashflow_to_payload(self._cashflow, filename=self._names[1])

    def exchange_rates_payload(self) -> dict[str, Any]:
        return exchange_rates_to_payload(self._exchange_rates, filename=self._names[2])
