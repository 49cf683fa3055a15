"""Central configuration for the renewables dashboard package."""
from __future__ import annotations

import os
from dataclasses import dataclass
from decimal import Context, Decimal
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent

TARGET_CURRENCY = "EUR"

ACQUISITIONS_WORKBOOK = "NBIM_Acquisitions.xlsx"
CASHFLOW_WORKBOOK = "NBIM_Cashflow.xlsx"
EXCHANGE_RATES_WORKBOOK = "NBIM_ExchangeRates.xlsx"

ACQUISITIONS_JSON = "acquisitions.json"
CASHFLOW_JSON = "cashflow.json"
EXCHANGE_RATES_JSON = "exchange-rates.json"

DASHBOARD_TEMPLATE = "dashboard-template.html"


@dataclass(slots=True, frozen=True)
class Settings:
    decimal_context: Context
    target_currency: str
    base_dir: Path
    data_dir: Path
    public_dir: Path
    templates_dir: Path
    min_year: int
    max_years_ahead: int
    max_plausible_rate: Decimal

    @property
    def excel_dir(self) -> Path:
        return self.data_dir / "excel"

    @property
    def json_dir(self) -> Path:
        return self.data_dir / "json"


def _env_path(name: str, default: Path) -> Path:
    value = os.getenv(name)
    return Path(value).resolve() if value else default


def load_settings() -> Settings:
    base_dir = _env_path("RENEWABLES_BASE_DIR", BASE_DIR)
    return Settings(
        decimal_context=Context(prec=28),
        target_currency=TARGET_CURRENCY,
        base_dir=base_dir,
        data_dir=_env_path("RENEWABLES_DATA_DIR", base_dir / "data"),
        public_dir=_env_path("RENEWABLES_PUBLIC_DIR", base_dir / "public"),
        templates_dir=_env_path("RENEWABLES_TEMPLATES_DIR", base_dir / "templates"),
        min_year=2000,
        max_years_ahead=5,
        max_plausible_rate=Decimal("50"),
    )


SETTINGS = load_settings()
