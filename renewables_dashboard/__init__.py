"""Renewable acquisitions dashboard: Excel exports to portfolio metrics and a static HTML report."""
from renewables_dashboard.application.use_cases import (
    BuildDashboardUseCase,
    ConvertWorkbooksUseCase,
    DashboardContext,
    GenerateDashboardUseCase,
    ValidateDataUseCase,
)
from renewables_dashboard.domain.cashflow import CashflowNormalizer
from renewables_dashboard.domain.currency import CurrencyConverter
from renewables_dashboard.domain.metrics import MetricsAggregator
from renewables_dashboard.domain.validation import DataValidator
from renewables_dashboard.infrastructure.repositories.excel_repositories import ExcelWorkbookSource
from renewables_dashboard.infrastructure.repositories.json_repositories import (
    InMemoryDashboardRepository,
    JsonDashboardRepository,
)

__all__ = [
    "BuildDashboardUseCase",
    "ConvertWorkbooksUseCase",
    "DashboardContext",
    "GenerateDashboardUseCase",
    "ValidateDataUseCase",
    "CashflowNormalizer",
    "CurrencyConverter",
    "MetricsAggregator",
    "DataValidator",
    "ExcelWorkbookSource",
    "InMemoryDashboardRepository",
    "JsonDashboardRepository",
]
