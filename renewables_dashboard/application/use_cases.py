"""Application services orchestrating the convert, validate and generate stages."""
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

from renewables_dashboard.application.dto import ConversionResult, DashboardBuild
from renewables_dashboard.config import ACQUISITIONS_JSON, CASHFLOW_JSON, EXCHANGE_RATES_JSON
from renewables_dashboard.domain.cashflow import CashflowNormalizer
from renewables_dashboard.domain.currency import CurrencyConverter
from renewables_dashboard.domain.errors import ValidationFailedError
from renewables_dashboard.domain.metrics import MetricsAggregator
from renewables_dashboard.domain.repositories import (
    DashboardDataRepository,
    RawPayloadRepository,
    WorkbookSource,
)
from renewables_dashboard.domain.results import ValidationReport
from renewables_dashboard.domain.validation import DataValidator
from renewables_dashboard.infrastructure.storage.json_store import save_json, save_text
from renewables_dashboard.presentation.dashboard import DashboardContent, render_dashboard
from renewables_dashboard.presentation.projection import investment_rows

logger = logging.getLogger(__name__)


class ConvertWorkbooksUseCase:
    """Turns the three workbooks into JSON documents under ``json_dir``."""

    def __init__(self, source: WorkbookSource, json_dir: Path) -> None:
        self._source = source
        self._json_dir = Path(json_dir)

    def payloads(self) -> tuple[dict[str, Any], dict[str, Any], dict[str, Any]]:
        with ThreadPoolExecutor(max_workers=3) as pool:
            futures = [
                pool.submit(self._source.acquisitions_payload),
                pool.submit(self._source.cashflow_payload),
                pool.submit(self._source.exchange_rates_payload),
            ]
            acquisitions, cashflow, rates = (future.result() for future in futures)
        return acquisitions, cashflow, rates

    def execute(self) -> ConversionResult:
        acquisitions, cashflow, rates = self.payloads()
        written = [
            save_json(self._json_dir / ACQUISITIONS_JSON, acquisitions),
            save_json(self._json_dir / CASHFLOW_JSON, cashflow),
            save_json(self._json_dir / EXCHANGE_RATES_JSON, rates),
        ]
        result = ConversionResult(
            written=tuple(written),
            investments=len(acquisitions["investments"]),
            cashflows=len(cashflow["cashflows"]),
            rate_years=len(rates["rates"]["NOK_EUR"]),
        )
        logger.info("Converted %d investments from Excel", result.investments)
        logger.info("Converted %d cashflow entries from Excel", result.cashflows)
        logger.info("Converted %d exchange rate years from Excel", result.rate_years)
        return result


class ValidateDataUseCase:
    def __init__(self, repository: RawPayloadRepository, validator: DataValidator, strict: bool = True) -> None:
        self._repository = repository
        self._validator = validator
        self._strict = strict

    def execute(self) -> ValidationReport:
        acquisitions, cashflow, rates = self._repository.load_payloads()
        report = self._validator.validate(acquisitions, cashflow, rates)
        log_validation_report(report)
        if self._strict and report.has_errors():
            raise ValidationFailedError(len(report.errors))
        return report


def log_validation_report(report: ValidationReport) -> None:
    logger.info("Acquisitions: %d investments validated", report.investments_checked)
    logger.info(
        "Cashflow: %d entries validated across %d years", report.cashflows_checked, report.cashflow_years
    )
    logger.info(
        "Exchange rates: %d NOK/EUR and %d GBP/NOK rates validated", report.nok_eur_years, report.gbp_nok_years
    )
    logger.info("Validation results: %d errors, %d warnings", len(report.errors), len(report.warnings))
    for error in report.errors:
        logger.error("  - %s", error)
    for warning in report.warnings:
        logger.warning("  - %s", warning)


@dataclass(slots=True)
class DashboardContext:
    repository: DashboardDataRepository
    converter: CurrencyConverter = field(default_factory=CurrencyConverter)
    aggregator: MetricsAggregator | None = None
    normalizer: CashflowNormalizer | None = None


class BuildDashboardUseCase:
    """Computes metrics, normalizes cashflows and renders the dashboard in memory."""

    def __init__(self, context: DashboardContext, templates_dir: Path | None = None) -> None:
        self._context = context
        self._aggregator = context.aggregator or MetricsAggregator(context.converter)
        self._normalizer = context.normalizer or CashflowNormalizer(context.converter.target_currency)
        self._templates_dir = templates_dir

    def execute(self) -> DashboardBuild:
        acquisitions, cashflow, exchange_rates = self._context.repository.load_all()
        rates = exchange_rates.rates

        metrics = self._aggregator.aggregate(acquisitions.investments, rates)
        rows = investment_rows(acquisitions.investments, rates, self._context.converter)
        normalized = self._normalizer.normalize(cashflow.cashflows, rates)

        content = DashboardContent(
            metrics=metrics,
            investments=rows,
            cashflow=normalized,
            cashflow_source=cashflow.cashflows,
            exchange_rates=exchange_rates,
            last_updated=acquisitions.last_updated,
        )
        api_payload = {
            "metrics": metrics.as_json(),
            "investments": rows,
            "cashflow": normalized.as_json(),
            "exchangeRates": exchange_rates.as_json(),
            "lastUpdated": acquisitions.last_updated,
        }
        html = render_dashboard(content, self._templates_dir)
        return DashboardBuild(content=content, html=html, api_payload=api_payload)


class GenerateDashboardUseCase:
    """Builds the dashboard and writes ``index.html`` and ``api/data.json``."""

    def __init__(self, builder: BuildDashboardUseCase, public_dir: Path) -> None:
        self._builder = builder
        self._public_dir = Path(public_dir)

    def execute(self) -> DashboardBuild:
        build = self._builder.execute()
        written = (
            save_text(self._public_dir / "index.html", build.html),
            save_json(self._public_dir / "api" / "data.json", build.api_payload),
        )
        logger.info("Dashboard generated in %s", self._public_dir)
        return replace(build, written=written)
