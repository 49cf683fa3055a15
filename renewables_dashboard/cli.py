"""Command-line entrypoints for the dashboard pipeline stages."""
from __future__ import annotations

import argparse
import logging
import sys

from renewables_dashboard.application.use_cases import (
    BuildDashboardUseCase,
    ConvertWorkbooksUseCase,
    DashboardContext,
    GenerateDashboardUseCase,
    ValidateDataUseCase,
)
from renewables_dashboard.config import Settings, load_settings
from renewables_dashboard.domain.currency import CurrencyConverter
from renewables_dashboard.domain.errors import PipelineError
from renewables_dashboard.domain.validation import DataValidator
from renewables_dashboard.infrastructure.repositories.excel_repositories import ExcelWorkbookSource
from renewables_dashboard.infrastructure.repositories.json_repositories import JsonDashboardRepository

logger = logging.getLogger("renewables_dashboard")

STAGES = ("convert", "validate", "generate")


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Build the renewable acquisitions dashboard from Excel exports")
    parser.add_argument(
        "stage",
        choices=STAGES + ("all",),
        help="convert: Excel to JSON, validate: check JSON, generate: render dashboard, all: run every stage",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO, format="%(levelname)s %(message)s")


def run_convert(settings: Settings) -> None:
    logger.info("Starting Excel to JSON conversion from %s", settings.excel_dir)
    source = ExcelWorkbookSource.from_directory(settings.excel_dir)
    ConvertWorkbooksUseCase(source, settings.json_dir).execute()
    logger.info("All Excel files converted; JSON saved to %s", settings.json_dir)


def run_validate(settings: Settings) -> None:
    logger.info("Starting data validation in %s", settings.json_dir)
    validator = DataValidator(
        min_year=settings.min_year,
        max_years_ahead=settings.max_years_ahead,
        max_plausible_rate=settings.max_plausible_rate,
    )
    ValidateDataUseCase(JsonDashboardRepository(settings.json_dir), validator).execute()
    logger.info("All data validation passed")


def run_generate(settings: Settings) -> None:
    logger.info("Generating dashboard into %s", settings.public_dir)
    context = DashboardContext(
        repository=JsonDashboardRepository(settings.json_dir),
        converter=CurrencyConverter(settings.target_currency, settings.decimal_context),
    )
    builder = BuildDashboardUseCase(context, templates_dir=settings.templates_dir)
    GenerateDashboardUseCase(builder, settings.public_dir).execute()


RUNNERS = {"convert": run_convert, "validate": run_validate, "generate": run_generate}


def run_stages(stages: tuple[str, ...], settings: Settings | None = None) -> int:
    settings = settings or load_settings()
    for stage in stages:
        try:
            RUNNERS[stage](settings)
        except PipelineError as exc:
            logger.error("%s stage failed: %s", stage.capitalize(), exc)
            return 1
    return 0


def main(argv: list[str] | None = None) -> int:
    args = parse_args(sys.argv[1:] if argv is None else argv)
    configure_logging(args.verbose)
    stages = STAGES if args.stage == "all" else (args.stage,)
    return run_stages(stages)


def convert_main() -> int:
    configure_logging()
    return run_stages(("convert",))


def validate_main() -> int:
    configure_logging()
    return run_stages(("validate",))


def generate_main() -> int:
    configure_logging()
    return run_stages(("generate",))


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
