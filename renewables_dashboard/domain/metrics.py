"""Portfolio metrics aggregation over acquired assets."""
from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Iterable, Sequence

from .currency import CurrencyConverter
from .models import UNKNOWN, ExchangeRateTable, InvestmentRecord
from .results import GeographyBreakdown, MetricsSummary, StatusBreakdown, TechnologyBreakdown

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
HUNDRED = Decimal("100")

# Evaluated in order; the first keyword found in the lower-cased status wins.
STATUS_RULES: tuple[tuple[str, str], ...] = (
    ("operational", "operational"),
    ("development", "development"),
    ("construction", "construction"),
)

OFFSHORE_WIND = "offshore wind"


def classify_status(status: str | None) -> str | None:
    value = (status or "").lower()
    for bucket, keyword in STATUS_RULES:
        if keyword in value:
            return bucket
    return None


def is_offshore_wind(technology: str | None) -> bool:
    return OFFSHORE_WIND in (technology or "").lower()


def _percentage(part: Decimal, whole: Decimal) -> Decimal:
    if not whole:
        return ZERO
    return part / whole * HUNDRED


@dataclass
class _TechnologyTotals:
    value: Decimal = ZERO
    count: int = 0
    capacity: Decimal = ZERO


@dataclass
class _GeographyTotals:
    value: Decimal = ZERO
    count: int = 0


@dataclass
class MetricsAccumulator:
    """Running sums for one fold over investments.

    Every field is a plain or keyed sum, so two accumulators built over
    disjoint slices can be merged in any order.
    """

    total_investment: Decimal = ZERO
    total_capacity_by_stake: Decimal = ZERO
    total_capacity_all: Decimal = ZERO
    offshore_investment: Decimal = ZERO
    offshore_capacity_by_stake: Decimal = ZERO
    offshore_operational_capacity: Decimal = ZERO
    projects: int = 0
    yearly: dict[int | None, Decimal] = field(default_factory=dict)
    technology: dict[str, _TechnologyTotals] = field(default_factory=dict)
    geography: dict[str, _GeographyTotals] = field(default_factory=dict)
    status: dict[str, Decimal] = field(default_factory=lambda: defaultdict(lambda: ZERO))

    def add(self, investment: InvestmentRecord, cost: Decimal) -> MetricsAccumulator:
        self.projects += 1
        self.total_investment += cost

        if investment.total_capacity:
            self.total_capacity_all += investment.total_capacity

        year = investment.acquisition_year
        self.yearly[year] = self.yearly.get(year, ZERO) + cost

        tech = investment.technology or UNKNOWN
        tech_totals = self.technology.setdefault(tech, _TechnologyTotals())
        tech_totals.value += cost
        tech_totals.count += 1

        geo = investment.geography or UNKNOWN
        geo_totals = self.geography.setdefault(geo, _GeographyTotals())
        geo_totals.value += cost
        geo_totals.count += 1

        bucket = classify_status(investment.current_status)
        if bucket is not None:
            self.status[bucket] += cost

        offshore = is_offshore_wind(tech)
        capacity = investment.effective_capacity_by_stake() or ZERO
        if capacity > 0:
            self.total_capacity_by_stake += capacity
            tech_totals.capacity += capacity
            if offshore:
                self.offshore_capacity_by_stake += capacity

        if offshore:
            self.offshore_investment += cost
            if bucket == "operational" and capacity > 0:
                self.offshore_operational_capacity += capacity
        return self

    def merge(self, other: MetricsAccumulator) -> MetricsAccumulator:
        merged = MetricsAccumulator(
            total_investment=self.total_investment + other.total_investment,
            total_capacity_by_stake=self.total_capacity_by_stake + other.total_capacity_by_stake,
            total_capacity_all=self.total_capacity_all + other.total_capacity_all,
            offshore_investment=self.offshore_investment + other.offshore_investment,
            offshore_capacity_by_stake=self.offshore_capacity_by_stake + other.offshore_capacity_by_stake,
            offshore_operational_capacity=self.offshore_operational_capacity + other.offshore_operational_capacity,
            projects=self.projects + other.projects,
        )
        for source in (self, other):
            for year, value in source.yearly.items():
                merged.yearly[year] = merged.yearly.get(year, ZERO) + value
            for tech, totals in source.technology.items():
                target = merged.technology.setdefault(tech, _TechnologyTotals())
                target.value += totals.value
                target.count += totals.count
                target.capacity += totals.capacity
            for geo, totals in source.geography.items():
                target_geo = merged.geography.setdefault(geo, _GeographyTotals())
                target_geo.value += totals.value
                target_geo.count += totals.count
            for bucket, value in source.status.items():
                merged.status[bucket] += value
        return merged

    def summarize(self) -> MetricsSummary:
        operational = self.status["operational"]
        avg_per_year = self.total_investment / len(self.yearly) if self.yearly else ZERO
        return MetricsSummary(
            total_investment=self.total_investment,
            total_capacity_by_stake=self.total_capacity_by_stake,
            total_capacity_all=self.total_capacity_all,
            offshore_investment=self.offshore_investment,
            offshore_capacity_by_stake=self.offshore_capacity_by_stake,
            offshore_operational_capacity=self.offshore_operational_capacity,
            offshore_percentage_of_total=_percentage(self.offshore_investment, self.total_investment),
            offshore_operational_percentage=_percentage(
                self.offshore_operational_capacity, self.offshore_capacity_by_stake
            ),
            avg_investment_per_year=avg_per_year,
            yearly_investments=dict(self.yearly),
            technology_breakdown={
                tech: TechnologyBreakdown(value=t.value, count=t.count, capacity=t.capacity)
                for tech, t in self.technology.items()
            },
            geography_breakdown={
                geo: GeographyBreakdown(value=g.value, count=g.count) for geo, g in self.geography.items()
            },
            status_breakdown=StatusBreakdown(
                operational=operational,
                development=self.status["development"],
                construction=self.status["construction"],
            ),
            operational_percentage=_percentage(operational, self.total_investment),
            total_projects=self.projects,
        )


class MetricsAggregator:
    """Folds investments into a :class:`MetricsSummary` in the converter's target currency."""

    def __init__(self, converter: CurrencyConverter | None = None) -> None:
        self._converter = converter or CurrencyConverter()

    def accumulate(self, investments: Iterable[InvestmentRecord], rates: ExchangeRateTable) -> MetricsAccumulator:
        accumulator = MetricsAccumulator()
        for investment in investments:
            conversion = self._converter.convert(
                investment.acquisition_cost,
                investment.original_currency,
                investment.acquisition_year,
                rates,
            )
            if not conversion.converted:
                logger.warning("%s: %s", investment.name, conversion.describe_issue())
            accumulator.add(investment, conversion.amount)
        return accumulator

    def aggregate(self, investments: Sequence[InvestmentRecord], rates: ExchangeRateTable) -> MetricsSummary:
        summary = self.accumulate(investments, rates).summarize()
        log_summary(summary)
        return summary


def log_summary(summary: MetricsSummary) -> None:
    logger.info("Total investment (EUR): %.2fM", summary.total_investment)
    logger.info("Total projects: %d", summary.total_projects)
    logger.info("Total capacity by stake: %.2f MW", summary.total_capacity_by_stake)
    logger.info("Offshore investment: %.2fM", summary.offshore_investment)
    logger.info("Offshore share of total: %.1f%%", summary.offshore_percentage_of_total)
    logger.info(
        "Offshore operational: %.2f MW (%.1f%% of offshore capacity)",
        summary.offshore_operational_capacity,
        summary.offshore_operational_percentage,
    )
    logger.info("Operational share: %.1f%%", summary.operational_percentage)
