"""Domain-level results produced by the metrics and cashflow services."""
from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Mapping, Sequence


@dataclass(frozen=True)
class TechnologyBreakdown:
    value: Decimal
    count: int
    capacity: Decimal


@dataclass(frozen=True)
class GeographyBreakdown:
    value: Decimal
    count: int


@dataclass(frozen=True)
class StatusBreakdown:
    operational: Decimal
    development: Decimal
    construction: Decimal


@dataclass(frozen=True)
class MetricsSummary:
    """Portfolio totals, breakdowns and derived percentages in the target currency."""

    total_investment: Decimal
    total_capacity_by_stake: Decimal
    total_capacity_all: Decimal
    offshore_investment: Decimal
    offshore_capacity_by_stake: Decimal
    offshore_operational_capacity: Decimal
    offshore_percentage_of_total: Decimal
    offshore_operational_percentage: Decimal
    avg_investment_per_year: Decimal
    yearly_investments: Mapping[int | None, Decimal]
    technology_breakdown: Mapping[str, TechnologyBreakdown]
    geography_breakdown: Mapping[str, GeographyBreakdown]
    status_breakdown: StatusBreakdown
    operational_percentage: Decimal
    total_projects: int

    def as_json(self) -> dict[str, Any]:
        return {
            "totalInvestmentEur": self.total_investment,
            "totalCapacityByStake": self.total_capacity_by_stake,
            "totalCapacityAll": self.total_capacity_all,
            "offshoreInvestmentEur": self.offshore_investment,
            "offshoreCapacityByStake": self.offshore_capacity_by_stake,
            "offshoreOperationalCapacity": self.offshore_operational_capacity,
            "offshorePercentageOfTotal": self.offshore_percentage_of_total,
            "offshoreOperationalPercentage": self.offshore_operational_percentage,
            "avgInvestmentPerYear": self.avg_investment_per_year,
            "yearlyInvestments": {
                ("Unknown" if year is None else str(year)): value
                for year, value in self.yearly_investments.items()
            },
            "technologyBreakdown": {
                tech: {"value": item.value, "count": item.count, "capacity": item.capacity}
                for tech, item in self.technology_breakdown.items()
            },
            "geographyBreakdown": {
                geo: {"value": item.value, "count": item.count}
                for geo, item in self.geography_breakdown.items()
            },
            "statusBreakdown": {
                "operational": self.status_breakdown.operational,
                "development": self.status_breakdown.development,
                "construction": self.status_breakdown.construction,
            },
            "operationalPercentage": self.operational_percentage,
            "totalProjects": self.total_projects,
        }


@dataclass(frozen=True)
class ConvertedCashflow:
    """A cashflow period expressed in ``currency`` after conversion from NOK."""

    year: int
    period: str
    flows: Mapping[str, Decimal]
    currency: str
    original_currency: str
    exchange_rate: Decimal | None
    derived: bool = False

    def as_json(self) -> dict[str, Any]:
        return {
            "year": self.year,
            "period": self.period,
            **self.flows,
            "currency": self.currency,
            "originalCurrency": self.original_currency,
            "exchangeRate": self.exchange_rate,
        }


@dataclass(frozen=True)
class NormalizedCashflow:
    full_year: Sequence[ConvertedCashflow] = field(default_factory=tuple)
    all_periods: Sequence[ConvertedCashflow] = field(default_factory=tuple)
    incomplete_years: Sequence[int] = field(default_factory=tuple)
    missing_rate_years: Sequence[int] = field(default_factory=tuple)

    def as_json(self) -> dict[str, Any]:
        return {
            "fullYearData": [item.as_json() for item in self.full_year],
            "allData": [item.as_json() for item in self.all_periods],
        }


@dataclass(frozen=True)
class ValidationReport:
    """Outcome of the pre-flight data validation."""

    errors: Sequence[str] = field(default_factory=tuple)
    warnings: Sequence[str] = field(default_factory=tuple)
    investments_checked: int = 0
    cashflows_checked: int = 0
    cashflow_years: int = 0
    nok_eur_years: int = 0
    gbp_nok_years: int = 0

    def has_errors(self) -> bool:
        return bool(self.errors)

    def has_issues(self) -> bool:
        return any([self.errors, self.warnings])
