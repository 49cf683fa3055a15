"""Application-level DTOs for the dashboard pipeline stages."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Sequence

from renewables_dashboard.presentation.dashboard import DashboardContent


@dataclass(slots=True, frozen=True)
class ConversionResult:
    written: Sequence[Path]
    investments: int
    cashflows: int
    rate_years: int


@dataclass(slots=True, frozen=True)
class DashboardBuild:
    content: DashboardContent
    html: str
    api_payload: Mapping[str, Any]
    written: Sequence[Path] = field(default_factory=tuple)
