import json
from pathlib import Path
from typing import Any

import pytest


@pytest.fixture
def acquisitions_payload() -> dict[str, Any]:
    return {
        "lastUpdated": "2024-05-01T10:15:00.000Z",
        "metadata": {"totalProjects": 2, "excelFile": "NBIM_Acquisitions.xlsx"},
        "investments": [
            {
                "id": "hornsea-one",
                "name": "Hornsea One",
                "acquisitionCost": 100,
                "originalCurrency": "EUR",
                "stake": None,
                "totalCapacity": None,
                "capacityByStake": 500,
                "acquisitionYear": 2021,
                "acquisitionMonth": "March",
                "acquisitionStatus": "Completed",
                "currentStatus": "Operational",
                "technology": "Offshore Wind",
                "geography": "United Kingdom",
                "operator": "Orsted",
            },
            {
                "id": "fosen-onshore",
                "name": "Fosen Onshore",
                "acquisitionCost": 50,
                "originalCurrency": "NOK",
                "stake": 50,
                "totalCapacity": 200,
                "capacityByStake": None,
                "acquisitionYear": 2021,
                "acquisitionMonth": "June",
                "acquisitionStatus": "Completed",
                "currentStatus": "Development",
                "technology": "Onshore Wind",
                "geography": "Norway",
                "operator": "Statkraft",
            },
        ],
    }


@pytest.fixture
def cashflow_payload() -> dict[str, Any]:
    return {
        "lastUpdated": "2024-05-01T10:15:00.000Z",
        "metadata": {"currency": "NOK millions"},
        "cashflows": [
            {"year": 2021, "period": "1H", "receipts_interest": 10, "payments_new_investments": -100},
            {"year": 2021, "period": "Full year", "receipts_interest": 30, "payments_new_investments": -250},
            {"year": 2022, "period": "Full year", "receipts_interest": 44, "payments_new_investments": -110},
        ],
    }


@pytest.fixture
def rates_payload() -> dict[str, Any]:
    return {
        "lastUpdated": "2024-05-01T10:15:00.000Z",
        "metadata": {"baseCurrency": "NOK"},
        "rates": {"NOK_EUR": {"2021": 10, "2022": 11}, "GBP_NOK": {"2021": 12, "2022": 12.5}},
    }


@pytest.fixture
def json_dir(tmp_path: Path, acquisitions_payload, cashflow_payload, rates_payload) -> Path:
    target = tmp_path / "data" / "json"
    target.mkdir(parents=True)
    (target / "acquisitions.json").write_text(json.dumps(acquisitions_payload))
    (target / "cashflow.json").write_text(json.dumps(cashflow_payload))
    (target / "exchange-rates.json").write_text(json.dumps(rates_payload))
    return target
