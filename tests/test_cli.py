import json
import logging
from pathlib import Path

import pytest

from renewables_dashboard import cli


@pytest.fixture
def workspace(tmp_path: Path, monkeypatch) -> Path:
    monkeypatch.setenv("RENEWABLES_BASE_DIR", str(tmp_path))
    monkeypatch.setenv("RENEWABLES_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("RENEWABLES_PUBLIC_DIR", str(tmp_path / "public"))
    monkeypatch.setenv("RENEWABLES_TEMPLATES_DIR", str(tmp_path / "templates"))
    return tmp_path


def test_validate_and_generate_succeed(workspace: Path, json_dir: Path):
    assert json_dir == workspace / "data" / "json"

    assert cli.main(["validate"]) == 0
    assert cli.main(["generate"]) == 0

    data = json.loads((workspace / "public" / "api" / "data.json").read_text(encoding="utf-8"))
    assert data["metrics"]["totalProjects"] == 2
    assert (workspace / "public" / "index.html").is_file()


def test_generate_without_json_fails(workspace: Path, caplog):
    with caplog.at_level(logging.ERROR):
        assert cli.main(["generate"]) == 1

    assert "Generate stage failed" in caplog.text
    assert "acquisitions.json" in caplog.text


def test_validation_errors_stop_the_run(workspace: Path, json_dir: Path):
    (json_dir / "acquisitions.json").write_text(json.dumps({"investments": []}))

    assert cli.run_stages(("validate", "generate")) == 1
    assert not (workspace / "public" / "index.html").exists()


def test_convert_without_workbooks_fails(workspace: Path):
    assert cli.main(["convert"]) == 1


def test_unknown_stage_is_rejected():
    with pytest.raises(SystemExit):
        cli.parse_args(["deploy"])


def test_corrupt_workbooks_fail_convert(workspace: Path, caplog):
    excel_dir = workspace / "data" / "excel"
    excel_dir.mkdir(parents=True)
    for name in ("NBIM_Acquisitions.xlsx", "NBIM_Cashflow.xlsx", "NBIM_ExchangeRates.xlsx"):
        (excel_dir / name).write_bytes(b"not a workbook")

    with caplog.at_level(logging.ERROR):
        assert cli.main(["convert"]) == 1

    assert "Convert stage failed" in caplog.text
    assert "NBIM_Acquisitions.xlsx" in caplog.text


def test_undecodable_json_fails_generate(workspace: Path, json_dir: Path):
    (json_dir / "acquisitions.json").write_bytes(b'{"investments": ["\xff"]}')

    assert cli.main(["generate"]) == 1


def test_non_object_investment_fails_generate(workspace: Path, json_dir: Path):
    (json_dir / "acquisitions.json").write_text(json.dumps({"investments": ["oops"]}))

    assert cli.main(["generate"]) == 1


def test_malformed_rate_table_fails_validate(workspace: Path, json_dir: Path):
    (json_dir / "exchange-rates.json").write_text(json.dumps({"rates": {"NOK_EUR": [10], "GBP_NOK": {}}}))

    assert cli.main(["validate"]) == 1


def test_numeric_last_updated_still_generates(workspace: Path, json_dir: Path, acquisitions_payload):
    acquisitions_payload["lastUpdated"] = 1714558500
    (json_dir / "acquisitions.json").write_text(json.dumps(acquisitions_payload))

    assert cli.main(["generate"]) == 0
