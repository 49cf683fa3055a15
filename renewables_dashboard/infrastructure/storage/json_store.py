"""Storage helpers for the normalized JSON documents and generated outputs."""
from __future__ import annotations

from decimal import Decimal
from pathlib import Path
import json
import logging
from typing import Any

from renewables_dashboard.domain.errors import DataLoadError

logger = logging.getLogger(__name__)


def _encode(value: Any) -> Any:
    if isinstance(value, Decimal):
        if not value.is_finite():
            return None
        if value == value.to_integral_value():
            return int(value)
        return float(value)
    if isinstance(value, (set, frozenset, tuple)):
        return list(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def dumps(payload: Any) -> str:
    return json.dumps(payload, default=_encode, ensure_ascii=False, indent=2)


def dumps_compact(payload: Any) -> str:
    """Single-line JSON for embedding in HTML script blocks."""
    return json.dumps(payload, default=_encode, ensure_ascii=False, separators=(",", ":"))


def loads(text: str) -> Any:
    return json.loads(text, parse_float=Decimal)


def load_json(path: Path) -> dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise DataLoadError(
            path.name, "file not found. Make sure Excel files have been converted to JSON first."
        ) from None
    except UnicodeDecodeError as exc:
        raise DataLoadError(path.name, f"file is not valid UTF-8 ({exc.reason} at byte {exc.start})") from exc
    except OSError as exc:
        raise DataLoadError(path.name, f"cannot read file ({exc.strerror or exc})") from exc
    try:
        data = loads(text)
    except json.JSONDecodeError as exc:
        raise DataLoadError(path.name, f"invalid JSON ({exc.msg} at line {exc.lineno})") from exc
    if not isinstance(data, dict):
        raise DataLoadError(path.name, "top-level JSON value must be an object")
    return data


def save_json(path: Path, payload: Any) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(dumps(payload), encoding="utf-8")
    logger.info("Saved %s", path)
    return path


def save_text(path: Path, body: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(body, encoding="utf-8")
    logger.info("Saved %s", path)
    return path
