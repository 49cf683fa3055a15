"""Shared parsing utilities for Excel ingestion."""
from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from io import BytesIO
from pathlib import Path
from typing import Any, Iterable, Mapping
import hashlib
import re
import zipfile

import pandas as pd
from openpyxl.utils.exceptions import InvalidFileException
from xlrd import XLRDError

from renewables_dashboard.domain.errors import WorkbookError

UNREADABLE_WORKBOOK = (ValueError, KeyError, OSError, zipfile.BadZipFile, InvalidFileException, XLRDError)


def ensure_bytes(source: BytesIO | Path | bytes) -> bytes:
    if isinstance(source, bytes):
        return source
    if isinstance(source, BytesIO):
        return source.getvalue()
    if isinstance(source, Path):
        return source.read_bytes()
    raise TypeError(f"Unsupported source type: {type(source)!r}")


def compute_file_hash(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


def engine_for(filename: str) -> str:
    return "xlrd" if filename.lower().endswith(".xls") else "openpyxl"


def read_first_sheet(data: bytes, filename: str) -> list[dict[str, Any]]:
    """Read the first worksheet into row dicts with blank cells as ``None``."""
    engine = engine_for(filename)
    try:
        xls = pd.ExcelFile(BytesIO(data), engine=engine)
        if not xls.sheet_names:
            return []
        frame = pd.read_excel(xls, sheet_name=xls.sheet_names[0], dtype=object)
    except UNREADABLE_WORKBOOK as exc:
        raise WorkbookError(filename, f"unreadable workbook ({type(exc).__name__}: {exc})") from exc
    frame = frame.dropna(how="all")
    frame = frame.astype(object).where(frame.notna(), None)
    return frame.to_dict(orient="records")


def is_blank(value: object) -> bool:
    if value is None:
        return True
    s = str(value).strip()
    return s == "" or s.upper() == "NAN"


def first_present(row: Mapping[str, Any], columns: Iterable[str], default: Any = None) -> Any:
    """Value of the first alias column holding a non-blank cell."""
    for column in columns:
        value = row.get(column)
        if not is_blank(value):
            return value
    return default


_NUMBER_NOISE = re.compile(r"[,%\s\"]")


def parse_number(value: object) -> Decimal | None:
    if is_blank(value):
        return None
    s = _NUMBER_NOISE.sub("", str(value))
    negative = False
    if s.startswith("(") and s.endswith(")"):
        negative = True
        s = s[1:-1]
    try:
        result = Decimal(s)
    except InvalidOperation:
        return None
    if not result.is_finite():
        return None
    return -result if negative else result


def parse_year(value: object, default: int) -> int:
    number = parse_number(value)
    if number is None:
        return default
    return int(number)


def clean_text(value: object, default: str) -> str:
    if is_blank(value):
        return default
    return str(value).strip()


def slugify(name: str) -> str:
    """Lowercase, keep ``[a-z0-9]`` and spaces, hyphenate whitespace runs, cap at 50."""
    cleaned = re.sub(r"[^a-z0-9\s]", "", name.lower())
    return re.sub(r"\s+", "-", cleaned)[:50]


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
