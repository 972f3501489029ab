"""CPI ingestion service.

Turns raw (date, value) rows into a typed `CpiSeries`, and reads those rows
from a CSV or spreadsheet export of the quarterly CPI table.
"""
from __future__ import annotations

from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional
import logging

import numpy as np
import pandas as pd

from cpi_trends.data_models.cpi_series import CpiObservation, CpiSeries
from cpi_trends.errors import DuplicateDateError, ParseError


logger = logging.getLogger(__name__)


DEFAULT_DATE_FORMAT = "%Y-%m-%d"
DEFAULT_DATE_COLUMN = "date"
DEFAULT_VALUE_COLUMN = "cpi"

EXCEL_SUFFIXES = {".xls", ".xlsx"}


def _parse_date(raw: Any, date_format: str) -> date:
    """Parse one date cell. Spreadsheet cells may already hold a date."""
    if raw is None or (not isinstance(raw, str) and pd.isna(raw)):
        raise ParseError("Missing date in CPI input row")

    # pd.Timestamp is a datetime subclass
    if isinstance(raw, datetime):
        return raw.date()
    if isinstance(raw, date):
        return raw

    text = str(raw).strip()
    try:
        return datetime.strptime(text, date_format).date()
    except ValueError as exc:
        raise ParseError(f"Could not parse date {text!r} with format {date_format!r}") from exc


def _parse_value(raw: Any, when: date) -> Optional[float]:
    if raw is None:
        return None
    if isinstance(raw, str):
        raw = raw.strip()
        if raw == "":
            return None
    try:
        value = float(raw)
    except (TypeError, ValueError) as exc:
        raise ParseError(f"Non-numeric CPI value {raw!r} on {when.isoformat()}") from exc
    if np.isnan(value):
        return None
    if not np.isfinite(value):
        raise ParseError(f"Infinite CPI value {raw!r} on {when.isoformat()}")
    return value


def build_cpi_series(
    rows: Iterable[Mapping[str, Any]],
    date_field: str = "date",
    value_field: str = "value",
    date_format: str = DEFAULT_DATE_FORMAT,
    name: str = "cpi",
) -> CpiSeries:
    """Build a sorted `CpiSeries` from raw rows.

    Parameters
    ----------
    rows : Iterable[Mapping[str, Any]]
        Post-load rows, e.g. `DataFrame.to_dict("records")`.
    date_field, value_field : str
        Keys holding the date text and the CPI value.
    date_format : str
        `strptime` format the date text must match.

    Returns
    -------
    CpiSeries
        Observations sorted ascending by date. Blank or NaN values become
        missing observations.

    Raises
    ------
    ParseError
        A date is missing or malformed, or a value is not numeric.
    DuplicateDateError
        Two rows share a date. No partial series is returned.
    """
    by_date: Dict[date, CpiObservation] = {}

    for row in rows:
        when = _parse_date(row.get(date_field), date_format)
        if when in by_date:
            raise DuplicateDateError(when)
        by_date[when] = CpiObservation(date=when, value=_parse_value(row.get(value_field), when))

    observations: List[CpiObservation] = [by_date[d] for d in sorted(by_date)]
    return CpiSeries(name=name, observations=observations)


def load_cpi_series_from_file(
    path: Path | str,
    date_column: str = DEFAULT_DATE_COLUMN,
    value_column: str = DEFAULT_VALUE_COLUMN,
    sheet_name: Optional[str | int] = None,
    date_format: str = DEFAULT_DATE_FORMAT,
) -> CpiSeries:
    """Load the quarterly CPI table from a CSV or Excel file.

    Parameters
    ----------
    path : Path | str
        `.xls`/`.xlsx` files go through `pd.read_excel`, anything else
        through `pd.read_csv`.
    date_column, value_column : str
        Column names, matched case-insensitively.
    sheet_name : str | int, optional
        Excel sheet; the first sheet when omitted.

    Returns
    -------
    CpiSeries
        Named after `value_column`, sorted by date, gaps left missing.
    """

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"CPI data file not found: {path}")

    date_key = date_column.strip().lower()
    value_key = value_column.strip().lower()

    if path.suffix.lower() in EXCEL_SUFFIXES:
        # Pick the first sheet explicitly so pandas does not return a dict of frames
        effective_sheet = 0 if sheet_name is None else sheet_name
        df = pd.read_excel(path, sheet_name=effective_sheet)
    else:
        # Keep dates as text so the configured format is enforced
        df = pd.read_csv(path, dtype=str)

    # Normalise column names to lower-case to be robust
    df.columns = [str(c).strip().lower() for c in df.columns]

    required_cols = {date_key, value_key}
    missing = required_cols - set(df.columns)
    if missing:
        raise ValueError(f"Missing required columns in CPI file: {missing}")

    series = build_cpi_series(
        df[[date_key, value_key]].to_dict("records"),
        date_field=date_key,
        value_field=value_key,
        date_format=date_format,
        name=value_key,
    )

    n_missing = sum(1 for o in series.observations if o.value is None)
    logger.info("Loaded %d CPI observations (%d missing) from %s", len(series.observations), n_missing, path)
    return series


def series_to_dataframe(series: CpiSeries) -> pd.DataFrame:
    """
    Convert a CpiSeries into a DataFrame with columns: date, value.

    `date` is datetime64 and missing values are NaN.
    """
    records = []
    for o in series.observations:
        records.append({
            "date": pd.to_datetime(o.date),
            "value": float(o.value) if o.value is not None else np.nan,
        })

    df = pd.DataFrame.from_records(records, columns=["date", "value"])
    df["date"] = pd.to_datetime(df["date"])
    df["value"] = df["value"].astype(float)
    return df
