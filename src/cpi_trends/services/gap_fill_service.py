from datetime import date
from typing import List, Optional
import logging

import numpy as np
import pandas as pd

from cpi_trends.data_models.cpi_series import CpiObservation, CpiSeries
from cpi_trends.data_models.gap_fill import BoundaryGapSide, BoundaryGapWarning, GapFillResult
from cpi_trends.errors import EmptySeriesError
from cpi_trends.services.cpi_ingestion_service import series_to_dataframe

logger = logging.getLogger(__name__)


def _boundary_gaps(values: pd.Series) -> List[BoundaryGapWarning]:
    """Leading and trailing runs of NaN in a date-indexed series."""
    dates: List[date] = [ts.date() for ts in values.index]

    first = values.first_valid_index()
    if first is None:
        return [BoundaryGapWarning(side=BoundaryGapSide.ENTIRE, dates=dates)]
    last = values.last_valid_index()

    warnings: List[BoundaryGapWarning] = []
    leading = [d for ts, d in zip(values.index, dates) if ts < first]
    if leading:
        warnings.append(BoundaryGapWarning(side=BoundaryGapSide.LEADING, dates=leading))
    trailing = [d for ts, d in zip(values.index, dates) if ts > last]
    if trailing:
        warnings.append(BoundaryGapWarning(side=BoundaryGapSide.TRAILING, dates=trailing))
    return warnings


def fill_gaps(series: CpiSeries) -> GapFillResult:
    """
    Fill interior missing CPI values by linear interpolation in elapsed time.

    Args:
        series: Observations sorted ascending by date with unique dates.

    Interior runs of missing values are filled with time-weighted linear
    interpolation between the known values on either side. Quarters are not
    evenly spaced in days, so positions are measured in days rather than in
    rows. NaN and infinite values count as missing.

    Runs touching either end of the series have no bound on one side. They
    stay missing and are reported as BoundaryGapWarning entries, one per run.
    Known values are copied through untouched, so filling an already filled
    series returns it unchanged.

    Raises:
        EmptySeriesError: the series has no observations.
    """
    if not series.observations:
        raise EmptySeriesError(f"Cannot fill gaps in empty series '{series.name}'")

    raw = series_to_dataframe(series).set_index("date")["value"]
    raw = raw.where(np.isfinite(raw))

    # limit_area="inside" leaves leading/trailing NaN runs alone
    filled = raw.interpolate(method="time", limit_area="inside")

    newly_filled = raw.isna() & filled.notna()
    filled_dates: List[date] = [ts.date() for ts in filled.index[newly_filled.to_numpy()]]
    warnings = _boundary_gaps(raw)

    for w in warnings:
        logger.warning(
            "Boundary gap in series '%s' left unfilled: %s run of %d value(s) from %s to %s",
            series.name,
            w.side.value,
            len(w.dates),
            w.start_date.isoformat(),
            w.end_date.isoformat(),
        )

    observations: List[CpiObservation] = []
    for o, v in zip(series.observations, filled):
        value: Optional[float] = None if pd.isna(v) else float(v)
        observations.append(CpiObservation(date=o.date, value=value))

    logger.info("Filled %d missing CPI values in series '%s' (%d boundary gaps unfilled)",
                len(filled_dates), series.name, len(warnings))

    return GapFillResult(
        series=CpiSeries(name=series.name, observations=observations),
        warnings=warnings,
        filled_dates=filled_dates,
    )
