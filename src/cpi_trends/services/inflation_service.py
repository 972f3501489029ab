"""Inflation rate computations on a CPI level series."""
from __future__ import annotations

from typing import List, Optional
import logging

import numpy as np

from cpi_trends.data_models.cpi_series import CpiObservation, CpiSeries
from cpi_trends.errors import EmptySeriesError
from cpi_trends.services.cpi_ingestion_service import series_to_dataframe

logger = logging.getLogger(__name__)


# Quarterly data: four observations back is the same quarter last year
DEFAULT_YOY_PERIODS = 4


def compute_inflation_rate(series: CpiSeries, periods: int = DEFAULT_YOY_PERIODS) -> CpiSeries:
    """Percentage change of the CPI level over `periods` observations.

    Missing levels are not filled here: a rate is None whenever the current
    or the base observation is missing, and for the first `periods` rows.
    Run `fill_gaps` first to get a rate for interior gaps.
    """
    if periods < 1:
        raise ValueError(f"periods must be >= 1, got {periods}")
    if not series.observations:
        raise EmptySeriesError(f"Cannot compute inflation rate of empty series '{series.name}'")

    df = series_to_dataframe(series)
    levels = df["value"]
    # no implicit forward fill, unlike Series.pct_change defaults
    rate = (levels / levels.shift(periods) - 1.0) * 100.0

    observations: List[CpiObservation] = []
    for o, r in zip(series.observations, rate):
        value: Optional[float] = float(r) if np.isfinite(r) else None
        observations.append(CpiObservation(date=o.date, value=value))

    n_known = sum(1 for o in observations if o.value is not None)
    logger.info("Computed %d-period inflation rate for '%s' (%d of %d values known)",
                periods, series.name, n_known, len(observations))

    return CpiSeries(name=f"{series.name}_yoy_pct", observations=observations)
