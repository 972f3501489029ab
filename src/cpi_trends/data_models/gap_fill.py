from __future__ import annotations

from datetime import date
from enum import Enum
from typing import List

from pydantic import BaseModel, Field

from cpi_trends.data_models.cpi_series import CpiSeries


class BoundaryGapSide(str, Enum):
    """
    Where an unfillable run of missing values sits in the series.
    """

    LEADING = "leading"
    TRAILING = "trailing"
    ENTIRE = "entire"  # no known value anywhere


class BoundaryGapWarning(BaseModel):
    """
    A run of missing values at the start or end of a series.

    Interpolation needs a known value on both sides, so these dates are left
    missing and reported instead of being dropped or zero-filled.
    """

    side: BoundaryGapSide
    dates: List[date]

    @property
    def start_date(self) -> date:
        return self.dates[0]

    @property
    def end_date(self) -> date:
        return self.dates[-1]


class GapFillResult(BaseModel):
    series: CpiSeries
    warnings: List[BoundaryGapWarning] = Field(default_factory=list)
    filled_dates: List[date] = Field(default_factory=list)  # dates whose value was interpolated
