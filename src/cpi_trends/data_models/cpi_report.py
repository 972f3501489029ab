from __future__ import annotations

from datetime import date
from typing import List, Optional

from pydantic import BaseModel, Field

from cpi_trends.data_models.cpi_series import CpiObservation
from cpi_trends.data_models.gap_fill import BoundaryGapWarning
from cpi_trends.data_models.trend_annotation import AnnotationDescriptor


class CpiTrendReport(BaseModel):
    """
    JSON-serialisable output of one report run.

    Holds the gap-filled level series, which dates were interpolated or left
    open, the optional inflation-rate series, and the annotation placements.
    """

    series_name: str
    generated_from: str  # input file path

    observations: List[CpiObservation]
    filled_dates: List[date] = Field(default_factory=list)
    boundary_gaps: List[BoundaryGapWarning] = Field(default_factory=list)

    inflation_rate: Optional[List[CpiObservation]] = None
    annotations: List[AnnotationDescriptor] = Field(default_factory=list)
