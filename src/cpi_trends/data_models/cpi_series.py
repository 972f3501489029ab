"""CPI series models.

One quarterly observation of the Consumer Price Index and the ordered
series built from a loaded dataset.
"""
from __future__ import annotations

from datetime import date
from typing import List, Optional

from pydantic import BaseModel, Field


class CpiObservation(BaseModel):
    """One CPI observation.

    `value` is None when the source row had no reading for that quarter.
    """

    date: date
    value: Optional[float] = None


class CpiSeries(BaseModel):
    """Observations sorted ascending by date, one per date.

    Loader functions guarantee the ordering; the model itself does not
    re-sort.
    """

    name: str = "cpi"
    observations: List[CpiObservation] = Field(default_factory=list)
