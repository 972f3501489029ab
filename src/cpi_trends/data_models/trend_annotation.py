from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Optional

from pydantic import BaseModel, model_validator


class AnnotationKind(str, Enum):
    """
    Shape of a narrative overlay on the CPI chart.
    """

    RANGE = "range"  # shaded [start, end] period, e.g. a pandemic
    POINT = "point"  # single marker, e.g. a conflict onset


class TrendAnnotation(BaseModel):
    """
    A labelled date range or point supplied as static configuration.

    For POINT annotations `end` is either omitted or equal to `start`.
    """

    label: str
    kind: AnnotationKind
    start: date
    end: Optional[date] = None

    @model_validator(mode="after")
    def _check_bounds(self) -> "TrendAnnotation":
        if self.kind == AnnotationKind.RANGE:
            if self.end is None:
                raise ValueError(f"Range annotation '{self.label}' needs an end date")
            if self.end < self.start:
                raise ValueError(f"Range annotation '{self.label}' ends before it starts")
        elif self.end is not None and self.end != self.start:
            raise ValueError(f"Point annotation '{self.label}' cannot span a range")
        return self


class AnnotationDescriptor(BaseModel):
    """
    Render-ready placement of one annotation against a specific series.

    `start_date`/`end_date` are clamped to the series' date bounds (both equal
    the snapped observation date for points). `label_date`/`label_value` give
    the anchor for the text label. All clamped positions are None when
    `out_of_range` is set; the renderer decides whether to skip those.
    """

    label: str
    kind: AnnotationKind

    requested_start: date
    requested_end: Optional[date] = None

    out_of_range: bool = False

    start_date: Optional[date] = None
    end_date: Optional[date] = None
    label_date: Optional[date] = None
    label_value: Optional[float] = None
