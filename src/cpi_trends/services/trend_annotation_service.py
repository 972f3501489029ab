"""Trend annotation service.

Places named historical periods (ranges) and events (points) against a CPI
series so a renderer can shade and label them without any date arithmetic
of its own.
"""
from __future__ import annotations

from bisect import bisect_left
from datetime import date, timedelta
from pathlib import Path
from typing import List, Optional
import json
import logging

from cpi_trends.data_models.cpi_series import CpiObservation, CpiSeries
from cpi_trends.data_models.trend_annotation import (
    AnnotationDescriptor,
    AnnotationKind,
    TrendAnnotation,
)
from cpi_trends.errors import EmptySeriesError

logger = logging.getLogger(__name__)


# Narrative periods shown on the default report charts
DEFAULT_ANNOTATIONS: List[TrendAnnotation] = [
    TrendAnnotation(
        label="Pandemic",
        kind=AnnotationKind.RANGE,
        start=date(2020, 1, 1),
        end=date(2021, 6, 30),
    ),
    TrendAnnotation(
        label="Conflict onset",
        kind=AnnotationKind.POINT,
        start=date(2022, 2, 24),
    ),
]


def load_annotations_from_json(path: Path | str) -> List[TrendAnnotation]:
    """Read a JSON list of annotation objects.

    Each object needs `label`, `kind` ("range" or "point") and `start`;
    ranges also need `end`. Dates are ISO strings.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Annotation file not found: {path}")

    raw = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(raw, list):
        raise ValueError(f"Annotation file must contain a JSON list: {path}")

    annotations = [TrendAnnotation.model_validate(item) for item in raw]
    logger.info("Loaded %d annotations from %s", len(annotations), path)
    return annotations


def _nearest_observation(observations: List[CpiObservation], target: date) -> CpiObservation:
    """Observation whose date is closest to target; ties go to the earlier date."""
    dates = [o.date for o in observations]
    idx = bisect_left(dates, target)
    if idx == 0:
        return observations[0]
    if idx == len(dates):
        return observations[-1]

    before = observations[idx - 1]
    after = observations[idx]
    if (target - before.date) <= (after.date - target):
        return before
    return after


def _describe_range(ann: TrendAnnotation, observations: List[CpiObservation]) -> AnnotationDescriptor:
    first = observations[0].date
    last = observations[-1].date
    end = ann.end if ann.end is not None else ann.start

    descriptor = AnnotationDescriptor(
        label=ann.label,
        kind=ann.kind,
        requested_start=ann.start,
        requested_end=ann.end,
    )
    if end < first or ann.start > last:
        descriptor.out_of_range = True
        return descriptor

    clamped_start = max(ann.start, first)
    clamped_end = min(end, last)
    midpoint = clamped_start + timedelta(days=(clamped_end - clamped_start).days // 2)

    inside = [
        o.value for o in observations
        if clamped_start <= o.date <= clamped_end and o.value is not None
    ]
    label_value: Optional[float]
    if inside:
        label_value = max(inside)
    else:
        # range falls between two observations
        label_value = _nearest_observation(observations, midpoint).value

    descriptor.start_date = clamped_start
    descriptor.end_date = clamped_end
    descriptor.label_date = midpoint
    descriptor.label_value = label_value
    return descriptor


def _describe_point(ann: TrendAnnotation, observations: List[CpiObservation]) -> AnnotationDescriptor:
    descriptor = AnnotationDescriptor(
        label=ann.label,
        kind=ann.kind,
        requested_start=ann.start,
        requested_end=ann.end,
    )
    if ann.start < observations[0].date or ann.start > observations[-1].date:
        descriptor.out_of_range = True
        return descriptor

    nearest = _nearest_observation(observations, ann.start)
    descriptor.start_date = nearest.date
    descriptor.end_date = nearest.date
    descriptor.label_date = nearest.date
    descriptor.label_value = nearest.value
    return descriptor


def annotate_series(series: CpiSeries, annotations: List[TrendAnnotation]) -> List[AnnotationDescriptor]:
    """Build one render-ready descriptor per annotation, in input order.

    Ranges are clamped to the series' first and last dates and labelled at
    their midpoint, above the highest known value inside the range. Points
    snap to the nearest observation date. Annotations lying wholly outside
    the series are still described, with `out_of_range=True`.

    Neither the series nor the annotations are modified.
    """
    observations = series.observations
    if not observations:
        raise EmptySeriesError(f"Cannot annotate empty series '{series.name}'")

    descriptors: List[AnnotationDescriptor] = []
    for ann in annotations:
        if ann.kind == AnnotationKind.RANGE:
            descriptor = _describe_range(ann, observations)
        else:
            descriptor = _describe_point(ann, observations)

        if descriptor.out_of_range:
            logger.debug("Annotation '%s' lies outside series '%s' (%s..%s)",
                        ann.label, series.name, observations[0].date, observations[-1].date)
        descriptors.append(descriptor)

    return descriptors
