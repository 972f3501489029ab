from datetime import date
import json

import pytest
from pydantic import ValidationError

from cpi_trends.data_models.cpi_series import CpiObservation, CpiSeries
from cpi_trends.data_models.trend_annotation import AnnotationKind, TrendAnnotation
from cpi_trends.errors import EmptySeriesError
from cpi_trends.services.trend_annotation_service import (
    DEFAULT_ANNOTATIONS,
    annotate_series,
    load_annotations_from_json,
)


def _quarterly_series() -> CpiSeries:
    # 2019Q1 .. 2023Q1
    points = []
    value = 100.0
    for year in range(2019, 2024):
        for month in (1, 4, 7, 10):
            d = date(year, month, 1)
            if d > date(2023, 1, 1):
                break
            points.append(CpiObservation(date=d, value=value))
            value += 1.0
    return CpiSeries(observations=points)


def test_range_inside_series_clamped_and_labelled():
    series = _quarterly_series()
    ann = TrendAnnotation(label="Pandemic", kind=AnnotationKind.RANGE, start=date(2020, 1, 1), end=date(2021, 6, 30))

    (d,) = annotate_series(series, [ann])

    assert d.out_of_range is False
    assert d.start_date == date(2020, 1, 1)
    assert d.end_date == date(2021, 6, 30)
    assert d.start_date <= d.label_date <= d.end_date
    # highest value inside the range is at 2021-04-01 (index 9)
    assert d.label_value == 109.0


def test_range_partially_outside_is_clamped():
    series = _quarterly_series()
    ann = TrendAnnotation(label="Early", kind=AnnotationKind.RANGE, start=date(2015, 1, 1), end=date(2019, 5, 1))

    (d,) = annotate_series(series, [ann])

    assert d.out_of_range is False
    assert d.start_date == date(2019, 1, 1)
    assert d.end_date == date(2019, 5, 1)
    assert d.requested_start == date(2015, 1, 1)


def test_range_before_series_is_out_of_range():
    series = _quarterly_series()
    ann = TrendAnnotation(label="Oil shock", kind=AnnotationKind.RANGE, start=date(1973, 10, 1), end=date(1974, 3, 1))

    (d,) = annotate_series(series, [ann])

    assert d.out_of_range is True
    assert d.start_date is None
    assert d.label_date is None
    assert d.label == "Oil shock"


def test_point_snaps_to_nearest_observation():
    series = _quarterly_series()
    ann = TrendAnnotation(label="Conflict onset", kind=AnnotationKind.POINT, start=date(2022, 2, 24))

    (d,) = annotate_series(series, [ann])

    assert d.out_of_range is False
    # 2022-01-01 is 54 days away, 2022-04-01 is 36 days away
    assert d.label_date == date(2022, 4, 1)
    assert d.start_date == d.end_date == date(2022, 4, 1)
    assert d.label_value == 113.0


def test_point_tie_goes_to_earlier_date():
    series = CpiSeries(observations=[
        CpiObservation(date=date(2020, 1, 1), value=1.0),
        CpiObservation(date=date(2020, 1, 11), value=2.0),
    ])
    ann = TrendAnnotation(label="Mid", kind=AnnotationKind.POINT, start=date(2020, 1, 6))

    (d,) = annotate_series(series, [ann])
    assert d.label_date == date(2020, 1, 1)


def test_point_after_series_is_out_of_range():
    series = _quarterly_series()
    ann = TrendAnnotation(label="Future", kind=AnnotationKind.POINT, start=date(2030, 1, 1))

    (d,) = annotate_series(series, [ann])
    assert d.out_of_range is True


def test_range_between_observations_uses_nearest_value():
    series = _quarterly_series()
    ann = TrendAnnotation(label="Blip", kind=AnnotationKind.RANGE, start=date(2020, 2, 1), end=date(2020, 2, 20))

    (d,) = annotate_series(series, [ann])
    assert d.out_of_range is False
    # no observation inside; nearest to the midpoint is 2020-01-01
    assert d.label_value == 104.0


def test_one_descriptor_per_annotation_in_order():
    series = _quarterly_series()
    anns = DEFAULT_ANNOTATIONS + [
        TrendAnnotation(label="Ancient", kind=AnnotationKind.POINT, start=date(1900, 1, 1)),
    ]

    descriptors = annotate_series(series, anns)
    assert [d.label for d in descriptors] == ["Pandemic", "Conflict onset", "Ancient"]


def test_annotate_empty_series_raises():
    with pytest.raises(EmptySeriesError):
        annotate_series(CpiSeries(observations=[]), DEFAULT_ANNOTATIONS)


def test_range_requires_ordered_end():
    with pytest.raises(ValidationError):
        TrendAnnotation(label="Bad", kind=AnnotationKind.RANGE, start=date(2021, 1, 1), end=date(2020, 1, 1))
    with pytest.raises(ValidationError):
        TrendAnnotation(label="Open", kind=AnnotationKind.RANGE, start=date(2021, 1, 1))


def test_load_annotations_from_json(tmp_path):
    p = tmp_path / "annotations.json"
    p.write_text(json.dumps([
        {"label": "Pandemic", "kind": "range", "start": "2020-01-01", "end": "2021-06-30"},
        {"label": "Conflict onset", "kind": "point", "start": "2022-02-24"},
    ]), encoding="utf-8")

    anns = load_annotations_from_json(p)
    assert anns == DEFAULT_ANNOTATIONS


def test_out_of_range_logged_at_debug(caplog):
    series = _quarterly_series()
    ann = TrendAnnotation(label="Future", kind=AnnotationKind.POINT, start=date(2030, 1, 1))

    with caplog.at_level("DEBUG", logger="cpi_trends.services.trend_annotation_service"):
        annotate_series(series, [ann])

    records = [r for r in caplog.records if "outside series" in r.message]
    assert len(records) == 1
    assert records[0].levelname == "DEBUG"
