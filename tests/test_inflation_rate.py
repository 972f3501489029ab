from datetime import date

import pytest

from cpi_trends.data_models.cpi_series import CpiObservation, CpiSeries
from cpi_trends.errors import EmptySeriesError
from cpi_trends.services.inflation_service import compute_inflation_rate


def _series(values):
    months = [1, 4, 7, 10]
    obs = []
    for i, v in enumerate(values):
        obs.append(CpiObservation(date=date(2018 + i // 4, months[i % 4], 1), value=v))
    return CpiSeries(observations=obs)


def test_year_over_year_rate():
    s = _series([100.0, 101.0, 102.0, 103.0, 110.0, 111.1])
    rate = compute_inflation_rate(s)

    assert rate.name == "cpi_yoy_pct"
    assert [o.value for o in rate.observations[:4]] == [None, None, None, None]
    assert rate.observations[4].value == pytest.approx(10.0)
    assert rate.observations[5].value == pytest.approx(10.0)


def test_missing_level_gives_missing_rate():
    s = _series([100.0, None, 102.0, 103.0, 110.0, 111.0])
    rate = compute_inflation_rate(s)

    assert rate.observations[5].value is None
    assert rate.observations[4].value == pytest.approx(10.0)


def test_quarter_on_quarter():
    s = _series([100.0, 102.0])
    rate = compute_inflation_rate(s, periods=1)
    assert rate.observations[1].value == pytest.approx(2.0)


def test_invalid_periods():
    with pytest.raises(ValueError):
        compute_inflation_rate(_series([100.0]), periods=0)


def test_empty_series_raises():
    with pytest.raises(EmptySeriesError):
        compute_inflation_rate(CpiSeries(observations=[]))
