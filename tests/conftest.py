import json
from datetime import date, timedelta

import pytest

from database.archive import WeatherArchive
from database.dates import day_to_timestamp
from database.models import WeatherData


def _make_data(day: date, **values) -> WeatherData:
    return WeatherData(timestamp=day_to_timestamp(day), **values)


@pytest.fixture
def make_data():
    return _make_data


@pytest.fixture
def january_archive():
    """2016-01-01..2016-01-10, tmax = 10.0 + 日のインデックス"""
    archive = WeatherArchive()
    for i in range(10):
        archive.add_data(_make_data(date(2016, 1, 1) + timedelta(days=i), max_temp=10.0 + i))
    return archive


@pytest.fixture
def weather_file(tmp_path):
    payload = [
        {"date": "2016-03-03", "tmax": 28.758, "tmin": 3.896, "tmean": 16.327, "ppt": 0.0},
        {"date": "2016-03-04", "tmax": 20.0, "tmin": 2.0, "tmean": 11.0},
        {"date": "2016-03-05", "tmax": 22.0, "ppt": 2.0},
        {"tmax": 99.0},
    ]
    path = tmp_path / "weather.json"
    path.write_text(json.dumps(payload))
    return path
