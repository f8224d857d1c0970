import io
import json
import logging

import pytest

from parse_weather import ParseWeatherConfig, main, parse_config, run


def test_parse_config_orders_mean_inputs(weather_file) -> None:
    config = parse_config(["-f", str(weather_file), "-m", "tmax", "2016-03-03|2016-03-05"])

    assert config.mean == ("2016-03-03|2016-03-05", "tmax")


def test_parse_config_orders_sample_inputs(weather_file) -> None:
    config = parse_config(["-f", str(weather_file), "-s", "2015|2016", "2017-03-03|2017-03-05"])

    assert config.sample_history == ("2017-03-03|2017-03-05", "2015|2016")


@pytest.mark.parametrize("argv", [
    ["-d", "2016-3-3"],
    ["-r", "2016-03-05|2016-03-03"],
    ["-m", "2016-03-03|2016-03-05", "humidity"],
    ["-s", "2016-03-03|2016-03-05", "2016-2017"],
    ["-d", "2016-03-03", "-r", "2016-03-03|2016-03-05"],
    ["-p", "2016-03-03|2016-03-05"],
])
def test_parse_config_rejects_malformed_input(weather_file, argv) -> None:
    with pytest.raises(SystemExit) as excinfo:
        parse_config(["-f", str(weather_file)] + argv)

    assert excinfo.value.code == 2


def test_parse_config_requires_existing_file(tmp_path) -> None:
    with pytest.raises(SystemExit):
        parse_config(["-f", str(tmp_path / "missing.json")])


def test_run_date(weather_file) -> None:
    out = io.StringIO()

    assert run(ParseWeatherConfig(input_file=weather_file, date="2016-03-04"), out) == 0
    assert json.loads(out.getvalue()) == {"date": "2016-03-04", "tmax": 20.0, "tmin": 2.0, "tmean": 11.0}


def test_run_missing_date(weather_file, caplog) -> None:
    out = io.StringIO()

    with caplog.at_level(logging.WARNING):
        run(ParseWeatherConfig(input_file=weather_file, date="2016-04-01"), out)

    assert out.getvalue() == ""
    assert "2016-04-01 is not available" in caplog.text


def test_run_range(weather_file) -> None:
    out = io.StringIO()

    run(ParseWeatherConfig(input_file=weather_file, date_range="2016-03-04|2016-03-10"), out)

    assert [d["date"] for d in json.loads(out.getvalue())] == ["2016-03-04", "2016-03-05"]


def test_run_mean(weather_file) -> None:
    out = io.StringIO()

    run(ParseWeatherConfig(input_file=weather_file, mean=("2016-03-03|2016-03-05", "ppt")), out)

    assert out.getvalue() == "1.000\n"


def test_run_mean_without_values(weather_file, caplog) -> None:
    out = io.StringIO()

    with caplog.at_level(logging.ERROR):
        run(ParseWeatherConfig(input_file=weather_file, mean=("2016-03-05|2016-03-05", "tmin")), out)

    assert out.getvalue() == ""
    assert "Could not calculate a mean" in caplog.text


def test_run_sample_history(weather_file) -> None:
    out = io.StringIO()

    run(ParseWeatherConfig(input_file=weather_file,
                           sample_history=("2020-03-03|2020-03-06", "2015|2016")), out)

    sampled = json.loads(out.getvalue())
    assert [d["date"] for d in sampled] == ["2020-03-03", "2020-03-04", "2020-03-05"]
    assert sampled[0]["tmax"] == 28.758


def test_run_writes_output_file(weather_file, tmp_path) -> None:
    target = tmp_path / "out.json"

    run(ParseWeatherConfig(input_file=weather_file, date_range="2016-03-03|2016-03-05",
                           output_file=target))

    assert len(json.loads(target.read_text())) == 3


def test_run_plot(weather_file, tmp_path) -> None:
    target = tmp_path / "plot.png"

    assert run(ParseWeatherConfig(input_file=weather_file, plot="2016-03-03|2016-03-05",
                                  output_file=target)) == 0
    assert target.stat().st_size > 0


def test_run_rejects_bad_json(tmp_path, caplog) -> None:
    path = tmp_path / "bad.json"
    path.write_text("[{")

    with caplog.at_level(logging.ERROR):
        assert run(ParseWeatherConfig(input_file=path, date="2016-03-03"), io.StringIO()) == 1

    assert "An error occurred parsing the json file" in caplog.text


def test_run_rejects_undecodable_file(tmp_path, caplog) -> None:
    path = tmp_path / "latin1.json"
    path.write_bytes(b'[{"date": "2016-03-03", "tmax": 1.0, "name": "\xe9"}]')

    with caplog.at_level(logging.ERROR):
        assert run(ParseWeatherConfig(input_file=path, date="2016-03-03"), io.StringIO()) == 1

    assert "An error occurred parsing the json file" in caplog.text


def test_run_rejects_nan_literal(tmp_path, caplog) -> None:
    path = tmp_path / "nan.json"
    path.write_text('[{"date": "2016-03-03", "tmax": NaN}]')

    with caplog.at_level(logging.ERROR):
        assert run(ParseWeatherConfig(input_file=path, date="2016-03-03"), io.StringIO()) == 1

    assert "NaN" in caplog.text


def test_run_plot_requires_output_file(weather_file, caplog) -> None:
    config = ParseWeatherConfig(input_file=weather_file, plot="2016-03-03|2016-03-05")

    with caplog.at_level(logging.ERROR):
        assert run(config, io.StringIO()) == 1

    assert "--plot requires" in caplog.text


def test_main_prints_range(weather_file, capsys) -> None:
    assert main(["-f", str(weather_file), "-r", "2016-03-03|2016-03-03"]) == 0

    assert json.loads(capsys.readouterr().out)[0]["date"] == "2016-03-03"
