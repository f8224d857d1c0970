"""
parseweather: JSON形式の気象データファイルを読み込み、オプションに応じて出力する

Usage:
    parseweather -f data.json -d 2022-01-01
    parseweather -f data.json -r '2022-01-01|2022-12-31'
    parseweather -f data.json -m '2022-01-01|2022-12-31' tmax
    parseweather -f data.json -s '2022-01-01|2022-12-31' '2018|2022'
    parseweather -f data.json -p '2022-01-01|2022-12-31' -o weather.png

シェルでは | がパイプとして解釈されるため、引用符で囲むかエスケープすること
"""
import argparse
import logging
import math
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, TextIO, Tuple

import matplotlib.pyplot as plt

from analysis.analyzer import WeatherArchiveAnalyzer
from analysis.sampler import HistoricalSampler
from database.archive import WeatherArchive
from database.dates import check_date_range, check_year_range, date_to_timestamp, parse_date_range
from database.models import VARIABLE_FIELDS
from loaders.presenter import WeatherPresenter
from loaders.weather_loader import IncorrectJson, WeatherJsonLoader

logger = logging.getLogger(__name__)

LOG_FORMAT = '%(levelname)s: %(message)s'


@dataclass
class ParseWeatherConfig:
    """コマンドライン引数から作成する実行設定"""
    input_file: Path
    output_file: Optional[Path] = None
    date: Optional[str] = None                          # YYYY-MM-DD
    date_range: Optional[str] = None                    # YYYY-MM-DD|YYYY-MM-DD
    mean: Optional[Tuple[str, str]] = None              # (期間, 変数名)
    sample_history: Optional[Tuple[str, str]] = None    # (期間, 年範囲)
    plot: Optional[str] = None                          # 期間
    verbose: bool = False


def _existing_file(value: str) -> Path:
    path = Path(value)
    if not path.is_file():
        raise argparse.ArgumentTypeError(f"File does not exist: {value}")
    return path


def _date_string(value: str) -> str:
    if len(value) != 10 or date_to_timestamp(value) is None:
        raise argparse.ArgumentTypeError(f"Incorrect date (expected YYYY-MM-DD): {value}")
    return value


def _date_range_string(value: str) -> str:
    if not check_date_range(value):
        raise argparse.ArgumentTypeError(
            f"Incorrect date range (expected YYYY-MM-DD|YYYY-MM-DD): {value}")
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='parseweather',
        description='Read a file with JSON formatted weather data and query it '
                    'according to the options below.')

    parser.add_argument('-f', '--file', dest='input_file', type=_existing_file, required=True,
                        help='Path to the JSON weather data file.')
    parser.add_argument('-o', '--output', dest='output_file', type=Path,
                        help='Write the result to this file instead of stdout.')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Show informational log messages.')

    group = parser.add_mutually_exclusive_group()
    group.add_argument('-d', '--date', type=_date_string,
                       help='A specific day to retrieve, formatted as YYYY-MM-DD.')
    group.add_argument('-r', '--range', dest='date_range', type=_date_range_string,
                       help='Return the data of a date range (YYYY-MM-DD|YYYY-MM-DD) '
                            'as a JSON array. Missing days are skipped.')
    group.add_argument('-m', '--mean', nargs=2, metavar=('RANGE', 'VARIABLE'),
                       help='Mean of a variable (tmax, tmin, tmean, ppt) over a date '
                            'range. The two inputs may be given in either order.')
    group.add_argument('-s', '--sample-history', nargs=2, metavar=('RANGE', 'YEARS'),
                       help='For each day of a date range, take the same day of a '
                            'randomly chosen year of YEARS (YYYY|YYYY). Days without '
                            'any data are omitted.')
    group.add_argument('-p', '--plot', type=_date_range_string,
                       help='Plot the temperatures of a date range to --output.')
    return parser


def _order_mean_args(values: Sequence[str]) -> Optional[Tuple[str, str]]:
    first, second = values
    if check_date_range(first) and second in VARIABLE_FIELDS:
        return first, second
    if check_date_range(second) and first in VARIABLE_FIELDS:
        return second, first
    return None


def _order_sample_args(values: Sequence[str]) -> Optional[Tuple[str, str]]:
    first, second = values
    if check_date_range(first) and check_year_range(second):
        return first, second
    if check_date_range(second) and check_year_range(first):
        return second, first
    return None


def parse_config(argv: Optional[List[str]] = None) -> ParseWeatherConfig:
    """
    コマンドライン引数を検証して設定を作成

    不正な入力はargparseのエラーとして終了する（終了コード2）

    Args:
        argv: 引数のリスト（Noneの場合はsys.argv）

    Returns:
        ParseWeatherConfig
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    mean = None
    if args.mean is not None:
        mean = _order_mean_args(args.mean)
        if mean is None:
            parser.error("Incorrect input for -m, --mean option. Expected a date "
                         f"range and one of {', '.join(VARIABLE_FIELDS)}")

    sample_history = None
    if args.sample_history is not None:
        sample_history = _order_sample_args(args.sample_history)
        if sample_history is None:
            parser.error("Incorrect input for -s, --sample-history option. Expected "
                         "a date range and a year range")

    if args.plot is not None and args.output_file is None:
        parser.error("-p, --plot requires -o, --output")

    return ParseWeatherConfig(
        input_file=args.input_file,
        output_file=args.output_file,
        date=args.date,
        date_range=args.date_range,
        mean=mean,
        sample_history=sample_history,
        plot=args.plot,
        verbose=args.verbose,
    )


def _dispatch(config: ParseWeatherConfig, archive: WeatherArchive, stream: TextIO) -> int:
    presenter = WeatherPresenter(stream)

    if config.date is not None:
        data = archive.retrieve(date_to_timestamp(config.date))
        if data is None:
            logger.warning(f"Data for date: {config.date} is not available")
        else:
            presenter.write_record(data)

    elif config.date_range is not None:
        begin, end = parse_date_range(config.date_range)
        presenter.write_records(archive.retrieve_range(begin, end))

    elif config.mean is not None:
        date_range, variable = config.mean
        mean = WeatherArchiveAnalyzer(archive).compute_mean(date_range, variable)
        if math.isnan(mean):
            logger.error(f"Could not calculate a mean; data for variable \"{variable}\" "
                         f"is not present within the time range {date_range}")
        else:
            presenter.write_mean(mean)

    elif config.sample_history is not None:
        date_range, year_range = config.sample_history
        presenter.write_records(HistoricalSampler(archive).sample_range(date_range, year_range))

    return 0


def run(config: ParseWeatherConfig, stdout: Optional[TextIO] = None) -> int:
    """
    設定に従ってデータを読み込み、クエリを実行

    Args:
        config: 実行設定
        stdout: 出力ファイル未指定時の出力先（Noneの場合はsys.stdout）

    Returns:
        終了コード
    """
    if config.plot is not None and config.output_file is None:
        logger.error("-p, --plot requires -o, --output")
        return 1

    archive = WeatherArchive()
    try:
        WeatherJsonLoader().load_into(archive, config.input_file)
    except IncorrectJson as e:
        logger.error(f"An error occurred parsing the json file: {e}")
        return 1
    except OSError as e:
        logger.error(f"Could not read {config.input_file}: {e}")
        return 1

    if config.plot is not None:
        fig = WeatherArchiveAnalyzer(archive).plot_range(config.plot)
        if fig is None:
            return 1
        fig.savefig(config.output_file)
        plt.close(fig)
        logger.info(f"Plot saved to {config.output_file}")
        return 0

    if config.output_file is not None:
        with open(config.output_file, 'w', encoding='utf-8') as stream:
            return _dispatch(config, archive, stream)
    return _dispatch(config, archive, stdout or sys.stdout)


def main(argv: Optional[List[str]] = None) -> int:
    config = parse_config(argv)
    logging.basicConfig(level=logging.INFO if config.verbose else logging.WARNING,
                        format=LOG_FORMAT)
    return run(config)


if __name__ == '__main__':
    sys.exit(main())
