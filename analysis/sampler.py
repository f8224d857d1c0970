"""
過去データのサンプリング
期間内の各日について、指定した年の範囲からランダムに年を選び
同じ月日のデータで期間を再構成する
"""
import logging
from dataclasses import replace
from datetime import date, timedelta
from typing import List, Optional

import numpy as np

from database.archive import WeatherArchive
from database.dates import (
    day_to_timestamp,
    parse_date_range,
    parse_year_range,
    timestamp_to_day,
    ymd_to_timestamp,
)
from database.models import WeatherData

logger = logging.getLogger(__name__)

# プロセス内で共有する乱数生成器（OSのエントロピーで初期化）
_default_rng = np.random.default_rng()


class HistoricalSampler:
    """
    過去の同じ月日のデータをランダムに抽出するクラス
    """

    def __init__(self,
                 archive: WeatherArchive,
                 rng: Optional[np.random.Generator] = None):
        """
        Args:
            archive: WeatherArchiveインスタンス
            rng: 乱数生成器（Noneの場合はプロセス共有のもの）
        """
        self.archive = archive
        self.rng = rng if rng is not None else _default_rng

    def sample(self,
               start_day: date,
               end_day: date,
               start_year: int,
               end_year: int) -> List[WeatherData]:
        """
        期間内の各日について過去データを抽出

        年の候補を日ごとにシャッフルし、データが見つかるまで順に試す。
        どの年にもデータがない日は結果から除外される。

        Args:
            start_day: 開始日
            end_day: 終了日（この日を含む）
            start_year: 抽出元の開始年
            end_year: 抽出元の終了年（この年を含む）

        Returns:
            対象日のタイムスタンプに置き換えたデータのリスト（日付順）
        """
        years = list(range(start_year, end_year + 1))
        sampled = []

        current = start_day
        while current <= end_day:
            donor = self._draw(years, current.month, current.day)
            if donor is not None:
                sampled.append(replace(donor, timestamp=day_to_timestamp(current)))
            else:
                logger.debug(f"No historical data for {current.isoformat()}")
            current += timedelta(days=1)

        logger.info(f"Sampled {len(sampled)} days from {start_year}-{end_year}")
        return sampled

    def sample_range(self, date_range: str, year_range: str) -> List[WeatherData]:
        """
        文字列で指定した期間・年範囲で過去データを抽出

        Args:
            date_range: 期間 (YYYY-MM-DD|YYYY-MM-DD)
            year_range: 年範囲 (YYYY|YYYY)

        Returns:
            抽出されたデータのリスト
        """
        days = parse_date_range(date_range)
        if days is None:
            raise ValueError(f"Invalid date range: {date_range}")
        years = parse_year_range(year_range)
        if years is None:
            raise ValueError(f"Invalid year range: {year_range}")

        return self.sample(
            timestamp_to_day(days[0]),
            timestamp_to_day(days[1]),
            years[0],
            years[1],
        )

    def _draw(self, years: List[int], month: int, day: int) -> Optional[WeatherData]:
        for year in self.rng.permutation(years):
            # 平年の2/29などはデータなしとして扱う
            timestamp = ymd_to_timestamp(int(year), month, day)
            if timestamp is None:
                continue
            data = self.archive.retrieve(timestamp)
            if data is not None:
                return data
        return None
