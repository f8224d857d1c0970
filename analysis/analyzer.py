"""
気象アーカイブの分析クラス
期間を指定して平均値の計算や時系列の可視化を行う
"""
import pandas as pd
import numpy as np
import matplotlib.pyplot as plt
from typing import Optional, List, Tuple
import logging

from database.archive import WeatherArchive
from database.dates import parse_date_range, timestamp_to_date
from database.models import VARIABLE_FIELDS, TMAX_KEY, TMIN_KEY, TMEAN_KEY, PPT_KEY

logger = logging.getLogger(__name__)

plt.rcParams['axes.unicode_minus'] = False


class WeatherArchiveAnalyzer:
    """
    気象アーカイブの集計・可視化クラス
    期間は YYYY-MM-DD|YYYY-MM-DD 形式の文字列で指定する
    """

    def __init__(self, archive: WeatherArchive):
        """
        Args:
            archive: WeatherArchiveインスタンス
        """
        self.archive = archive
        logger.info("Analyzer initialized")

    def compute_mean(self, date_range: str, variable: str) -> float:
        """
        期間内の指定した変数の平均値を計算

        変数が欠けている日は警告を出して計算から除外する

        Args:
            date_range: 期間 (YYYY-MM-DD|YYYY-MM-DD)
            variable: 変数名 ('tmax', 'tmin', 'tmean', 'ppt')

        Returns:
            平均値。変数名が不明、または期間内に値が一つもない場合はNaN
        """
        begin, end = self._parse_range(date_range)

        if variable not in VARIABLE_FIELDS:
            logger.warning(f"Unknown variable: {variable}")
            return np.nan

        total = 0.0
        count = 0
        for data in self.archive.retrieve_range(begin, end):
            value = data.value_of(variable)
            if value is None:
                logger.warning(
                    f"Data for date: {timestamp_to_date(data.timestamp)} is missing "
                    f"\"{variable}\" and will be ignored for calculating the mean"
                )
                continue
            total += value
            count += 1

        if count == 0:
            return np.nan
        return total / count

    def range_frame(self, date_range: str) -> pd.DataFrame:
        """
        期間内のデータをDataFrameに変換

        Args:
            date_range: 期間 (YYYY-MM-DD|YYYY-MM-DD)

        Returns:
            日付をインデックスとしたDataFrame（欠測値はNaN）
        """
        begin, end = self._parse_range(date_range)
        records = self.archive.retrieve_range(begin, end)

        columns = list(VARIABLE_FIELDS)
        rows = [
            {variable: data.value_of(variable) for variable in columns}
            for data in records
        ]
        index = pd.to_datetime(
            [timestamp_to_date(data.timestamp) for data in records]
        )
        index.name = 'date'

        return pd.DataFrame(rows, index=index, columns=columns, dtype=float)

    def plot_range(self,
                   date_range: str,
                   variables: Optional[List[str]] = None,
                   figsize: Tuple[int, int] = (12, 5)) -> Optional[plt.Figure]:
        """
        期間内の気象データを時系列で可視化

        Args:
            date_range: 期間
            variables: 表示する変数名のリスト（Noneの場合は気温3種）
            figsize: 図のサイズ

        Returns:
            Matplotlibのfigureオブジェクト。データがない場合はNone
        """
        if variables is None:
            variables = [TMAX_KEY, TMEAN_KEY, TMIN_KEY]

        unknown = [v for v in variables if v not in VARIABLE_FIELDS]
        if unknown:
            raise ValueError(f"Unknown variables: {unknown}")

        data = self.range_frame(date_range)
        if data.empty:
            logger.error(f"Cannot plot: no data for {date_range}")
            return None

        fig, ax = plt.subplots(figsize=figsize)

        for variable in variables:
            ax.plot(data.index, data[variable], marker='.', label=self._get_label(variable))

        ax.set_xlabel('Date')
        ax.set_title(f'Weather {date_range.replace("|", " to ")}')
        ax.grid(True, alpha=0.3)
        ax.legend(loc='upper left')

        fig.autofmt_xdate()
        plt.tight_layout()
        return fig

    def _parse_range(self, date_range: str) -> Tuple[int, int]:
        parsed = parse_date_range(date_range)
        if parsed is None:
            raise ValueError(f"Invalid date range: {date_range}")
        return parsed

    def _get_label(self, variable: str) -> str:
        """
        変数名から表示用ラベルを取得

        Args:
            variable: 変数名

        Returns:
            ラベル文字列
        """
        labels = {
            TMAX_KEY: 'Max Temperature (C)',
            TMIN_KEY: 'Min Temperature (C)',
            TMEAN_KEY: 'Mean Temperature (C)',
            PPT_KEY: 'Gas Concentration (ppt)',
        }
        return labels.get(variable, variable)
