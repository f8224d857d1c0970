"""
気象データアーカイブ
タイムスタンプをキーとして日別の気象データをメモリ上で管理
"""
import bisect
import logging
from typing import Dict, Iterator, List, Optional, Tuple

from database.dates import timestamp_to_date
from database.models import WeatherData

logger = logging.getLogger(__name__)


class WeatherArchive:
    """
    タイムスタンプ順に気象データを保持するアーカイブクラス
    範囲検索のためにキーをソート済みリストで管理する
    """

    def __init__(self):
        self._records: Dict[int, WeatherData] = {}
        self._timestamps: List[int] = []
        logger.info("Weather archive initialized")

    def add_data(self, data: WeatherData):
        """
        気象データを追加

        同じタイムスタンプのデータが既にある場合は丸ごと置き換える。
        タイムスタンプのないデータは追加できないため何もしない。

        Args:
            data: 追加する気象データ
        """
        if data.timestamp is None:
            logger.debug("Skipping weather data without timestamp")
            return

        if data.timestamp not in self._records:
            bisect.insort(self._timestamps, data.timestamp)
        self._records[data.timestamp] = data

    def retrieve(self, timestamp: int) -> Optional[WeatherData]:
        """
        タイムスタンプが一致するデータを取得

        Args:
            timestamp: Unix時刻(秒)

        Returns:
            気象データ。存在しない場合はNone
        """
        return self._records.get(timestamp)

    def retrieve_range(self, begin: int, end: int) -> List[WeatherData]:
        """
        期間内の気象データを取得

        開始時刻のデータが存在しない場合は、期間内に他のデータがあっても
        空のリストを返す。欠けている日はスキップされる。

        Args:
            begin: 開始時刻(秒)
            end: 終了時刻(秒、この時刻を含む)

        Returns:
            時刻の昇順に並んだ気象データのリスト
        """
        if begin > end or begin not in self._records:
            return []

        lo = bisect.bisect_left(self._timestamps, begin)
        hi = bisect.bisect_right(self._timestamps, end)
        return [self._records[ts] for ts in self._timestamps[lo:hi]]

    def timestamps(self) -> List[int]:
        """格納されているタイムスタンプ（昇順）"""
        return list(self._timestamps)

    def get_statistics(self) -> Dict[str, object]:
        """
        アーカイブの統計情報を取得

        Returns:
            統計情報の辞書
        """
        date_range: Tuple[Optional[str], Optional[str]] = (None, None)
        if self._timestamps:
            date_range = (
                timestamp_to_date(self._timestamps[0]),
                timestamp_to_date(self._timestamps[-1]),
            )

        return {
            'weather_records': len(self._timestamps),
            'weather_date_range': date_range,
        }

    def clear(self):
        """すべてのデータを削除"""
        self._records.clear()
        self._timestamps.clear()

    def __len__(self) -> int:
        return len(self._timestamps)

    def __contains__(self, timestamp: object) -> bool:
        return timestamp in self._records

    def __iter__(self) -> Iterator[WeatherData]:
        for ts in self._timestamps:
            yield self._records[ts]
