"""
JSON形式の気象データファイルを読み込む
"""
import json
import logging
import math
from numbers import Real
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from database.archive import WeatherArchive
from database.dates import date_to_timestamp
from database.models import DATE_KEY, VARIABLE_FIELDS, WeatherData

logger = logging.getLogger(__name__)


class IncorrectJson(ValueError):
    """JSONの形式が気象データとして正しくない"""

    def __init__(self, message: str = "JSON does not match payload format"):
        super().__init__(message)


class WeatherJsonLoader:
    """
    JSON形式の気象データを読み込むクラス

    1件のデータは以下のキーを持つオブジェクト:
    - "date": 文字列 (YYYY-MM-DD)
    - "tmax", "tmin", "tmean", "ppt": 数値
    キーが欠けている場合、その項目は欠測として扱う
    """

    def __init__(self, encoding: str = 'utf-8'):
        """
        Args:
            encoding: ファイルの文字コード
        """
        self.encoding = encoding

    def json_from_string(self, text: str) -> Any:
        """
        文字列をJSONとして解析

        Args:
            text: JSON文字列

        Returns:
            解析結果

        Raises:
            IncorrectJson: JSONとして解析できない場合
        """
        try:
            return json.loads(text, parse_constant=self._reject_constant)
        except json.JSONDecodeError as e:
            raise IncorrectJson(str(e)) from e

    def parse_weather(self, schema: Dict[str, Any]) -> WeatherData:
        """
        1件分のJSONオブジェクトからWeatherDataを作成

        Args:
            schema: JSONオブジェクト

        Returns:
            気象データ（日付がない・不正な場合はtimestampがNone）

        Raises:
            IncorrectJson: オブジェクトでない場合
        """
        if not isinstance(schema, dict):
            raise IncorrectJson()

        timestamp = None
        date_value = schema.get(DATE_KEY)
        if isinstance(date_value, str):
            timestamp = date_to_timestamp(date_value)

        values = {
            field: self._parse_number(schema.get(key))
            for key, field in VARIABLE_FIELDS.items()
        }
        return WeatherData(timestamp=timestamp, **values)

    def load_file(self, path: Union[str, Path]) -> List[WeatherData]:
        """
        ファイルから気象データを読み込む

        Args:
            path: JSONファイルのパス（配列または単一オブジェクト）

        Returns:
            気象データのリスト（ファイル内の順序）
        """
        try:
            text = Path(path).read_text(encoding=self.encoding)
        except UnicodeDecodeError as e:
            raise IncorrectJson(str(e)) from e
        schema = self.json_from_string(text)

        if isinstance(schema, list):
            return [self.parse_weather(item) for item in schema]
        if isinstance(schema, dict):
            return [self.parse_weather(schema)]

        logger.warning(f"No weather data found in {path}")
        return []

    def load_into(self, archive: WeatherArchive, path: Union[str, Path]) -> int:
        """
        ファイルの気象データをアーカイブに追加

        Args:
            archive: 追加先のWeatherArchive
            path: JSONファイルのパス

        Returns:
            新たに追加された日数（日付のないデータ、既存の日付の置き換えは除く）
        """
        before = len(archive)
        for data in self.load_file(path):
            archive.add_data(data)

        added = len(archive) - before
        logger.info(f"Loaded {added} weather records from {path}")
        return added

    def _parse_number(self, value: Any) -> Optional[float]:
        # boolはintのサブクラスなので除外
        if isinstance(value, bool) or not isinstance(value, Real):
            return None
        # Infinity/1e999などの非有限値は欠測として扱う
        if not math.isfinite(value):
            return None
        return float(value)

    def _reject_constant(self, name: str):
        raise IncorrectJson(f"Non-standard JSON value: {name}")
