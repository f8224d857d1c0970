"""
気象データをJSON形式で出力する
"""
import json
import math
from typing import Any, Dict, List, Sequence, TextIO

from database.dates import timestamp_to_date
from database.models import DATE_KEY, VARIABLE_FIELDS, WeatherData

# 出力する数値の有効桁数
PRECISION = 6


def create_weather_json(data: WeatherData) -> Dict[str, Any]:
    """
    WeatherDataをJSONオブジェクト用の辞書に変換

    Args:
        data: 気象データ

    Returns:
        辞書（欠測項目は含まない）
    """
    schema: Dict[str, Any] = {}
    if data.timestamp is not None:
        schema[DATE_KEY] = timestamp_to_date(data.timestamp)

    for key in VARIABLE_FIELDS:
        value = data.value_of(key)
        if value is not None:
            schema[key] = value

    return schema


def _limit_precision(value: Any) -> Any:
    if isinstance(value, float) and math.isfinite(value):
        return float(f"{value:.{PRECISION}g}")
    if isinstance(value, dict):
        return {k: _limit_precision(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_limit_precision(v) for v in value]
    return value


def json_pretty(value: Any) -> str:
    """インデント付きのJSON文字列に変換"""
    return json.dumps(_limit_precision(value), indent=3)


def format_mean(value: float) -> str:
    """平均値を小数点以下3桁で表示"""
    return f"{value:.3f}"


class WeatherPresenter:
    """
    クエリ結果をストリームに書き出すクラス
    """

    def __init__(self, stream: TextIO):
        """
        Args:
            stream: 出力先
        """
        self.stream = stream

    def write_record(self, data: WeatherData):
        self.stream.write(json_pretty(create_weather_json(data)) + "\n")

    def write_records(self, records: Sequence[WeatherData]):
        """JSON配列として出力（空の場合は []）"""
        array: List[Dict[str, Any]] = [create_weather_json(data) for data in records]
        self.stream.write(json_pretty(array) + "\n")

    def write_mean(self, value: float):
        self.stream.write(format_mean(value) + "\n")
