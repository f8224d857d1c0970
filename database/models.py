"""
データモデル定義
"""
from dataclasses import dataclass
from typing import Dict, Optional


# JSONのキー名（平均値計算の変数名としても使用）
DATE_KEY = 'date'
TMAX_KEY = 'tmax'
TMIN_KEY = 'tmin'
TMEAN_KEY = 'tmean'
PPT_KEY = 'ppt'

# 変数名 -> WeatherDataのフィールド名
VARIABLE_FIELDS: Dict[str, str] = {
    TMAX_KEY: 'max_temp',
    TMIN_KEY: 'min_temp',
    TMEAN_KEY: 'mean_temp',
    PPT_KEY: 'gas_ppt',
}


@dataclass(frozen=True)
class WeatherData:
    """日別気象データモデル（各項目は欠測の可能性あり）"""
    timestamp: Optional[int] = None      # UTC日付のUnix時刻(秒)
    max_temp: Optional[float] = None     # 最高気温(℃)
    min_temp: Optional[float] = None     # 最低気温(℃)
    mean_temp: Optional[float] = None    # 平均気温(℃)
    gas_ppt: Optional[float] = None      # 大気中のガス濃度(ppt)

    @property
    def is_keyed(self) -> bool:
        """タイムスタンプを持つか（アーカイブに格納可能か）"""
        return self.timestamp is not None

    def value_of(self, variable: str) -> Optional[float]:
        """
        変数名から測定値を取得

        Args:
            variable: 変数名 ('tmax', 'tmin', 'tmean', 'ppt')

        Returns:
            測定値またはNone
        """
        return getattr(self, VARIABLE_FIELDS[variable])
