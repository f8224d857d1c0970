"""
日付文字列とUnix時刻(UTC、日単位)の相互変換
期間指定文字列の検証もここで行う
"""
import re
from datetime import date, timedelta
from typing import Optional, Tuple

SECONDS_PER_DAY = 86400
EPOCH = date(1970, 1, 1)

# YYYY-MM-DD (年・月・日をキャプチャ)
DATE_PATTERN = re.compile(r'([12]\d{3})-(0[1-9]|1[0-2])-(0[1-9]|[12]\d|3[01])')
YEAR_PATTERN = re.compile(r'[12]\d{3}')

RANGE_SEPARATOR = '|'
DATE_LENGTH = 10
YEAR_LENGTH = 4
DATE_RANGE_LENGTH = 21   # YYYY-MM-DD|YYYY-MM-DD
YEAR_RANGE_LENGTH = 9    # YYYY|YYYY


def day_to_timestamp(day: date) -> int:
    """日付をその日の00:00:00 UTCのUnix時刻に変換"""
    return (day - EPOCH).days * SECONDS_PER_DAY


def timestamp_to_day(timestamp: int) -> date:
    """Unix時刻を含む日付を返す"""
    return EPOCH + timedelta(days=timestamp // SECONDS_PER_DAY)


def ymd_to_timestamp(year: int, month: int, day: int) -> Optional[int]:
    """
    年月日をUnix時刻に変換

    Args:
        year: 年
        month: 月
        day: 日

    Returns:
        Unix時刻。存在しない日付（平年の2/29など）の場合はNone
    """
    try:
        return day_to_timestamp(date(year, month, day))
    except ValueError:
        return None


def date_to_timestamp(date_string: str) -> Optional[int]:
    """
    YYYY-MM-DD形式の文字列をUnix時刻に変換

    前後の空白などは許容する（文字列中の日付を検索する）

    Args:
        date_string: 日付文字列

    Returns:
        Unix時刻。日付が見つからない・存在しない場合はNone
    """
    match = DATE_PATTERN.search(date_string)
    if not match:
        return None
    year, month, day = (int(g) for g in match.groups())
    return ymd_to_timestamp(year, month, day)


def timestamp_to_date(timestamp: int) -> str:
    """Unix時刻をYYYY-MM-DD形式の文字列に変換"""
    return timestamp_to_day(timestamp).isoformat()


def parse_date_range(range_string: str) -> Optional[Tuple[int, int]]:
    """
    YYYY-MM-DD|YYYY-MM-DD 形式の期間をUnix時刻のペアに変換

    Args:
        range_string: 期間文字列

    Returns:
        (開始, 終了) のUnix時刻。形式が不正、または開始 > 終了の場合はNone
    """
    if len(range_string) != DATE_RANGE_LENGTH:
        return None
    if range_string[DATE_LENGTH] != RANGE_SEPARATOR:
        return None

    start = date_to_timestamp(range_string[:DATE_LENGTH])
    finish = date_to_timestamp(range_string[DATE_LENGTH + 1:])
    if start is None or finish is None or start > finish:
        return None
    return start, finish


def check_date_range(range_string: str) -> bool:
    """期間文字列が正しい形式か"""
    return parse_date_range(range_string) is not None


def parse_year_range(range_string: str) -> Optional[Tuple[int, int]]:
    """
    YYYY|YYYY 形式の年の範囲を整数のペアに変換

    Args:
        range_string: 年範囲の文字列

    Returns:
        (開始年, 終了年)。形式が不正、または開始 > 終了の場合はNone
    """
    if len(range_string) != YEAR_RANGE_LENGTH:
        return None
    if range_string[YEAR_LENGTH] != RANGE_SEPARATOR:
        return None

    first = range_string[:YEAR_LENGTH]
    last = range_string[YEAR_LENGTH + 1:]
    if not YEAR_PATTERN.fullmatch(first) or not YEAR_PATTERN.fullmatch(last):
        return None

    start_year, end_year = int(first), int(last)
    if start_year > end_year:
        return None
    return start_year, end_year


def check_year_range(range_string: str) -> bool:
    """年範囲の文字列が正しい形式か"""
    return parse_year_range(range_string) is not None
