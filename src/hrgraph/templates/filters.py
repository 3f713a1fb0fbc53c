#!/usr/bin/env python
# coding: utf-8
"""
Jinja2カスタムフィルタ

心拍数レポートテンプレート用のフォーマット関数を提供
"""

import pandas as pd

from ..config import DAY_NAMES
from ..utils.time_spec import format_day_second


def day_heading(date):
    """
    日付を見出し用にフォーマット

    Parameters
    ----------
    date : str or date
        日付

    Returns
    -------
    str
        'YYYY-MM-DD (曜日)' 形式

    Examples
    --------
    >>> day_heading('2024-03-05')
    '2024-03-05 (Tue)'
    """
    ts = pd.to_datetime(date)
    return f"{ts.strftime('%Y-%m-%d')} ({DAY_NAMES[ts.weekday()]})"


def time_of_day(seconds):
    """
    0時からの秒数を HH:MM にフォーマット

    Examples
    --------
    >>> time_of_day(36000)
    '10:00'
    """
    if seconds is None or pd.isna(seconds):
        return '-'
    return format_day_second(seconds)
