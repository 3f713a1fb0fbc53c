"""
ユーティリティモジュール
"""

from .time_spec import parse_time_spec, format_day_second

__all__ = ['parse_time_spec', 'format_day_second']
