"""
hrgraph: 心拍数時系列の日別グラフ生成

TCX（XML）・JSONキャッシュの心拍数データを結合・整列し、
日ごとの折れ線グラフを1つのHTMLにまとめる。
"""

from .analytics.heart_rate import (
    Bounds,
    DayBucket,
    compute_bounds,
    partition_by_day,
    process_samples,
    smooth,
)
from .errors import (
    EmptyInput,
    HrGraphError,
    InvalidCache,
    InvalidTimeSpec,
    MalformedMarkup,
    UnrecognizedFormat,
)
from .parsers import load_files, parse_contents, write_cache

__version__ = '0.1.0'

__all__ = [
    'Bounds',
    'DayBucket',
    'EmptyInput',
    'HrGraphError',
    'InvalidCache',
    'InvalidTimeSpec',
    'MalformedMarkup',
    'UnrecognizedFormat',
    'compute_bounds',
    'load_files',
    'parse_contents',
    'partition_by_day',
    'process_samples',
    'smooth',
    'write_cache',
]
