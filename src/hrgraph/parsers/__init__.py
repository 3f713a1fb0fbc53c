"""
入力ファイルパーサーモジュール

TCX（XML）と心拍数キャッシュ（JSON）の読み込み、キャッシュの書き出しを担当。
"""

from .hr_cache import dump_cache, parse_cache, write_cache
from .loader import detect_format, load_file, load_files, parse_contents
from .tcx import parse_tcx

__all__ = [
    'detect_format',
    'dump_cache',
    'load_file',
    'load_files',
    'parse_cache',
    'parse_contents',
    'parse_tcx',
    'write_cache',
]
