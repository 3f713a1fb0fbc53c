#!/usr/bin/env python
# coding: utf-8
"""
入力ファイル読み込み共通処理

先頭の空白以外の1文字で形式を判定し、対応するパーサーへ振り分ける。
複数ファイルはスレッドで並列にパースし、全件そろってから返す。
"""

import logging
import os
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path

import pandas as pd

from ..errors import HrGraphError, UnrecognizedFormat
from .hr_cache import parse_cache
from .tcx import parse_tcx

logger = logging.getLogger(__name__)


FORMATS = {
    'tcx': {
        'description': 'TCX（XML）',
        'prefix': '<',
        'parse_fn': parse_tcx,
    },
    'cache': {
        'description': '心拍数キャッシュ（JSON）',
        'prefix': '{',
        'parse_fn': parse_cache,
    },
}


def _to_text(contents) -> str:
    if isinstance(contents, bytes):
        return contents.decode('utf-8-sig')
    return contents.lstrip('\ufeff')


def detect_format(contents) -> str:
    """
    ファイル内容から形式名を判定

    Parameters
    ----------
    contents : str or bytes
        ファイルの内容

    Returns
    -------
    str
        'tcx' または 'cache'

    Raises
    ------
    UnrecognizedFormat
        どの形式にも該当しない場合
    """
    try:
        head = _to_text(contents).lstrip()[:1]
    except UnicodeDecodeError as e:
        raise UnrecognizedFormat(f"Not UTF-8 text: {e}") from e

    for name, fmt in FORMATS.items():
        if head == fmt['prefix']:
            return name
    raise UnrecognizedFormat('Unknown file format (expected TCX or JSON cache)')


def parse_contents(contents) -> pd.DataFrame:
    """ファイル内容を形式判定してパース"""
    name = detect_format(contents)
    text = _to_text(contents).lstrip()
    if name == 'tcx':
        # XML宣言を含む文字列はバイト列で渡す
        text = text.encode('utf-8')
    return FORMATS[name]['parse_fn'](text)


def load_file(path) -> pd.DataFrame:
    """
    1ファイルを読み込んでサンプルを返す

    Raises
    ------
    HrGraphError
        パースに失敗した場合（sourceにファイルパスを設定）
    OSError
        ファイルが読めない場合
    """
    path = Path(path)
    contents = path.read_bytes()
    try:
        df = parse_contents(contents)
    except HrGraphError as e:
        e.source = str(path)
        raise
    logger.info(f"読み込み: {path} ({len(df)}件)")
    return df


def load_files(paths, max_workers=None) -> list[pd.DataFrame]:
    """
    複数ファイルを並列に読み込む

    結果は引数の順序で返す。1ファイルでも失敗したら未着手の処理を
    取り消して例外を送出する。

    Parameters
    ----------
    paths : list of str or Path
        入力ファイル
    max_workers : int, optional
        スレッド数（Noneの場合はファイル数とCPU数から決定）

    Returns
    -------
    list of DataFrame
        ファイルごとのサンプル（未ソート）
    """
    paths = list(paths)
    if not paths:
        return []
    if max_workers is None:
        max_workers = min(len(paths), 32, (os.cpu_count() or 1) + 4)

    results: list = [None] * len(paths)
    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        future_map = {}
        for idx, path in enumerate(paths):
            logger.debug(f"パース開始: {path}")
            future_map[executor.submit(load_file, path)] = idx
        try:
            for future in as_completed(future_map):
                results[future_map[future]] = future.result()
        except BaseException:
            for future in future_map:
                future.cancel()
            raise

    return results
