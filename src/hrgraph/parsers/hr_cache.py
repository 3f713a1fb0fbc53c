"""
心拍数キャッシュ（JSON）の読み書き

Format:
    {"datapoints": [{"hr": 62, "timestamp": 1709622900000}, ...]}

書き出しはタイムスタンプ昇順。読み込んだ値はそのままサンプルとして使う。
"""
import json
import logging
from pathlib import Path

import pandas as pd

from ..errors import InvalidCache

logger = logging.getLogger(__name__)

SAMPLE_COLUMNS = ['timestamp', 'hr']


def _is_integer(value):
    return isinstance(value, int) and not isinstance(value, bool)


def parse_cache(contents) -> pd.DataFrame:
    """
    キャッシュJSONを読み込み

    Parameters
    ----------
    contents : str or bytes
        キャッシュファイルの内容

    Returns
    -------
    DataFrame
        timestamp (エポックミリ秒), hr の2列

    Raises
    ------
    InvalidCache
        JSONとして不正、またはdatapointsが無い・リストでない場合
    """
    try:
        data = json.loads(contents)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise InvalidCache(f"Invalid JSON: {e}") from e

    if not data or not isinstance(data, dict):
        raise InvalidCache("Cache must be a non-empty JSON object")
    if 'datapoints' not in data:
        raise InvalidCache("Cache JSON must contain 'datapoints' key")
    if not isinstance(data['datapoints'], list):
        raise InvalidCache(
            f"'datapoints' must be a list, got {type(data['datapoints']).__name__}"
        )

    rows = []
    for idx, dp in enumerate(data['datapoints']):
        try:
            row = (dp['timestamp'], dp['hr'])
        except (KeyError, TypeError) as e:
            raise InvalidCache(f"Datapoint {idx}: missing {e}") from e
        # 小数は切り捨てず不正として扱う（書き戻しで値が変わるため）
        if not all(_is_integer(v) for v in row):
            raise InvalidCache(f"Datapoint {idx}: hr and timestamp must be integers, got {dp!r}")
        rows.append(row)

    return pd.DataFrame(rows, columns=SAMPLE_COLUMNS).astype('int64')


def dump_cache(samples: pd.DataFrame) -> str:
    """サンプルをキャッシュJSON文字列に変換（タイムスタンプ昇順）"""
    ordered = samples.sort_values('timestamp', kind='stable')
    datapoints = [
        {'hr': int(hr), 'timestamp': int(ts)}
        for ts, hr in zip(ordered['timestamp'], ordered['hr'])
    ]
    return json.dumps({'datapoints': datapoints})


def write_cache(samples: pd.DataFrame, path) -> Path:
    """
    キャッシュファイルを書き出し

    Parameters
    ----------
    samples : DataFrame
        timestamp, hr 列を持つサンプル
    path : str or Path
        出力先

    Returns
    -------
    Path
        書き出したファイルのパス
    """
    path = Path(path)
    path.write_text(dump_cache(samples), encoding='utf-8')
    logger.info(f"キャッシュを保存しました: {path} ({len(samples)}件)")
    return path
