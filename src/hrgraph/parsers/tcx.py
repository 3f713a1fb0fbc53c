#!/usr/bin/env python
# coding: utf-8
"""
TCX（Training Center XML）パーサー

運動記録のTrackpointから心拍数サンプルを抽出する。

TCX Format:
- Trackpoint: 1回分の計測
  - Time: ISO 8601 形式の時刻（例: "2024-03-05T07:15:00Z"）
  - HeartRateBpm/Value: 心拍数（任意）

時刻が読めないTrackpointはファイル全体のエラーとし、
心拍数の無いTrackpointは黙って読み飛ばす。
"""

import logging
import re
import xml.etree.ElementTree as ET

import pandas as pd

from ..errors import MalformedMarkup

logger = logging.getLogger(__name__)

# 日付部分（YYYY-MM-DD）から始まるものだけを時刻として受け付ける
_ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}")

SAMPLE_COLUMNS = ['timestamp', 'hr']


def _local_name(tag):
    """'{namespace}Trackpoint' -> 'Trackpoint'"""
    if not isinstance(tag, str):
        return ''
    return tag.rsplit('}', 1)[-1]


def _find_descendant(element, name):
    """名前空間を無視して最初の子孫要素を探す"""
    for child in element.iter():
        if child is not element and _local_name(child.tag) == name:
            return child
    return None


def parse_time(text) -> int:
    """
    ISO 8601 の時刻文字列をエポックミリ秒に変換

    オフセットの無い時刻はUTCとして扱う。

    Raises
    ------
    ValueError
        時刻として解釈できない場合
    """
    if text is None or not _ISO_DATE_RE.match(text.strip()):
        raise ValueError(f"not an ISO 8601 time: {text!r}")
    ts = pd.to_datetime(text.strip(), format='ISO8601')
    if ts is pd.NaT:
        raise ValueError(f"not a time: {text!r}")
    if ts.tzinfo is None:
        ts = ts.tz_localize('UTC')
    return int(ts.value // 1_000_000)


def parse_tcx(contents) -> pd.DataFrame:
    """
    TCX文書から心拍数サンプルを抽出

    Parameters
    ----------
    contents : str or bytes
        TCXファイルの内容

    Returns
    -------
    DataFrame
        - timestamp: int (エポックミリ秒)
        - hr: int (bpm)
        文書内の出現順（ソートはしない）

    Raises
    ------
    MalformedMarkup
        XMLとして解析できない、またはTrackpointの時刻・心拍数が不正な場合
    """
    try:
        root = ET.fromstring(contents)
    except ET.ParseError as e:
        raise MalformedMarkup(f"Invalid XML: {e}") from e

    records = []
    skipped = 0
    for idx, tp in enumerate(el for el in root.iter() if _local_name(el.tag) == 'Trackpoint'):
        time_node = _find_descendant(tp, 'Time')
        if time_node is None:
            raise MalformedMarkup(f"Trackpoint {idx}: missing Time")
        try:
            timestamp = parse_time(time_node.text)
        except ValueError as e:
            raise MalformedMarkup(f"Trackpoint {idx}: invalid Time {time_node.text!r}") from e

        # 心拍数が無い計測点はエラーにせず除外
        hr_node = _find_descendant(tp, 'HeartRateBpm')
        value_node = _find_descendant(hr_node, 'Value') if hr_node is not None else None
        if value_node is None:
            skipped += 1
            continue
        try:
            hr = int(value_node.text.strip())
        except (AttributeError, ValueError) as e:
            raise MalformedMarkup(
                f"Trackpoint {idx}: invalid heart rate {value_node.text!r}"
            ) from e

        records.append({'timestamp': timestamp, 'hr': hr})

    if skipped:
        logger.debug(f"心拍数の無いTrackpointを{skipped}件スキップ")

    return pd.DataFrame(records, columns=SAMPLE_COLUMNS).astype('int64')
