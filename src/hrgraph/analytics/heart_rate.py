#!/usr/bin/env python
# coding: utf-8
"""
心拍数時系列の前処理・可視化ライブラリ

複数ファイルから読み込んだ心拍数サンプルを結合・整列し、
時刻帯フィルタ、間引き（平滑化）、日別分割、軸範囲の計算を行う。

処理の流れ:
    1. aggregate: 全ファイルのサンプルを結合し、タイムスタンプ順に安定ソート
    2. add_day_seconds: ローカル時刻の日付と0時からの秒数を付与
    3. filter_by_time_of_day: 時刻帯（日付に依存しない）で絞り込み
    4. smooth: 間隔・変化量の小さい点を間引く
    5. compute_bounds: 全日共通の軸範囲を計算
    6. partition_by_day: 日付ごとに分割
"""

import datetime as dt
import logging
from dataclasses import dataclass
from typing import Optional
from zoneinfo import ZoneInfo

import matplotlib.pyplot as plt
import matplotlib.ticker as mticker
import numpy as np
import pandas as pd

from ..config import CHART_DPI, HR_CHANGE_THRESHOLD, LINE_COLOR
from ..errors import EmptyInput
from ..utils.time_spec import format_day_second

logger = logging.getLogger(__name__)


# =============================================================================
# 定数
# =============================================================================

SAMPLE_COLUMNS = ['timestamp', 'hr']


# =============================================================================
# データクラス
# =============================================================================

@dataclass(frozen=True)
class DayBucket:
    """
    1日分（ローカル時刻の暦日）のサンプル

    Attributes
    ----------
    date : datetime.date
        ローカル時刻の日付
    samples : pd.DataFrame
        その日のサンプル（入力と同じ順序）
    """
    date: dt.date
    samples: pd.DataFrame


@dataclass(frozen=True)
class Bounds:
    """全日共通の軸範囲（日ごとのグラフを同じスケールで比較するため）"""
    min_day_second: int
    max_day_second: int
    min_hr: int
    max_hr: int


# =============================================================================
# 結合・時刻変換
# =============================================================================

def aggregate(frames) -> pd.DataFrame:
    """
    ファイルごとのサンプルを結合し、タイムスタンプ昇順に並べる

    同じタイムスタンプの点は入力順を保つ（安定ソート）。
    重複（ファイル間で同じ時刻・同じ値）は除去しない。

    Parameters
    ----------
    frames : list of DataFrame
        ファイルごとのサンプル（引数で指定された順）

    Returns
    -------
    DataFrame
        結合・ソート済みのサンプル
    """
    frames = [f for f in frames if f is not None]
    if not frames:
        return pd.DataFrame(columns=SAMPLE_COLUMNS).astype('int64')

    df = pd.concat(frames, ignore_index=True)
    df = df.sort_values('timestamp', kind='stable').reset_index(drop=True)
    return df


def to_local_datetime(timestamps: pd.Series, tz=None) -> pd.Series:
    """
    エポックミリ秒をローカル時刻に変換

    Parameters
    ----------
    timestamps : pd.Series
        エポックミリ秒
    tz : str or ZoneInfo, optional
        タイムゾーン（Noneの場合はホストのローカル時刻、夏時間対応）
    """
    if tz is not None:
        if isinstance(tz, str):
            tz = ZoneInfo(tz)
        return pd.to_datetime(timestamps, unit='ms', utc=True).dt.tz_convert(tz)

    local = timestamps.map(lambda ms: dt.datetime.fromtimestamp(ms / 1000))
    return pd.to_datetime(local)


def add_day_seconds(samples: pd.DataFrame, tz=None) -> pd.DataFrame:
    """
    ローカル時刻・日付・0時からの秒数の列を追加

    Returns
    -------
    DataFrame
        datetime, date, day_second 列を追加したコピー
    """
    df = samples.copy()
    local = to_local_datetime(df['timestamp'], tz)
    df['datetime'] = local
    df['date'] = local.dt.date
    df['day_second'] = (
        local.dt.hour * 3600 + local.dt.minute * 60 + local.dt.second
    ).astype('int64')
    return df


# =============================================================================
# 時刻帯フィルタ
# =============================================================================

def filter_by_time_of_day(
    samples: pd.DataFrame,
    start_second: Optional[int] = None,
    end_second: Optional[int] = None
) -> pd.DataFrame:
    """
    日付に関係なく、時刻帯でサンプルを絞り込む

    両端を含む。指定しなかった側は絞り込まない。

    Parameters
    ----------
    samples : DataFrame
        day_second 列を持つサンプル
    start_second : int, optional
        開始（0時からの秒数）
    end_second : int, optional
        終了（0時からの秒数）

    Examples
    --------
    >>> # 06:00〜10:00 のみ（10:00:00 は残り、10:00:01 は除外）
    >>> df = filter_by_time_of_day(df, 21600, 36000)
    """
    mask = pd.Series(True, index=samples.index)
    if start_second is not None:
        mask &= samples['day_second'] >= start_second
    if end_second is not None:
        mask &= samples['day_second'] <= end_second
    return samples[mask].reset_index(drop=True)


# =============================================================================
# 平滑化（間引き）
# =============================================================================

def is_gap_exceeded(last_ts, ts, min_gap_seconds) -> bool:
    """直前の採用点から min_gap_seconds 以上経過しているか"""
    return ts - last_ts >= min_gap_seconds * 1000


def is_hr_jump_exceeded(last_hr, hr, threshold=HR_CHANGE_THRESHOLD) -> bool:
    """直前の採用点から心拍数が threshold を超えて変化しているか"""
    return abs(hr - last_hr) > threshold


# いずれかを満たせば点を残す
SMOOTHING_RULES = (
    lambda last, cur, gap: is_gap_exceeded(last[0], cur[0], gap),
    lambda last, cur, gap: is_hr_jump_exceeded(last[1], cur[1]),
)


def smooth(samples: pd.DataFrame, min_gap_seconds: int) -> pd.DataFrame:
    """
    冗長な点を間引く（貪欲法、1パス）

    先頭の点は必ず残す。以降の点は、直前に残した点と比べて
    min_gap_seconds 以上離れているか、心拍数が HR_CHANGE_THRESHOLD を
    超えて変化していれば残す。

    Parameters
    ----------
    samples : DataFrame
        タイムスタンプ順のサンプル
    min_gap_seconds : int
        最小間隔（秒）

    Returns
    -------
    DataFrame
        間引き後のサンプル（入力の部分列、順序は保持）
    """
    if min_gap_seconds < 0:
        raise ValueError(f"min_gap_seconds must not be negative, got {min_gap_seconds}")
    if samples.empty:
        return samples.copy()

    timestamps = samples['timestamp'].to_numpy()
    heart_rates = samples['hr'].to_numpy()

    keep = np.zeros(len(samples), dtype=bool)
    keep[0] = True
    last = (timestamps[0], heart_rates[0])
    for i in range(1, len(samples)):
        cur = (timestamps[i], heart_rates[i])
        if any(rule(last, cur, min_gap_seconds) for rule in SMOOTHING_RULES):
            keep[i] = True
            last = cur

    logger.debug(f"平滑化: {len(samples)}件 -> {int(keep.sum())}件")
    return samples[keep].reset_index(drop=True)


# =============================================================================
# 日別分割・軸範囲
# =============================================================================

def partition_by_day(samples: pd.DataFrame) -> list[DayBucket]:
    """
    ローカル日付ごとに分割

    日付は最初に現れた順に並ぶ（入力がソート済みなら日付順）。
    各日のサンプルは入力の順序を保つ。
    """
    buckets = []
    for day, df_day in samples.groupby('date', sort=False):
        buckets.append(DayBucket(date=day, samples=df_day.reset_index(drop=True)))
    return buckets


def compute_bounds(samples: pd.DataFrame) -> Bounds:
    """
    全サンプルの時刻・心拍数の最小値と最大値

    Raises
    ------
    EmptyInput
        サンプルが0件の場合
    """
    if samples.empty:
        raise EmptyInput('No heart rate samples left to plot')

    return Bounds(
        min_day_second=int(samples['day_second'].min()),
        max_day_second=int(samples['day_second'].max()),
        min_hr=int(samples['hr'].min()),
        max_hr=int(samples['hr'].max()),
    )


def process_samples(
    frames,
    tz=None,
    start_second: Optional[int] = None,
    end_second: Optional[int] = None,
    smooth_seconds: Optional[int] = None
) -> pd.DataFrame:
    """
    結合 → 時刻付与 → 時刻帯フィルタ → 平滑化 をまとめて実行

    Parameters
    ----------
    frames : list of DataFrame
        ファイルごとのサンプル
    tz : str, optional
        ローカル時刻のタイムゾーン
    start_second, end_second : int, optional
        時刻帯（0時からの秒数、両端を含む）
    smooth_seconds : int, optional
        平滑化の最小間隔（Noneの場合は平滑化しない）

    Returns
    -------
    DataFrame
        処理済みのサンプル
    """
    df = aggregate(frames)
    logger.info(f"結合: {len(df)}件")

    df = add_day_seconds(df, tz)

    if start_second is not None or end_second is not None:
        df = filter_by_time_of_day(df, start_second, end_second)
        logger.info(f"時刻帯フィルタ後: {len(df)}件")

    if smooth_seconds is not None:
        df = smooth(df, smooth_seconds)
        logger.info(f"平滑化後: {len(df)}件")

    return df


# =============================================================================
# 可視化
# =============================================================================

def _padded(low, high, pad):
    # 最小と最大が同じだと軸範囲が潰れる
    if low == high:
        return low - pad, high + pad
    return low, high


def plot_day_chart(bucket: DayBucket, bounds: Bounds, width: int, height: int):
    """
    1日分の心拍数の折れ線グラフ

    軸範囲は全日共通の bounds を使う。

    Args:
        bucket: 1日分のサンプル
        bounds: 全日共通の軸範囲
        width: 幅（px）
        height: 高さ（px）

    Returns:
        fig, ax
    """
    df = bucket.samples

    fig, ax = plt.subplots(figsize=(width / CHART_DPI, height / CHART_DPI), dpi=CHART_DPI)
    ax.plot(df['day_second'], df['hr'], color=LINE_COLOR, linewidth=1)

    ax.set_xlim(*_padded(bounds.min_day_second, bounds.max_day_second, 60))
    ax.set_ylim(*_padded(bounds.min_hr, bounds.max_hr, 1))
    ax.xaxis.set_major_formatter(mticker.FuncFormatter(lambda x, _: format_day_second(x)))
    ax.set_ylabel('bpm')
    ax.grid(True, alpha=0.3)
    fig.tight_layout()

    return fig, ax
