"""
データ分析・計算モジュール

心拍数サンプルの前処理・日別分割・軸範囲計算を提供（データソース非依存）
"""

from .heart_rate import (
    # データクラス
    Bounds,
    DayBucket,
    # 前処理
    aggregate,
    add_day_seconds,
    filter_by_time_of_day,
    process_samples,
    # 平滑化
    SMOOTHING_RULES,
    is_gap_exceeded,
    is_hr_jump_exceeded,
    smooth,
    # 日別分割・軸範囲
    compute_bounds,
    partition_by_day,
    # 可視化
    plot_day_chart,
)

__all__ = [
    'Bounds',
    'DayBucket',
    'aggregate',
    'add_day_seconds',
    'filter_by_time_of_day',
    'process_samples',
    'SMOOTHING_RULES',
    'is_gap_exceeded',
    'is_hr_jump_exceeded',
    'smooth',
    'compute_bounds',
    'partition_by_day',
    'plot_day_chart',
]
