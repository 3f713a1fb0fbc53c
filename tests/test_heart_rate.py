import dataclasses
import datetime as dt

import pandas as pd
import pytest

from conftest import epoch_ms, make_samples
from hrgraph.analytics.heart_rate import (
    Bounds,
    add_day_seconds,
    aggregate,
    compute_bounds,
    filter_by_time_of_day,
    is_gap_exceeded,
    is_hr_jump_exceeded,
    partition_by_day,
    process_samples,
    smooth,
)
from hrgraph.errors import EmptyInput


def pairs(df):
    return list(zip(df['timestamp'].tolist(), df['hr'].tolist()))


# =============================================================================
# 結合
# =============================================================================

def test_aggregate_sorts_by_timestamp():
    df = aggregate([
        make_samples([(3000, 63), (1000, 61)]),
        make_samples([(2000, 62), (4000, 64)]),
    ])
    assert df['timestamp'].is_monotonic_increasing
    assert pairs(df) == [(1000, 61), (2000, 62), (3000, 63), (4000, 64)]


def test_aggregate_is_stable_for_equal_timestamps():
    df = aggregate([
        make_samples([(1000, 70), (1000, 71)]),
        make_samples([(1000, 72), (500, 50)]),
    ])
    assert pairs(df) == [(500, 50), (1000, 70), (1000, 71), (1000, 72)]


def test_aggregate_keeps_duplicates():
    df = aggregate([make_samples([(1000, 60)]), make_samples([(1000, 60)])])
    assert len(df) == 2


def test_aggregate_no_frames():
    df = aggregate([])
    assert df.empty
    assert list(df.columns) == ['timestamp', 'hr']


# =============================================================================
# 時刻付与
# =============================================================================

def test_add_day_seconds_utc():
    df = add_day_seconds(make_samples([(epoch_ms('2024-03-05T07:15:30Z'), 62)]), tz='UTC')
    assert df['day_second'].tolist() == [7 * 3600 + 15 * 60 + 30]
    assert df['date'].tolist() == [dt.date(2024, 3, 5)]


def test_add_day_seconds_crosses_local_midnight():
    df = add_day_seconds(make_samples([(epoch_ms('2024-03-05T23:30:00Z'), 62)]), tz='Asia/Tokyo')
    assert df['date'].tolist() == [dt.date(2024, 3, 6)]
    assert df['day_second'].tolist() == [8 * 3600 + 30 * 60]


def test_add_day_seconds_host_local_time():
    ts = epoch_ms('2024-03-05T12:00:00Z')
    local = dt.datetime.fromtimestamp(ts / 1000)

    df = add_day_seconds(make_samples([(ts, 62)]))

    assert df['date'].tolist() == [local.date()]
    assert df['day_second'].tolist() == [local.hour * 3600 + local.minute * 60 + local.second]


def test_add_day_seconds_range():
    rows = [(epoch_ms('2024-03-05T00:00:00Z') + i * 3_599_000, 60) for i in range(30)]
    df = add_day_seconds(make_samples(rows), tz='Europe/Berlin')
    assert df['day_second'].between(0, 86399).all()


# =============================================================================
# 時刻帯フィルタ
# =============================================================================

def _with_day_seconds(day_seconds):
    df = make_samples([(i * 1000, 60 + i) for i in range(len(day_seconds))])
    df['day_second'] = day_seconds
    return df


def test_filter_by_time_of_day_inclusive_bounds():
    df = _with_day_seconds([21599, 21600, 30000, 36000, 36001])

    result = filter_by_time_of_day(df, 21600, 36000)

    assert result['day_second'].tolist() == [21600, 30000, 36000]


def test_filter_by_time_of_day_start_only():
    df = _with_day_seconds([100, 200, 300])
    assert filter_by_time_of_day(df, start_second=200)['day_second'].tolist() == [200, 300]


def test_filter_by_time_of_day_end_only():
    df = _with_day_seconds([100, 200, 300])
    assert filter_by_time_of_day(df, end_second=200)['day_second'].tolist() == [100, 200]


def test_filter_by_time_of_day_no_bounds():
    df = _with_day_seconds([100, 200, 300])
    assert len(filter_by_time_of_day(df)) == 3


# =============================================================================
# 平滑化
# =============================================================================

def test_is_gap_exceeded():
    assert is_gap_exceeded(0, 30_000, 30)
    assert not is_gap_exceeded(0, 29_999, 30)


def test_is_hr_jump_exceeded():
    assert is_hr_jump_exceeded(60, 66)
    assert is_hr_jump_exceeded(60, 54)
    assert not is_hr_jump_exceeded(60, 65)
    assert not is_hr_jump_exceeded(60, 55)


def test_smooth_by_gap():
    df = make_samples([(i * 10_000, 60) for i in range(7)])
    result = smooth(df, 30)
    assert result['timestamp'].tolist() == [0, 30_000, 60_000]


def test_smooth_keeps_heart_rate_jumps():
    df = make_samples([(0, 60), (1000, 62), (2000, 70), (3000, 71), (4000, 65), (5000, 64)])
    result = smooth(df, 60)
    # 62: 差2で除外、70: 差10で採用、71: 差1で除外、65: 差5で除外、64: 差6で採用
    assert result['hr'].tolist() == [60, 70, 64]


def test_smooth_zero_gap_is_identity():
    df = make_samples([(i * 1000, 60 + (i % 3)) for i in range(20)])
    assert pairs(smooth(df, 0)) == pairs(df)


def test_smooth_keeps_first_and_is_subsequence():
    df = make_samples([(i * 7000, 60 + (i * 13) % 11) for i in range(50)])

    result = smooth(df, 45)

    assert pairs(result)[0] == pairs(df)[0]
    remaining = iter(pairs(df))
    assert all(p in remaining for p in pairs(result))


def test_smooth_again_with_smaller_gap_is_noop():
    df = make_samples([(i * 7000, 60 + (i * 13) % 11) for i in range(50)])
    once = smooth(df, 60)
    assert pairs(smooth(once, 30)) == pairs(once)
    assert pairs(smooth(once, 60)) == pairs(once)


def test_smooth_empty():
    assert smooth(make_samples([]), 30).empty


def test_smooth_negative_gap():
    with pytest.raises(ValueError):
        smooth(make_samples([(0, 60)]), -1)


# =============================================================================
# 日別分割・軸範囲
# =============================================================================

@pytest.fixture
def three_days():
    rows = [
        (epoch_ms('2024-03-05T07:00:00Z'), 60),
        (epoch_ms('2024-03-05T09:00:00Z'), 80),
        (epoch_ms('2024-03-06T06:30:00Z'), 55),
        (epoch_ms('2024-03-07T10:00:00Z'), 90),
        (epoch_ms('2024-03-07T10:05:00Z'), 95),
    ]
    return add_day_seconds(make_samples(rows), tz='UTC')


def test_partition_by_day(three_days):
    buckets = partition_by_day(three_days)

    assert [b.date for b in buckets] == [
        dt.date(2024, 3, 5), dt.date(2024, 3, 6), dt.date(2024, 3, 7),
    ]
    assert [len(b.samples) for b in buckets] == [2, 1, 2]


def test_partition_concatenation_reproduces_input(three_days):
    buckets = partition_by_day(three_days)
    joined = pd.concat([b.samples for b in buckets], ignore_index=True)
    assert pairs(joined) == pairs(three_days)


def test_day_bucket_is_immutable(three_days):
    bucket = partition_by_day(three_days)[0]
    with pytest.raises(dataclasses.FrozenInstanceError):
        bucket.date = dt.date(2024, 1, 1)


def test_partition_empty():
    assert partition_by_day(add_day_seconds(make_samples([]), tz='UTC')) == []


def test_compute_bounds(three_days):
    assert compute_bounds(three_days) == Bounds(
        min_day_second=6 * 3600 + 30 * 60,
        max_day_second=10 * 3600 + 5 * 60,
        min_hr=55,
        max_hr=95,
    )


def test_compute_bounds_empty():
    with pytest.raises(EmptyInput):
        compute_bounds(add_day_seconds(make_samples([]), tz='UTC'))


# =============================================================================
# まとめて実行
# =============================================================================

def test_process_samples():
    frames = [
        make_samples([
            (epoch_ms('2024-03-05T05:59:59Z'), 60),
            (epoch_ms('2024-03-05T06:00:00Z'), 61),
            (epoch_ms('2024-03-05T06:00:10Z'), 62),
            (epoch_ms('2024-03-05T06:00:20Z'), 75),
        ]),
        make_samples([
            (epoch_ms('2024-03-06T10:00:00Z'), 70),
            (epoch_ms('2024-03-06T10:00:01Z'), 70),
        ]),
    ]

    df = process_samples(frames, tz='UTC', start_second=21600, end_second=36000, smooth_seconds=30)

    # 05:59:59 と 10:00:01 は時刻帯外、06:00:10 は平滑化で除外
    assert df['hr'].tolist() == [61, 75, 70]
    assert df['day_second'].tolist() == [21600, 21620, 36000]


def test_process_samples_without_options():
    df = process_samples([make_samples([(2000, 61), (1000, 60)])], tz='UTC')
    assert pairs(df) == [(1000, 60), (2000, 61)]
