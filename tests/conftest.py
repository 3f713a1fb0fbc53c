"""
テスト共通フィクスチャ
"""
import json

import matplotlib
matplotlib.use("Agg")

import pandas as pd
import pytest

TCX_NS = 'http://www.garmin.com/xmlschemas/TrainingCenterDatabase/v2'


def make_tcx(trackpoints):
    """
    (time, hr) のリストからTCX文書を作成

    hr が None の Trackpoint には HeartRateBpm を付けない。
    """
    points = []
    for time, hr in trackpoints:
        hr_xml = ''
        if hr is not None:
            hr_xml = f'<HeartRateBpm><Value>{hr}</Value></HeartRateBpm>'
        points.append(f'<Trackpoint><Time>{time}</Time>{hr_xml}</Trackpoint>')

    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        f'<TrainingCenterDatabase xmlns="{TCX_NS}">'
        '<Activities><Activity Sport="Running"><Lap><Track>'
        + ''.join(points) +
        '</Track></Lap></Activity></Activities>'
        '</TrainingCenterDatabase>\n'
    )


def make_cache(datapoints):
    return json.dumps({'datapoints': [{'hr': hr, 'timestamp': ts} for ts, hr in datapoints]})


def epoch_ms(text):
    return int(pd.Timestamp(text).value // 1_000_000)


def make_samples(rows):
    """(timestamp, hr) のリストからサンプルDataFrameを作成"""
    return pd.DataFrame(rows, columns=['timestamp', 'hr']).astype('int64')


@pytest.fixture
def write_file(tmp_path):
    def _write(name, contents):
        path = tmp_path / name
        path.write_text(contents, encoding='utf-8')
        return path
    return _write


@pytest.fixture
def two_day_tcx():
    # 2日間、3点のうち1点は心拍数なし
    return make_tcx([
        ('2024-03-05T07:15:00Z', 62),
        ('2024-03-05T07:16:00Z', None),
        ('2024-03-06T08:00:00Z', 75),
    ])


@pytest.fixture
def third_day_cache():
    return make_cache([
        (epoch_ms('2024-03-07T06:30:00Z'), 58),
        (epoch_ms('2024-03-07T06:45:00Z'), 64),
    ])
