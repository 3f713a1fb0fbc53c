"""
hrgraph 設定値

プロセス全体で共有する定数。起動時に一度だけ読み込まれ、以後変更しない。
"""
import os
from typing import Optional

# =============================================================================
# レポート
# =============================================================================

DEFAULT_TITLE = 'Heart Rate'
DEFAULT_WIDTH = 800   # px
DEFAULT_HEIGHT = 300  # px
CHART_DPI = 100
LINE_COLOR = '#E74C3C'

# 曜日名（date.weekday() の順）
DAY_NAMES = ('Mon', 'Tue', 'Wed', 'Thu', 'Fri', 'Sat', 'Sun')

# =============================================================================
# 平滑化
# =============================================================================

# 直前の採用点からこの値（bpm）を超えて変化した点は間隔に関係なく残す
HR_CHANGE_THRESHOLD = 5

SECONDS_PER_DAY = 24 * 60 * 60


def get_default_timezone() -> Optional[str]:
    """環境変数 HRGRAPH_TZ のタイムゾーン名（未設定ならNone = ホストのローカル時刻）"""
    return os.environ.get('HRGRAPH_TZ') or None


def get_max_workers() -> Optional[int]:
    """環境変数 HRGRAPH_WORKERS のパーススレッド数（未設定ならNone）"""
    value = os.environ.get('HRGRAPH_WORKERS')
    if not value:
        return None
    return max(1, int(value))
