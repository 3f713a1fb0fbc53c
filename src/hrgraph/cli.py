#!/usr/bin/env python
# coding: utf-8
"""
心拍数グラフ生成スクリプト

TCXファイル・心拍数キャッシュを読み込み、日ごとの心拍数グラフを
1つのHTMLにまとめて出力する。

Usage:
    # 標準出力へHTMLを出力
    hrgraph activity1.tcx activity2.tcx

    # ファイルに保存し、キャッシュも書き出す
    hrgraph --output hr.html --cache hr.json data/*.tcx

    # 朝6時〜10時のみ、30秒間隔に間引く
    hrgraph --start-time 06:00 --end-time 10:00 --smooth 30 hr.json
"""

import argparse
import logging
import sys
from pathlib import Path
from zoneinfo import ZoneInfoNotFoundError

import matplotlib
matplotlib.use("Agg")

from . import config
from .analytics.heart_rate import compute_bounds, partition_by_day, process_samples
from .errors import HrGraphError
from .parsers.hr_cache import write_cache
from .parsers.loader import load_files
from .templates.renderer import HeartRateReportRenderer
from .utils.time_spec import parse_time_spec

logger = logging.getLogger(__name__)


def create_parser():
    """コマンドライン引数のパーサーを作成"""
    parser = argparse.ArgumentParser(
        prog='hrgraph',
        description='心拍数データ（TCX / JSONキャッシュ）から日別グラフのHTMLを生成',
    )

    parser.add_argument('files', nargs='*', type=Path, help='入力ファイル（TCX または JSONキャッシュ）')
    parser.add_argument(
        '--output',
        type=Path,
        default=None,
        help='HTMLの出力先（デフォルト: 標準出力）'
    )
    parser.add_argument(
        '--cache',
        type=Path,
        default=None,
        help='処理済みサンプルをJSONキャッシュとして保存'
    )
    parser.add_argument(
        '--title',
        type=str,
        default=config.DEFAULT_TITLE,
        help=f'文書タイトル（デフォルト: {config.DEFAULT_TITLE}）'
    )
    parser.add_argument(
        '--smooth',
        type=int,
        default=None,
        metavar='SECONDS',
        help='指定秒数より間隔の短い点を間引く（心拍数が大きく変化した点は残す）'
    )
    parser.add_argument(
        '--start-time',
        type=str,
        default=None,
        metavar='HH:MM[:SS]',
        help='この時刻より前のサンプルを除外'
    )
    parser.add_argument(
        '--end-time',
        type=str,
        default=None,
        metavar='HH:MM[:SS]',
        help='この時刻より後のサンプルを除外'
    )
    parser.add_argument(
        '--width',
        type=int,
        default=config.DEFAULT_WIDTH,
        help=f'グラフの幅（px、デフォルト: {config.DEFAULT_WIDTH}）'
    )
    parser.add_argument(
        '--height',
        type=int,
        default=config.DEFAULT_HEIGHT,
        help=f'グラフの高さ（px、デフォルト: {config.DEFAULT_HEIGHT}）'
    )
    parser.add_argument(
        '--tz',
        type=str,
        default=config.get_default_timezone(),
        help='日付・時刻の判定に使うタイムゾーン（例: Asia/Tokyo、デフォルト: $HRGRAPH_TZ またはローカル時刻）'
    )
    parser.add_argument(
        '--workers',
        type=int,
        default=None,
        help='ファイル読み込みの並列数（デフォルト: $HRGRAPH_WORKERS または自動）'
    )
    parser.add_argument('--verbose', '-v', action='store_true', help='詳細ログを出力')
    parser.add_argument('--quiet', '-q', action='store_true', help='警告以上のみ出力')

    return parser


def setup_logging(verbose=False, quiet=False):
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = logging.INFO
    logging.basicConfig(level=level, format='%(asctime)s - %(levelname)s - %(message)s')


def run(args):
    """
    読み込み → 前処理 → 日別分割 → キャッシュ保存 → HTML出力

    いずれかの段階で失敗した場合はファイルを一切書き出さない。
    """
    start_second = parse_time_spec(args.start_time) if args.start_time is not None else None
    end_second = parse_time_spec(args.end_time) if args.end_time is not None else None

    frames = load_files(args.files, max_workers=args.workers or config.get_max_workers())
    samples = process_samples(
        frames,
        tz=args.tz,
        start_second=start_second,
        end_second=end_second,
        smooth_seconds=args.smooth,
    )

    bounds = compute_bounds(samples)
    buckets = partition_by_day(samples)
    logger.info(f"日別分割: {len(buckets)}日分")

    renderer = HeartRateReportRenderer()
    html = renderer.render_report(buckets, bounds, args.title, args.width, args.height)

    if args.cache:
        write_cache(samples, args.cache)

    if args.output:
        args.output.write_text(html, encoding='utf-8')
        logger.info(f"保存しました: {args.output}")
    else:
        sys.stdout.write(html)


def main(argv=None):
    """メインエントリポイント"""
    parser = create_parser()
    args = parser.parse_args(argv)

    if not args.files:
        parser.print_help()
        return 0

    setup_logging(args.verbose, args.quiet)

    try:
        run(args)
    except HrGraphError as e:
        logger.error(str(e))
        return 1
    except ZoneInfoNotFoundError:
        logger.error(f"Unknown time zone: {args.tz}")
        return 1
    except OSError as e:
        logger.error(f"File Error: {e}")
        return 1
    except ValueError as e:
        logger.error(f"Invalid argument: {e}")
        return 1

    return 0


if __name__ == '__main__':
    sys.exit(main())
