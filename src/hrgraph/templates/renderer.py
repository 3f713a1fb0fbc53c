#!/usr/bin/env python
# coding: utf-8
"""
心拍数レポートレンダラー

日ごとのグラフをSVGで埋め込んだ単一のHTMLを、Jinja2を使用して生成
"""

import io
import logging
from pathlib import Path

import matplotlib.pyplot as plt
from jinja2 import Environment, FileSystemLoader, select_autoescape
from markupsafe import Markup

from ..analytics.heart_rate import plot_day_chart

logger = logging.getLogger(__name__)


def figure_to_svg(fig) -> str:
    """matplotlibのFigureをインラインSVG文字列に変換（Figureは閉じる）"""
    buf = io.StringIO()
    try:
        fig.savefig(buf, format='svg')
    finally:
        plt.close(fig)
    svg = buf.getvalue()
    # XML宣言・DOCTYPEを除いて<svg>要素だけを埋め込む
    return svg[svg.index('<svg'):]


class HeartRateReportRenderer:
    """心拍数レポートのテンプレートレンダラー"""

    def __init__(self, template_dir=None):
        """
        Parameters
        ----------
        template_dir : str or Path, optional
            テンプレートディレクトリのパス
            Noneの場合はパッケージ内のhtml/を使用
        """
        if template_dir is None:
            template_dir = Path(__file__).resolve().parent / 'html'

        self.env = Environment(
            loader=FileSystemLoader(str(template_dir)),
            autoescape=select_autoescape(['html', 'html.j2']),
            trim_blocks=True,
            lstrip_blocks=True
        )

        self._register_filters()

    def _register_filters(self):
        """カスタムフィルタをJinja2環境に登録"""
        from .filters import day_heading, time_of_day

        self.env.filters['day_heading'] = day_heading
        self.env.filters['time_of_day'] = time_of_day

    def build_context(self, buckets, bounds, title, width, height):
        """
        テンプレートコンテキストを作成

        Parameters
        ----------
        buckets : list of DayBucket
            日別のサンプル
        bounds : Bounds
            全日共通の軸範囲
        title : str
            文書タイトル
        width, height : int
            グラフのサイズ（px）

        Returns
        -------
        dict
            title, bounds, days（date, svg）
        """
        days = []
        for bucket in buckets:
            fig, _ = plot_day_chart(bucket, bounds, width, height)
            days.append({
                'date': bucket.date,
                'svg': Markup(figure_to_svg(fig)),
            })
            logger.debug(f"グラフ作成: {bucket.date} ({len(bucket.samples)}件)")

        return {
            'title': title,
            'bounds': bounds,
            'days': days,
        }

    def render_report(self, buckets, bounds, title, width, height):
        """
        心拍数レポートを生成

        Returns
        -------
        str
            レンダリングされたHTML

        Raises
        ------
        jinja2.TemplateNotFound
            テンプレートファイルが見つからない場合
        jinja2.TemplateSyntaxError
            テンプレート構文エラーがある場合
        """
        context = self.build_context(buckets, bounds, title, width, height)
        try:
            template = self.env.get_template('report.html.j2')
            return template.render(**context)
        except Exception as e:
            logger.error(f"Template rendering failed: {e}")
            raise
