#!/usr/bin/env python
# coding: utf-8
"""
テンプレートレンダリングパッケージ

Jinja2を使用したHTMLレポート生成機能を提供
"""

from .renderer import HeartRateReportRenderer

__all__ = ['HeartRateReportRenderer']
