#!/usr/bin/env python
# coding: utf-8
"""
心拍グラフ生成のエラー定義

パース段階のエラーはすべて処理全体を中断させる（部分出力はしない）。
"""


class HrGraphError(Exception):
    """
    hrgraph の基底例外

    Parameters
    ----------
    message : str
        エラーメッセージ
    source : str or Path, optional
        エラーの発生したファイルのパス
    """

    def __init__(self, message, source=None):
        super().__init__(message)
        self.message = message
        self.source = source

    def __str__(self):
        if self.source is not None:
            return f"{self.source}: {self.message}"
        return self.message


class UnrecognizedFormat(HrGraphError):
    """ファイル内容がTCXにもキャッシュJSONにも該当しない"""


class MalformedMarkup(HrGraphError):
    """TCX（XML）として解析できない"""


class InvalidCache(HrGraphError):
    """キャッシュJSONが不正（datapointsが無い等）"""


class InvalidTimeSpec(HrGraphError):
    """--start-time / --end-time の時刻指定が不正"""


class EmptyInput(HrGraphError):
    """描画対象のサンプルが1件も残らなかった"""
