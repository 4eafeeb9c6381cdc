"""
UIフォント管理モジュール。

レジスタ表示とステータスバーで使う等幅フォントを、プラットフォームごとに選択します。
"""
from functools import lru_cache

from PySide6.QtGui import QFontDatabase

PREFERRED_FONTS = ("Consolas", "Menlo", "Monaco", "DejaVu Sans Mono", "Courier New")

# @intent:responsibility 現在のシステムで利用可能な等幅フォントファミリー名を返します。結果はプロセス内でキャッシュします。
# @intent:pre-condition QApplicationが生成済みであること（フォントデータベースの参照に必要）。
@lru_cache(maxsize=1)
def get_monospace_font_family() -> str:
    available_families = set(QFontDatabase.families())
    for font in PREFERRED_FONTS:
        if font in available_families:
            return font
    return QFontDatabase.systemFont(QFontDatabase.FixedFont).family()

# @intent:utility_function ウィジェット全体に等幅フォントを指定するスタイルシート断片を返します。
def monospace_stylesheet(size_pt: int = 10) -> str:
    return f"font-family: '{get_monospace_font_family()}', monospace; font-size: {size_pt}pt;"
