# src/retro_chip8/ui/keymap.py
"""
ホストのキーイベントをCHIP-8のキーインデックス (0x0-0xF) に変換する入力マッパー。
"""
from typing import Dict, Mapping, Optional

from PySide6.QtCore import Qt

# @intent:utility_function 設定ファイル上のキー名 ("Q", "1", "Up" など) をQtのキーコードに解決します。
def resolve_key_name(name: str) -> int:
    text = name.strip()
    candidates = [text.upper()] if len(text) == 1 else [text, text.capitalize()]
    for candidate in candidates:
        member = getattr(Qt.Key, f"Key_{candidate}", None)
        if member is not None:
            return member.value
    # "PAGEUP" や "pageup" のように大文字小文字が異なる複数語の名前
    wanted = f"key_{text}".lower()
    for member_name, member in Qt.Key.__members__.items():
        if member_name.lower() == wanted:
            return member.value
    raise ValueError(f"Unknown key name '{name}'.")

# @intent:responsibility Qtのキーコードから CHIP-8 キーへの変換テーブルを保持します。
class KeyMapper:
    def __init__(self, key_map: Mapping[str, int]):
        self._table: Dict[int, int] = {
            resolve_key_name(name): chip8_key for name, chip8_key in key_map.items()
        }

    # @intent:responsibility Qtのキーコードに対応するCHIP-8キーを返します。割り当てがない場合はNone。
    def lookup(self, qt_key: int) -> Optional[int]:
        return self._table.get(int(qt_key))

    def __len__(self) -> int:
        return len(self._table)
