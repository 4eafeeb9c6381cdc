# src/retro_chip8/arch/chip8/keypad.py
"""
16キーの入力状態。

ホストが書き込み、エンジンは読み取るのみです。
ホストのI/Oスレッドとエミュレーションスレッドが分かれても整合するよう、ロックで保護します。
"""
import threading
from typing import List, Optional, Tuple

KEY_COUNT = 16

# @intent:responsibility キー0x0-0xFの押下状態を保持します。バッファリングやチャタリング除去は行いません。
class Keypad:
    def __init__(self):
        self._lock = threading.Lock()
        self._keys: List[bool] = [False] * KEY_COUNT

    @staticmethod
    def _check_index(key: int) -> None:
        if not 0 <= key < KEY_COUNT:
            raise ValueError(f"Key index {key} is outside 0x0-0xF.")

    def set_key(self, key: int, pressed: bool) -> None:
        self._check_index(key)
        with self._lock:
            self._keys[key] = bool(pressed)

    def press(self, key: int) -> None:
        self.set_key(key, True)

    def release(self, key: int) -> None:
        self.set_key(key, False)

    # @intent:responsibility 指定キーの押下状態を返します。インデックスは下位4ビットのみ使用します。
    def is_pressed(self, key: int) -> bool:
        with self._lock:
            return self._keys[key & 0x0F]

    # @intent:responsibility 0から15まで走査し、押下中のキーのうち最後に見つかったもの（最大インデックス）を返します。
    # @intent:rationale 最初に見つかったキーではなく最後のキーを返す挙動は、既存プログラムとの互換のため維持しています。
    def scan(self) -> Optional[int]:
        found = None
        with self._lock:
            for key in range(KEY_COUNT):
                if self._keys[key]:
                    found = key
        return found

    def snapshot(self) -> Tuple[bool, ...]:
        with self._lock:
            return tuple(self._keys)

    def reset(self) -> None:
        with self._lock:
            self._keys = [False] * KEY_COUNT
