# src/retro_chip8/arch/chip8/timers.py
"""
ディレイタイマーとサウンドタイマー。

ホストが固定レート（通常60Hz）でtick()を呼び出し、各カウンタを1ずつ減算します。
レートの保証はホストの責務であり、このモジュールは関知しません。
"""

# @intent:responsibility 2つの独立した8bitダウンカウンタを管理します。
class TimerUnit:
    def __init__(self):
        self._delay = 0
        self._sound = 0

    @property
    def delay(self) -> int:
        return self._delay

    @delay.setter
    def delay(self, value: int) -> None:
        self._delay = value & 0xFF

    @property
    def sound(self) -> int:
        return self._sound

    @sound.setter
    def sound(self, value: int) -> None:
        self._sound = value & 0xFF

    # @intent:responsibility サウンドカウンタが非ゼロの間Trueを返します。ホストはこれをポーリングして発音を制御します。
    @property
    def sound_active(self) -> bool:
        return self._sound > 0

    # @intent:responsibility 両カウンタを1ずつ減算します。ゼロ未満にはなりません。
    def tick(self) -> None:
        if self._delay > 0:
            self._delay -= 1
        if self._sound > 0:
            self._sound -= 1

    def reset(self) -> None:
        self._delay = 0
        self._sound = 0
