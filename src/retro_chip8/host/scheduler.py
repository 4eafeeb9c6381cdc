# retro_chip8/host/scheduler.py
"""
ホストループ（フレームスケジューラ）

固定レート（通常60Hz）のフレームごとに、仮想マシンのstep()をN回、tick()を1回呼び出します。
Nはエミュレーション速度を決めます。フレームの周期そのものはホスト（QTimerなど）が管理します。
"""
import logging
from typing import Optional

from retro_chip8.common.errors import EngineFault
from retro_chip8.core.snapshot import Snapshot
from retro_chip8.system.machine import Chip8Machine

logger = logging.getLogger(__name__)

# @intent:constant 速度プリセット名から1フレームあたりのステップ数へのマッピング。
SPEED_PRESETS = {
    "slow": 2,
    "normal": 5,
    "fast": 10,
    "fastest": 20,
}
DEFAULT_SPEED = "normal"

# @intent:responsibility 仮想マシンの実行を制御します（フレーム実行、一時停止、速度変更）。
class FrameScheduler:
    """
    フレーム単位で仮想マシンを駆動するスケジューラ。
    EngineFaultが発生した場合は自身を一時停止状態にしてから例外を再送出し、
    停止・リセット・続行の判断をホストに委ねます。
    """
    def __init__(self, machine: Chip8Machine, cycles_per_tick: int = SPEED_PRESETS[DEFAULT_SPEED]):
        self._machine = machine
        self._cycles_per_tick = 0
        self.cycles_per_tick = cycles_per_tick
        self._paused = False
        self._frame_count = 0
        self._last_snapshot: Optional[Snapshot] = None

    @property
    def machine(self) -> Chip8Machine:
        return self._machine

    @property
    def cycles_per_tick(self) -> int:
        return self._cycles_per_tick

    @cycles_per_tick.setter
    def cycles_per_tick(self, value: int) -> None:
        if value < 1:
            raise ValueError(f"cycles_per_tick must be at least 1, got {value}.")
        self._cycles_per_tick = value

    # @intent:responsibility 速度プリセット名でステップ数を設定します。
    def set_speed(self, name: str) -> None:
        key = name.lower()
        if key not in SPEED_PRESETS:
            raise ValueError(f"Unknown speed preset '{name}'. Choose from: {', '.join(SPEED_PRESETS)}")
        self._cycles_per_tick = SPEED_PRESETS[key]
        logger.info("Speed set to %s (%d steps per tick)", key, self._cycles_per_tick)

    @property
    def paused(self) -> bool:
        return self._paused

    def pause(self) -> None:
        if not self._paused:
            self._paused = True
            logger.info("Emulation paused")

    def resume(self) -> None:
        if self._paused:
            self._paused = False
            logger.info("Emulation resumed")

    def toggle_pause(self) -> bool:
        if self._paused:
            self.resume()
        else:
            self.pause()
        return self._paused

    @property
    def frame_count(self) -> int:
        return self._frame_count

    def get_last_snapshot(self) -> Optional[Snapshot]:
        return self._last_snapshot

    # @intent:responsibility 1フレーム分を実行します。step()をcycles_per_tick回呼んだ後、tick()を1回呼びます。
    # @intent:return 実行したステップ数。一時停止中は何もせず0を返します。
    def run_frame(self) -> int:
        if self._paused:
            return 0

        executed = 0
        try:
            for _ in range(self._cycles_per_tick):
                self._last_snapshot = self._machine.step()
                executed += 1
        except EngineFault as e:
            logger.warning("Engine fault after %d steps in frame %d: %s", executed, self._frame_count, e)
            self.pause()
            raise

        self._machine.tick()
        self._frame_count += 1
        return executed

    # @intent:responsibility スケジューラの実行カウンタを初期化し、一時停止を解除します。プログラムのロード・リセット時に使用します。
    def restart(self) -> None:
        self._frame_count = 0
        self._last_snapshot = None
        self._paused = False
