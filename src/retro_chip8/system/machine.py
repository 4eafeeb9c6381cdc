# retro_chip8/system/machine.py
"""
CHIP-8 仮想マシン

メモリ、レジスタ、タイマー、ディスプレイ、入力の全コンポーネントを生成・所有し、
ホストループに対してload / step / tick / reset と読み書きアクセサを提供します。
"""
import logging
import random
from typing import Dict, List, Optional

from retro_chip8.common.errors import SourceUnavailable
from retro_chip8.common.types import DisplayFrame, DisassemblyLine, RegisterLayoutInfo
from retro_chip8.core.snapshot import Snapshot
from retro_chip8.transport.bus import Bus, RAM
from retro_chip8.arch.chip8.cpu import Chip8Cpu
from retro_chip8.arch.chip8.display import DisplayBuffer
from retro_chip8.arch.chip8.font import FONT_BASE, FONT_SET
from retro_chip8.arch.chip8.keypad import Keypad
from retro_chip8.arch.chip8.state import Chip8CpuState, MEMORY_SIZE, PROGRAM_START
from retro_chip8.arch.chip8.timers import TimerUnit
from retro_chip8.loader.loader import RomLoader, PathLike, validate_image

logger = logging.getLogger(__name__)

# @intent:responsibility CHIP-8仮想マシン全体を表すファサードです。全エンティティを排他的に所有します。
class Chip8Machine:
    """
    CHIP-8仮想マシン。

    ホストは固定レートのフレームごとにstep()をN回、tick()を1回呼び出します。
    step()は同期的に完了し、Fx0Aのキー待ちでもブロックせずに制御を返します。
    """
    def __init__(self, rng: Optional[random.Random] = None, strict: bool = False):
        self._ram = RAM(MEMORY_SIZE)
        self._bus = Bus()
        self._bus.register_device(0x0000, MEMORY_SIZE - 1, self._ram)
        self._display = DisplayBuffer()
        self._keypad = Keypad()
        self._timers = TimerUnit()
        self._cpu = Chip8Cpu(self._bus, self._display, self._keypad, self._timers, rng=rng, strict=strict)
        self._loader = RomLoader()
        self._image: Optional[bytes] = None
        self._source: Optional[str] = None
        self.reset()

    # --- ライフサイクル ---
    # @intent:responsibility 全コンポーネントを初期状態に戻し、フォントを再ロードします。冪等であり、実行中でも呼び出せます。
    def reset(self) -> None:
        self._bus.clear()
        self._bus.load(FONT_BASE, FONT_SET)
        self._cpu.reset()
        self._display.reset()
        self._keypad.reset()
        self._timers.reset()

    # @intent:responsibility プログラムイメージを0x200にロードします。
    # @intent:pre-condition イメージが3584バイトを超える場合はImageTooLargeを送出し、現在の状態を一切変更しません。
    def load(self, image: bytes) -> None:
        data = bytes(image)
        try:
            validate_image(data)
        except ValueError:
            logger.warning("Rejected program image of %d bytes", len(data))
            raise
        self.reset()
        self._bus.load(PROGRAM_START, data)
        self._image = data
        logger.info("Loaded %d byte program at %#05x", len(data), PROGRAM_START)

    # @intent:responsibility ファイルからプログラムを読み込んでロードします。読み込み失敗はSourceUnavailableとして送出されます。
    def load_file(self, file_path: PathLike) -> None:
        image = self._loader.read_image(file_path)
        self.load(image)
        self._source = str(file_path)

    # @intent:responsibility 最後にロードしたプログラムを先頭から再実行できる状態に戻します。
    def reload(self) -> None:
        if self._image is None:
            raise SourceUnavailable(self._source, "no program has been loaded")
        self.load(self._image)

    @property
    def source(self) -> Optional[str]:
        return self._source

    @property
    def has_program(self) -> bool:
        return self._image is not None

    # --- 実行 ---
    # @intent:responsibility 1命令を実行し、その結果のSnapshotを返します。
    def step(self) -> Snapshot:
        return self._cpu.step()

    # @intent:responsibility 固定レートのタイマーティックを1回進めます。
    def tick(self) -> None:
        self._timers.tick()

    # --- アクセサ ---
    @property
    def cpu(self) -> Chip8Cpu:
        return self._cpu

    @property
    def bus(self) -> Bus:
        return self._bus

    @property
    def timers(self) -> TimerUnit:
        return self._timers

    def get_state(self) -> Chip8CpuState:
        return self._cpu.get_state()

    # @intent:responsibility フレームバッファの不変コピーを返します。レンダラは内部状態を変更できません。
    def get_display(self) -> DisplayFrame:
        return self._display.snapshot()

    @property
    def display_changed(self) -> bool:
        return self._display.changed

    def acknowledge_display(self) -> None:
        self._display.acknowledge()

    @property
    def sound_active(self) -> bool:
        return self._timers.sound_active

    def set_key(self, key: int, pressed: bool) -> None:
        self._keypad.set_key(key, pressed)

    def press_key(self, key: int) -> None:
        self._keypad.press(key)

    def release_key(self, key: int) -> None:
        self._keypad.release(key)

    def is_key_pressed(self, key: int) -> bool:
        return self._keypad.is_pressed(key)

    # @intent:responsibility ログを記録せずにメモリを読み出します。
    def peek(self, address: int) -> int:
        return self._bus.peek(address)

    def seed_random(self, seed: Optional[int]) -> None:
        self._cpu.seed_random(seed)

    def get_register_map(self) -> Dict[str, int]:
        return self._cpu.get_register_map()

    def get_register_layout(self) -> List[RegisterLayoutInfo]:
        return self._cpu.get_register_layout()

    def get_flag_state(self) -> Dict[str, bool]:
        return self._cpu.get_flag_state()

    def disassemble(self, start_addr: int, length: int) -> List[DisassemblyLine]:
        return self._cpu.disassemble(start_addr, length)
