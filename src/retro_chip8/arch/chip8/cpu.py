# src/retro_chip8/arch/chip8/cpu.py
"""
CHIP-8 CPUエミュレーションの中心モジュール。
"""
import random
from typing import Dict, List, Optional

from retro_chip8.common.types import RegisterLayoutInfo, RegisterInfo, DisassemblyLine
from retro_chip8.core.cpu import AbstractCpu
from retro_chip8.core.snapshot import Operation, Metadata
from retro_chip8.transport.bus import Bus
from retro_chip8.arch.chip8.state import Chip8CpuState, REGISTER_COUNT
from retro_chip8.arch.chip8.display import DisplayBuffer
from retro_chip8.arch.chip8.keypad import Keypad
from retro_chip8.arch.chip8.timers import TimerUnit
from retro_chip8.arch.chip8.instructions import (
    Chip8Operation, ExecutionContext, InstructionKind, decode_opcode, execute_instruction,
)
from retro_chip8.arch.chip8.instructions.base import read_word
from retro_chip8.arch.chip8 import disassembler

# @intent:responsibility CHIP-8 CPUの具体的なエミュレーションロジック（フェッチ、デコード、実行）を提供します。
class Chip8Cpu(AbstractCpu):
    """
    CHIP-8 CPUをエミュレートするクラス。
    レジスタファイルに加え、描画・入力・タイマーの各コンポーネントを命令実行時に操作します。

    乱数生成器(RND命令用)はこのCPUが所有し、インスタンスの生存期間を通じて再利用されます。
    rngを渡さない場合はOSのエントロピーで初期化され、seed_random()で決定的な系列に切り替えられます。
    """
    def __init__(self, bus: Bus, display: DisplayBuffer, keypad: Keypad, timers: TimerUnit,
                 rng: Optional[random.Random] = None, strict: bool = False):
        self._display = display
        self._keypad = keypad
        self._timers = timers
        self._rng = rng if rng is not None else random.Random()
        self._strict = strict
        super().__init__(bus)

    def _create_initial_state(self) -> Chip8CpuState:
        return Chip8CpuState()

    @property
    def strict(self) -> bool:
        return self._strict

    @strict.setter
    def strict(self, value: bool) -> None:
        self._strict = bool(value)

    # @intent:responsibility RND命令の乱数生成器を再シードします。テストで決定的な系列を得るためのフックです。
    def seed_random(self, seed: Optional[int]) -> None:
        self._rng.seed(seed)

    # @intent:responsibility PCからビッグエンディアンで2バイトのオペコードをフェッチします。
    def _fetch(self) -> int:
        return read_word(self._bus, self._state.pc)

    def _decode(self, opcode: int) -> Operation:
        return decode_opcode(opcode)

    # @intent:responsibility Operationを実行し、状態を更新します。
    def _execute(self, operation: Operation) -> None:
        ctx = ExecutionContext(
            state=self._state,
            bus=self._bus,
            display=self._display,
            keypad=self._keypad,
            timers=self._timers,
            rng=self._rng,
            strict=self._strict,
        )
        execute_instruction(operation, ctx)

    # @intent:responsibility Fx0AでPCが巻き戻された（キー入力待ちの）場合、それをメタデータに記録します。
    def _create_metadata(self, pc_before: int, operation: Operation) -> Metadata:
        waiting = (
            isinstance(operation, Chip8Operation)
            and operation.kind is InstructionKind.LD_VX_K
            and self._state.pc == pc_before
        )
        return Metadata(cycle_count=self._cycle_count, waiting_for_key=waiting)

    # @intent:responsibility UI表示用に、現在のレジスタ値を辞書形式で提供します。
    def get_register_map(self) -> Dict[str, int]:
        s = self._state
        registers = {f"V{index:X}": s.v[index] for index in range(REGISTER_COUNT)}
        registers.update({
            "I": s.i, "PC": s.pc, "SP": s.sp,
            "DT": self._timers.delay, "ST": self._timers.sound,
        })
        return registers

    # @intent:responsibility UIのレジスタ表示レイアウト（グループ化）を定義します。
    def get_register_layout(self) -> List[RegisterLayoutInfo]:
        return [
            RegisterLayoutInfo("General", [
                RegisterInfo(f"V{index:X}", 8) for index in range(REGISTER_COUNT)
            ]),
            RegisterLayoutInfo("Index/Pointers", [
                RegisterInfo("I", 16), RegisterInfo("PC", 16), RegisterInfo("SP", 8)
            ]),
            RegisterLayoutInfo("Timers", [
                RegisterInfo("DT", 8), RegisterInfo("ST", 8)
            ]),
        ]

    # @intent:responsibility UI表示用に、フラグとして扱われる状態を辞書形式で提供します。
    def get_flag_state(self) -> Dict[str, bool]:
        return {
            "VF": self._state.vf != 0,
            "SOUND": self._timers.sound_active,
            "DRAW": self._display.changed,
        }

    # @intent:responsibility 指定範囲のメモリを逆アセンブルします。
    def disassemble(self, start_addr: int, length: int) -> List[DisassemblyLine]:
        return disassembler.disassemble(self._bus, start_addr, length)
