# src/retro_chip8/arch/chip8/state.py
"""
CHIP-8 CPU固有の状態定義。
"""
from dataclasses import dataclass, field
from typing import List

from retro_chip8.core.state import CpuState

# @intent:constant メモリマップとレジスタファイルの寸法。
MEMORY_SIZE = 0x1000
ADDRESS_MASK = 0x0FFF
PROGRAM_START = 0x200
REGISTER_COUNT = 16
STACK_DEPTH = 16

# @intent:responsibility CHIP-8のレジスタファイル（V0-VF, I, PC）とコールスタック（16段 + SP）を保持します。
@dataclass
class Chip8CpuState(CpuState):
    """
    CHIP-8 CPUのレジスタ状態を保持するデータクラス。
    VFは加算・減算・シフト・描画命令によってフラグとして上書きされます。
    """
    pc: int = PROGRAM_START
    v: List[int] = field(default_factory=lambda: [0] * REGISTER_COUNT)
    i: int = 0x0000 # Index Register
    stack: List[int] = field(default_factory=lambda: [0] * STACK_DEPTH)

    # @intent:accessor フラグレジスタとして扱うVFへのアクセスを提供します。
    @property
    def vf(self) -> int:
        return self.v[0xF]

    @vf.setter
    def vf(self, value: int) -> None:
        self.v[0xF] = value & 0xFF

    # @intent:responsibility 戻りアドレスをプッシュします。
    # @intent:pre-condition 呼び出し側でSPがSTACK_DEPTH未満であることを確認済みであること。
    def push(self, address: int) -> None:
        self.stack[self.sp] = address & 0xFFFF
        self.sp += 1

    # @intent:responsibility 戻りアドレスをポップします。
    # @intent:pre-condition 呼び出し側でSPが0より大きいことを確認済みであること。
    def pop(self) -> int:
        self.sp -= 1
        return self.stack[self.sp]
