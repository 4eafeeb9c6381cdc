# retro_chip8/core/state.py
"""
Core Layer (レジスタ状態の基底)

命令サイクルが共通に扱うPC/SPだけを定義します。
CHIP-8固有のレジスタファイルはarch/chip8/state.pyで追加されます。
"""
import copy
from dataclasses import dataclass

# @intent:responsibility 命令サイクルの駆動に必要な最小限のレジスタ（PC, SP）を保持します。
@dataclass
class CpuState:
    pc: int = 0x0000
    sp: int = 0x0000

    # @intent:responsibility Snapshotに格納するための独立したコピーを返します。リスト型のレジスタも複製されます。
    def clone(self) -> "CpuState":
        return copy.deepcopy(self)
