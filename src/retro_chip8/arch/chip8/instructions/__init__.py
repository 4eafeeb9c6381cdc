# src/retro_chip8/arch/chip8/instructions/__init__.py
"""
CHIP-8命令セット実装パッケージ。
"""
from .base import Chip8Operation, ExecutionContext, InstructionKind
from .maps import DECODE_MAP, EXECUTE_MAP

__all__ = [
    "Chip8Operation", "ExecutionContext", "InstructionKind",
    "decode_opcode", "execute_instruction",
]

# @intent:responsibility 16ビットのオペコードをデコードし、命令種別付きのChip8Operationを返します。
def decode_opcode(opcode: int) -> Chip8Operation:
    """
    上位4ビットで命令クラスを選択し、クラスごとのデコーダに委譲します。
    どの形式にも当てはまらない場合、種別UNKNOWNのOperationが返ります。
    """
    opcode &= 0xFFFF
    return DECODE_MAP[opcode >> 12](opcode)

# @intent:responsibility デコードされた命令を実行し、コンテキスト内の各コンポーネントを変更します。
def execute_instruction(operation: Chip8Operation, ctx: ExecutionContext) -> None:
    EXECUTE_MAP[operation.kind](ctx, operation)
