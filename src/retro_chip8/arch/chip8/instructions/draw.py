# src/retro_chip8/arch/chip8/instructions/draw.py
"""
画面操作命令（消去、スプライト描画）の実装。
"""
from .base import (
    Chip8Operation, ExecutionContext, InstructionKind,
    make_operation, mem_addr, reg_x, reg_y,
)

# @intent:responsibility CLS命令を実行します。全ピクセルを消去し、changedフラグを立てます。
def execute_cls(ctx: ExecutionContext, op: Chip8Operation) -> None:
    ctx.display.clear()

# --- Dxyn ---
def decode_drw(opcode: int) -> Chip8Operation:
    return make_operation(opcode, InstructionKind.DRW, "DRW", reg_x(opcode), reg_y(opcode), str(opcode & 0xF))

# @intent:responsibility DRW Vx, Vy, n を実行します。I以降のnバイトをスプライトとしてXOR描画し、衝突の有無をVFに格納します。
def execute_drw(ctx: ExecutionContext, op: Chip8Operation) -> None:
    state = ctx.state
    rows = [ctx.bus.read(mem_addr(state.i + row)) for row in range(op.n)]
    collision = ctx.display.draw_sprite(state.v[op.x], state.v[op.y], rows)
    state.vf = 1 if collision else 0
