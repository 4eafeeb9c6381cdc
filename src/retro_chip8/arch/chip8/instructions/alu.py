# src/retro_chip8/arch/chip8/instructions/alu.py
"""
算術論理演算命令の実装。

フラグと結果はどちらも演算前の値から計算します。
ADDだけは結果をVxに書き込んだ後でVFに格納し、SUB/SUBN/SHR/SHLはVFを先に、結果を後に書き込みます。
そのためVxがVFの場合、ADDではフラグが、それ以外では演算結果がVFに残ります。
"""
from .base import (
    Chip8Operation, ExecutionContext, InstructionKind,
    make_operation, decode_unknown, reg_x, reg_y,
)

# @intent:utility_function 演算結果をVxに書き込み、その後フラグをVFに格納します。ADD Vx, Vy 専用です。
def store_then_flag(ctx: ExecutionContext, x: int, result: int, flag: bool) -> None:
    ctx.state.v[x] = result & 0xFF
    ctx.state.vf = 1 if flag else 0

# @intent:utility_function フラグをVFに格納し、その後演算結果をVxに書き込みます。
def flag_then_store(ctx: ExecutionContext, x: int, result: int, flag: bool) -> None:
    ctx.state.vf = 1 if flag else 0
    ctx.state.v[x] = result & 0xFF

# --- 7xnn ---
def decode_add_byte(opcode: int) -> Chip8Operation:
    return make_operation(opcode, InstructionKind.ADD_BYTE, "ADD", reg_x(opcode), f"${opcode & 0xFF:02X}")

# @intent:responsibility ADD Vx, nn を実行します。桁あふれは無視し、VFは変更しません。
def execute_add_byte(ctx: ExecutionContext, op: Chip8Operation) -> None:
    ctx.state.v[op.x] = (ctx.state.v[op.x] + op.nn) & 0xFF

# --- 8xyN グループ ---
# @intent:map 8xyNの下位4ビットから (命令種別, ニーモニック) へのマッピングテーブル。
ALU_DECODE_MAP = {
    0x0: (InstructionKind.LD_REG, "LD"),
    0x1: (InstructionKind.OR, "OR"),
    0x2: (InstructionKind.AND, "AND"),
    0x3: (InstructionKind.XOR, "XOR"),
    0x4: (InstructionKind.ADD_REG, "ADD"),
    0x5: (InstructionKind.SUB, "SUB"),
    0x6: (InstructionKind.SHR, "SHR"),
    0x7: (InstructionKind.SUBN, "SUBN"),
    0xE: (InstructionKind.SHL, "SHL"),
}

# @intent:responsibility 8xyNグループをデコードします。シフト命令はVyを使用しないためオペランドはVxのみです。
def decode_alu_group(opcode: int) -> Chip8Operation:
    entry = ALU_DECODE_MAP.get(opcode & 0x000F)
    if entry is None:
        return decode_unknown(opcode)
    kind, mnemonic = entry
    if kind in (InstructionKind.SHR, InstructionKind.SHL):
        return make_operation(opcode, kind, mnemonic, reg_x(opcode))
    return make_operation(opcode, kind, mnemonic, reg_x(opcode), reg_y(opcode))

def execute_ld_reg(ctx: ExecutionContext, op: Chip8Operation) -> None:
    ctx.state.v[op.x] = ctx.state.v[op.y]

def execute_or(ctx: ExecutionContext, op: Chip8Operation) -> None:
    ctx.state.v[op.x] |= ctx.state.v[op.y]

def execute_and(ctx: ExecutionContext, op: Chip8Operation) -> None:
    ctx.state.v[op.x] &= ctx.state.v[op.y]

def execute_xor(ctx: ExecutionContext, op: Chip8Operation) -> None:
    ctx.state.v[op.x] ^= ctx.state.v[op.y]

# @intent:responsibility ADD Vx, Vy を実行します。和が255を超えた場合VF=1。
def execute_add_reg(ctx: ExecutionContext, op: Chip8Operation) -> None:
    total = ctx.state.v[op.x] + ctx.state.v[op.y]
    store_then_flag(ctx, op.x, total, total > 0xFF)

# @intent:responsibility SUB Vx, Vy を実行します。減算前にVx >= VyであればVF=1（ボローなし）。
def execute_sub(ctx: ExecutionContext, op: Chip8Operation) -> None:
    vx, vy = ctx.state.v[op.x], ctx.state.v[op.y]
    flag_then_store(ctx, op.x, vx - vy, vx >= vy)

# @intent:responsibility SUBN Vx, Vy を実行します。Vx = Vy - Vx、減算前にVy >= VxであればVF=1。
def execute_subn(ctx: ExecutionContext, op: Chip8Operation) -> None:
    vx, vy = ctx.state.v[op.x], ctx.state.v[op.y]
    flag_then_store(ctx, op.x, vy - vx, vy >= vx)

# @intent:responsibility SHR Vx を実行します。シフト前の最下位ビットをVFに格納します。
# @intent:rationale Vyは参照せず常にVxをシフトします。既存プログラムとの互換のため、この挙動を変更しないこと。
def execute_shr(ctx: ExecutionContext, op: Chip8Operation) -> None:
    vx = ctx.state.v[op.x]
    flag_then_store(ctx, op.x, vx >> 1, bool(vx & 0x01))

# @intent:responsibility SHL Vx を実行します。シフト前の最上位ビットをVFに格納します。Vyは参照しません。
def execute_shl(ctx: ExecutionContext, op: Chip8Operation) -> None:
    vx = ctx.state.v[op.x]
    flag_then_store(ctx, op.x, vx << 1, bool(vx & 0x80))

# --- Cxnn ---
def decode_rnd(opcode: int) -> Chip8Operation:
    return make_operation(opcode, InstructionKind.RND, "RND", reg_x(opcode), f"${opcode & 0xFF:02X}")

# @intent:responsibility RND Vx, nn を実行します。乱数源はCPUが所有する疑似乱数生成器です。
def execute_rnd(ctx: ExecutionContext, op: Chip8Operation) -> None:
    ctx.state.v[op.x] = ctx.rng.randint(0, 0xFF) & op.nn

# --- Fx1E ---
# @intent:responsibility ADD I, Vx を実行します。Iは16ビットで折り返し、VFは変更しません。
def execute_add_i(ctx: ExecutionContext, op: Chip8Operation) -> None:
    ctx.state.i = (ctx.state.i + ctx.state.v[op.x]) & 0xFFFF
