# src/retro_chip8/arch/chip8/instructions/load.py
"""
ロード/ストア命令（レジスタ、インデックス、タイマー、メモリ転送）の実装。
"""
from retro_chip8.arch.chip8.font import glyph_address
from .base import (
    Chip8Operation, ExecutionContext, InstructionKind,
    make_operation, decode_unknown, mem_addr, reg_x,
)

# --- 6xnn / Annn ---
def decode_ld_byte(opcode: int) -> Chip8Operation:
    return make_operation(opcode, InstructionKind.LD_BYTE, "LD", reg_x(opcode), f"${opcode & 0xFF:02X}")

def execute_ld_byte(ctx: ExecutionContext, op: Chip8Operation) -> None:
    ctx.state.v[op.x] = op.nn

def decode_ld_i(opcode: int) -> Chip8Operation:
    return make_operation(opcode, InstructionKind.LD_I, "LD", "I", f"${opcode & 0x0FFF:03X}")

def execute_ld_i(ctx: ExecutionContext, op: Chip8Operation) -> None:
    ctx.state.i = op.nnn

# --- 0xF グループ ---
# @intent:map FxNNの下位バイトから (命令種別, オペランド書式) へのマッピングテーブル。
# 書式中の {x} はVxのレジスタ名に置換されます。
MISC_DECODE_MAP = {
    0x07: (InstructionKind.LD_VX_DT, ("{x}", "DT")),
    0x0A: (InstructionKind.LD_VX_K, ("{x}", "K")),
    0x15: (InstructionKind.LD_DT_VX, ("DT", "{x}")),
    0x18: (InstructionKind.LD_ST_VX, ("ST", "{x}")),
    0x1E: (InstructionKind.ADD_I, ("I", "{x}")),
    0x29: (InstructionKind.LD_F, ("F", "{x}")),
    0x33: (InstructionKind.LD_B, ("B", "{x}")),
    0x55: (InstructionKind.LD_MEM_VX, ("[I]", "{x}")),
    0x65: (InstructionKind.LD_VX_MEM, ("{x}", "[I]")),
}

# @intent:responsibility FxNNグループをデコードします。
def decode_misc_group(opcode: int) -> Chip8Operation:
    entry = MISC_DECODE_MAP.get(opcode & 0x00FF)
    if entry is None:
        return decode_unknown(opcode)
    kind, operand_format = entry
    mnemonic = "ADD" if kind is InstructionKind.ADD_I else "LD"
    operands = [fmt.format(x=reg_x(opcode)) for fmt in operand_format]
    return make_operation(opcode, kind, mnemonic, *operands)

# --- タイマー ---
def execute_ld_vx_dt(ctx: ExecutionContext, op: Chip8Operation) -> None:
    ctx.state.v[op.x] = ctx.timers.delay

def execute_ld_dt_vx(ctx: ExecutionContext, op: Chip8Operation) -> None:
    ctx.timers.delay = ctx.state.v[op.x]

def execute_ld_st_vx(ctx: ExecutionContext, op: Chip8Operation) -> None:
    ctx.timers.sound = ctx.state.v[op.x]

# --- Fx0A ---
# @intent:responsibility LD Vx, K を実行します。キーが押されていなければPCを巻き戻し、同じ命令を次のstepで再実行させます。
# @intent:rationale これはエンジン唯一のステップ間サスペンションです。stepはブロックせず、ホストに制御を返します。
#                  複数キー押下時は最大インデックスのキーを格納します（Keypad.scan参照）。
def execute_ld_vx_k(ctx: ExecutionContext, op: Chip8Operation) -> None:
    key = ctx.keypad.scan()
    if key is None:
        ctx.state.pc = (ctx.state.pc - 2) & 0xFFFF
        return
    ctx.state.v[op.x] = key

# --- Fx29 / Fx33 ---
# @intent:responsibility LD F, Vx を実行します。Vxの下位4ビットに対応するフォントグリフのアドレスをIに設定します。
def execute_ld_f(ctx: ExecutionContext, op: Chip8Operation) -> None:
    ctx.state.i = glyph_address(ctx.state.v[op.x])

# @intent:responsibility LD B, Vx を実行します。Vxの百の位・十の位・一の位をI, I+1, I+2に格納します。
def execute_ld_b(ctx: ExecutionContext, op: Chip8Operation) -> None:
    value = ctx.state.v[op.x]
    base = ctx.state.i
    ctx.bus.write(mem_addr(base), value // 100)
    ctx.bus.write(mem_addr(base + 1), (value // 10) % 10)
    ctx.bus.write(mem_addr(base + 2), value % 10)

# --- Fx55 / Fx65 ---
# @intent:responsibility LD [I], Vx を実行します。V0..Vxをメモリに格納し、その後Iをx+1進めます。
# @intent:rationale Iの加算は互換性のために維持している挙動で、全てのCHIP-8処理系に共通ではありません。
def execute_ld_mem_vx(ctx: ExecutionContext, op: Chip8Operation) -> None:
    state = ctx.state
    for reg in range(op.x + 1):
        ctx.bus.write(mem_addr(state.i + reg), state.v[reg])
    state.i = (state.i + op.x + 1) & 0xFFFF

# @intent:responsibility LD Vx, [I] を実行します。メモリからV0..Vxを読み込み、その後Iをx+1進めます。
def execute_ld_vx_mem(ctx: ExecutionContext, op: Chip8Operation) -> None:
    state = ctx.state
    for reg in range(op.x + 1):
        state.v[reg] = ctx.bus.read(mem_addr(state.i + reg))
    state.i = (state.i + op.x + 1) & 0xFFFF
