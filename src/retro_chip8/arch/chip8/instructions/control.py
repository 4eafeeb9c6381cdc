# src/retro_chip8/arch/chip8/instructions/control.py
"""
制御命令（ジャンプ、サブルーチン、条件スキップ）の実装。
"""
import logging

from retro_chip8.common.errors import StackOverflow, StackUnderflow, UnknownOpcode
from retro_chip8.arch.chip8.state import STACK_DEPTH
from .base import (
    Chip8Operation, ExecutionContext, InstructionKind,
    make_operation, decode_unknown, skip_next, reg_x, reg_y,
)

logger = logging.getLogger(__name__)

# --- 0x0 グループ ---
# @intent:responsibility 0x0グループ (CLS / RET / SYS) をデコードします。
def decode_sys_group(opcode: int) -> Chip8Operation:
    if opcode == 0x00E0:
        return make_operation(opcode, InstructionKind.CLS, "CLS")
    if opcode == 0x00EE:
        return make_operation(opcode, InstructionKind.RET, "RET")
    return make_operation(opcode, InstructionKind.SYS, "SYS", f"${opcode & 0x0FFF:03X}")

# @intent:responsibility SYS命令を実行します。機械語ルーチン呼び出しはサポートしないため何もしません。
def execute_sys(ctx: ExecutionContext, op: Chip8Operation) -> None:
    # Intentional: 0nnn is ignored.
    pass

# @intent:responsibility RET命令を実行し、スタックから戻りアドレスをポップしてPCに設定します。
def execute_ret(ctx: ExecutionContext, op: Chip8Operation) -> None:
    state = ctx.state
    if state.sp <= 0:
        raise StackUnderflow(ctx.instruction_address())
    state.pc = state.pop()

# --- JP / CALL ---
def decode_jp(opcode: int) -> Chip8Operation:
    return make_operation(opcode, InstructionKind.JP, "JP", f"${opcode & 0x0FFF:03X}")

def execute_jp(ctx: ExecutionContext, op: Chip8Operation) -> None:
    ctx.state.pc = op.nnn

def decode_call(opcode: int) -> Chip8Operation:
    return make_operation(opcode, InstructionKind.CALL, "CALL", f"${opcode & 0x0FFF:03X}")

# @intent:responsibility CALL命令を実行し、戻りアドレス（次の命令）をプッシュしてからジャンプします。
# @intent:pre-condition スタックが満杯の場合はStackOverflowを送出し、状態を変更しません。
def execute_call(ctx: ExecutionContext, op: Chip8Operation) -> None:
    state = ctx.state
    if state.sp >= STACK_DEPTH:
        raise StackOverflow(ctx.instruction_address())
    # state.pc is already pointing to the NEXT instruction
    state.push(state.pc)
    state.pc = op.nnn

# --- Bnnn ---
def decode_jp_v0(opcode: int) -> Chip8Operation:
    return make_operation(opcode, InstructionKind.JP_V0, "JP", "V0", f"${opcode & 0x0FFF:03X}")

# @intent:responsibility JP V0, nnn を実行します。オフセットには常にV0を使用します。
def execute_jp_v0(ctx: ExecutionContext, op: Chip8Operation) -> None:
    ctx.state.pc = (op.nnn + ctx.state.v[0]) & 0xFFFF

# --- 条件スキップ ---
def decode_se_byte(opcode: int) -> Chip8Operation:
    return make_operation(opcode, InstructionKind.SE_BYTE, "SE", reg_x(opcode), f"${opcode & 0xFF:02X}")

def execute_se_byte(ctx: ExecutionContext, op: Chip8Operation) -> None:
    if ctx.state.v[op.x] == op.nn:
        skip_next(ctx.state)

def decode_sne_byte(opcode: int) -> Chip8Operation:
    return make_operation(opcode, InstructionKind.SNE_BYTE, "SNE", reg_x(opcode), f"${opcode & 0xFF:02X}")

def execute_sne_byte(ctx: ExecutionContext, op: Chip8Operation) -> None:
    if ctx.state.v[op.x] != op.nn:
        skip_next(ctx.state)

# @intent:rationale 5xyNの下位4ビットは判定に使用しません（5xy0と同じ扱い）。
def decode_se_reg(opcode: int) -> Chip8Operation:
    return make_operation(opcode, InstructionKind.SE_REG, "SE", reg_x(opcode), reg_y(opcode))

def execute_se_reg(ctx: ExecutionContext, op: Chip8Operation) -> None:
    if ctx.state.v[op.x] == ctx.state.v[op.y]:
        skip_next(ctx.state)

def decode_sne_reg(opcode: int) -> Chip8Operation:
    return make_operation(opcode, InstructionKind.SNE_REG, "SNE", reg_x(opcode), reg_y(opcode))

def execute_sne_reg(ctx: ExecutionContext, op: Chip8Operation) -> None:
    if ctx.state.v[op.x] != ctx.state.v[op.y]:
        skip_next(ctx.state)

# --- 0xE グループ (キー入力によるスキップ) ---
def decode_key_group(opcode: int) -> Chip8Operation:
    reg = reg_x(opcode)
    if opcode & 0xFF == 0x9E:
        return make_operation(opcode, InstructionKind.SKP, "SKP", reg)
    if opcode & 0xFF == 0xA1:
        return make_operation(opcode, InstructionKind.SKNP, "SKNP", reg)
    return decode_unknown(opcode)

# @intent:responsibility Vxが示すキーが押されていれば次の命令をスキップします。判定はこの瞬間のキー状態で行います。
def execute_skp(ctx: ExecutionContext, op: Chip8Operation) -> None:
    if ctx.keypad.is_pressed(ctx.state.v[op.x]):
        skip_next(ctx.state)

def execute_sknp(ctx: ExecutionContext, op: Chip8Operation) -> None:
    if not ctx.keypad.is_pressed(ctx.state.v[op.x]):
        skip_next(ctx.state)

# --- 未定義命令 ---
# @intent:responsibility 未定義命令を処理します。通常はNOPとして扱い、厳格モードではUnknownOpcodeを送出します。
def execute_unknown(ctx: ExecutionContext, op: Chip8Operation) -> None:
    address = ctx.instruction_address()
    if ctx.strict:
        raise UnknownOpcode(op.opcode, address)
    logger.debug("Ignoring unknown opcode %04X at %#05x", op.opcode, address)
