# src/retro_chip8/arch/chip8/instructions/maps.py
"""
オペコードと命令実装のマッピング定義。
"""
from .base import InstructionKind
from . import control
from . import alu
from . import load
from . import draw

# @intent:map オペコード上位4ビット（命令クラス）からデコード関数へのマッピングテーブル。
DECODE_MAP = {
    0x0: control.decode_sys_group,
    0x1: control.decode_jp,
    0x2: control.decode_call,
    0x3: control.decode_se_byte,
    0x4: control.decode_sne_byte,
    0x5: control.decode_se_reg,
    0x6: load.decode_ld_byte,
    0x7: alu.decode_add_byte,
    0x8: alu.decode_alu_group,
    0x9: control.decode_sne_reg,
    0xA: load.decode_ld_i,
    0xB: control.decode_jp_v0,
    0xC: alu.decode_rnd,
    0xD: draw.decode_drw,
    0xE: control.decode_key_group,
    0xF: load.decode_misc_group,
}

# @intent:map 命令種別から実行関数へのマッピングテーブル。InstructionKindの全メンバーを網羅します。
EXECUTE_MAP = {
    # Control
    InstructionKind.SYS: control.execute_sys,
    InstructionKind.RET: control.execute_ret,
    InstructionKind.JP: control.execute_jp,
    InstructionKind.CALL: control.execute_call,
    InstructionKind.SE_BYTE: control.execute_se_byte,
    InstructionKind.SNE_BYTE: control.execute_sne_byte,
    InstructionKind.SE_REG: control.execute_se_reg,
    InstructionKind.SNE_REG: control.execute_sne_reg,
    InstructionKind.JP_V0: control.execute_jp_v0,
    InstructionKind.SKP: control.execute_skp,
    InstructionKind.SKNP: control.execute_sknp,
    InstructionKind.UNKNOWN: control.execute_unknown,

    # ALU
    InstructionKind.ADD_BYTE: alu.execute_add_byte,
    InstructionKind.LD_REG: alu.execute_ld_reg,
    InstructionKind.OR: alu.execute_or,
    InstructionKind.AND: alu.execute_and,
    InstructionKind.XOR: alu.execute_xor,
    InstructionKind.ADD_REG: alu.execute_add_reg,
    InstructionKind.SUB: alu.execute_sub,
    InstructionKind.SHR: alu.execute_shr,
    InstructionKind.SUBN: alu.execute_subn,
    InstructionKind.SHL: alu.execute_shl,
    InstructionKind.RND: alu.execute_rnd,
    InstructionKind.ADD_I: alu.execute_add_i,

    # Load/Store
    InstructionKind.LD_BYTE: load.execute_ld_byte,
    InstructionKind.LD_I: load.execute_ld_i,
    InstructionKind.LD_VX_DT: load.execute_ld_vx_dt,
    InstructionKind.LD_VX_K: load.execute_ld_vx_k,
    InstructionKind.LD_DT_VX: load.execute_ld_dt_vx,
    InstructionKind.LD_ST_VX: load.execute_ld_st_vx,
    InstructionKind.LD_F: load.execute_ld_f,
    InstructionKind.LD_B: load.execute_ld_b,
    InstructionKind.LD_MEM_VX: load.execute_ld_mem_vx,
    InstructionKind.LD_VX_MEM: load.execute_ld_vx_mem,

    # Display
    InstructionKind.CLS: draw.execute_cls,
    InstructionKind.DRW: draw.execute_drw,
}

# @intent:rationale 命令種別の追加時に実行関数の登録漏れを即座に検出するため、import時に網羅性を検証します。
_missing = set(InstructionKind) - set(EXECUTE_MAP)
if _missing:
    raise RuntimeError(f"No executor registered for: {sorted(kind.name for kind in _missing)}")
