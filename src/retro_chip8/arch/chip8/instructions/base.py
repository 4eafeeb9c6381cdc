# src/retro_chip8/arch/chip8/instructions/base.py
"""
CHIP-8命令実装用の共通定義とユーティリティ。
"""
import random
from dataclasses import dataclass
from enum import Enum, auto
from typing import Tuple

from retro_chip8.core.snapshot import Operation
from retro_chip8.transport.bus import Bus
from retro_chip8.arch.chip8.state import Chip8CpuState, ADDRESS_MASK
from retro_chip8.arch.chip8.display import DisplayBuffer
from retro_chip8.arch.chip8.keypad import Keypad
from retro_chip8.arch.chip8.timers import TimerUnit

# @intent:data_structure デコード結果の命令種別。35種の命令形式に、未定義を表すUNKNOWNを加えたものです。
class InstructionKind(Enum):
    SYS = auto()        # 0nnn
    CLS = auto()        # 00E0
    RET = auto()        # 00EE
    JP = auto()         # 1nnn
    CALL = auto()       # 2nnn
    SE_BYTE = auto()    # 3xnn
    SNE_BYTE = auto()   # 4xnn
    SE_REG = auto()     # 5xy0
    LD_BYTE = auto()    # 6xnn
    ADD_BYTE = auto()   # 7xnn
    LD_REG = auto()     # 8xy0
    OR = auto()         # 8xy1
    AND = auto()        # 8xy2
    XOR = auto()        # 8xy3
    ADD_REG = auto()    # 8xy4
    SUB = auto()        # 8xy5
    SHR = auto()        # 8xy6
    SUBN = auto()       # 8xy7
    SHL = auto()        # 8xyE
    SNE_REG = auto()    # 9xy0
    LD_I = auto()       # Annn
    JP_V0 = auto()      # Bnnn
    RND = auto()        # Cxnn
    DRW = auto()        # Dxyn
    SKP = auto()        # Ex9E
    SKNP = auto()       # ExA1
    LD_VX_DT = auto()   # Fx07
    LD_VX_K = auto()    # Fx0A
    LD_DT_VX = auto()   # Fx15
    LD_ST_VX = auto()   # Fx18
    ADD_I = auto()      # Fx1E
    LD_F = auto()       # Fx29
    LD_B = auto()       # Fx33
    LD_MEM_VX = auto()  # Fx55
    LD_VX_MEM = auto()  # Fx65
    UNKNOWN = auto()

# @intent:responsibility CHIP-8のデコード済み命令。命令種別とオペコードから切り出した各フィールドを保持します。
@dataclass(frozen=True)
class Chip8Operation(Operation):
    kind: InstructionKind = InstructionKind.UNKNOWN
    opcode: int = 0x0000
    x: int = 0      # bits 8-11
    y: int = 0      # bits 4-7
    n: int = 0      # bits 0-3
    nn: int = 0     # bits 0-7
    nnn: int = 0    # bits 0-11

# @intent:responsibility 命令実行関数が操作する全てのコンポーネントをまとめた実行コンテキストです。
@dataclass
class ExecutionContext:
    state: Chip8CpuState
    bus: Bus
    display: DisplayBuffer
    keypad: Keypad
    timers: TimerUnit
    rng: random.Random
    strict: bool = False

    # @intent:responsibility 実行中の命令自身のアドレスを返します。PCは実行前に2進められているため、その分を戻します。
    def instruction_address(self) -> int:
        return (self.state.pc - 2) & 0xFFFF

# @intent:utility_function オペコードをフィールドに分解します。(x, y, n, nn, nnn)
def split_fields(opcode: int) -> Tuple[int, int, int, int, int]:
    return (
        (opcode & 0x0F00) >> 8,
        (opcode & 0x00F0) >> 4,
        opcode & 0x000F,
        opcode & 0x00FF,
        opcode & 0x0FFF,
    )

# @intent:utility_function 命令種別・ニーモニック・オペランドからChip8Operationを組み立てます。
def make_operation(opcode: int, kind: InstructionKind, mnemonic: str, *operands: str) -> Chip8Operation:
    x, y, n, nn, nnn = split_fields(opcode)
    return Chip8Operation(
        opcode_hex=f"{opcode:04X}",
        mnemonic=mnemonic,
        operands=tuple(operands),
        length=2,
        kind=kind,
        opcode=opcode,
        x=x, y=y, n=n, nn=nn, nnn=nnn,
    )

# @intent:utility_function 4KB空間に収まるようアドレスをマスクします。
def mem_addr(address: int) -> int:
    return address & ADDRESS_MASK

# @intent:utility_function バスから16ビットワードをビッグエンディアン形式で読み込みます。
def read_word(bus: Bus, addr: int) -> int:
    """Big-endian 16-bit read."""
    return (bus.read(mem_addr(addr)) << 8) | bus.read(mem_addr(addr + 1))

# @intent:utility_function 次の命令をスキップします。
def skip_next(state: Chip8CpuState) -> None:
    state.pc = (state.pc + 2) & 0xFFFF

# @intent:utility_function 未定義のオペコードをデータワード (DW) として表現します。
def decode_unknown(opcode: int) -> Chip8Operation:
    return make_operation(opcode, InstructionKind.UNKNOWN, "DW", f"${opcode:04X}")

# @intent:utility_function 逆アセンブル表記用のレジスタ名 (Vx / Vy) を返します。
def reg_x(opcode: int) -> str:
    return f"V{(opcode >> 8) & 0xF:X}"

def reg_y(opcode: int) -> str:
    return f"V{(opcode >> 4) & 0xF:X}"
