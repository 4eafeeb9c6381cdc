# src/retro_chip8/arch/chip8/disassembler.py
"""
CHIP-8 Disassembler

メモリ上のバイナリデータを解析し、CHIP-8のアセンブリ表記（ニーモニック）に変換します。
Instruction Layerのデコードロジックを再利用しますが、バスアクセスログを汚さないように
peek（ログなし読み込み）のみを使用します。
"""
from typing import List

from retro_chip8.common.types import DisassemblyLine
from retro_chip8.transport.bus import Bus
from retro_chip8.arch.chip8.state import MEMORY_SIZE
from retro_chip8.arch.chip8.instructions import decode_opcode

# @intent:responsibility 指定されたメモリ範囲を逆アセンブルし、表示用データを生成します。
def disassemble(bus: Bus, start_addr: int, length: int) -> List[DisassemblyLine]:
    """
    指定された範囲のメモリを2バイト単位で逆アセンブルします。
    範囲末尾に1バイトだけ残った場合はDBとして出力します。

    Returns:
        List of (address, hex_bytes, mnemonic) tuples.
    """
    result: List[DisassemblyLine] = []
    current_addr = start_addr
    end_addr = min(start_addr + length, MEMORY_SIZE)

    while current_addr < end_addr:
        high = bus.peek(current_addr)
        if current_addr + 1 >= end_addr:
            result.append((current_addr, f"{high:02X}", f"DB ${high:02X}"))
            break

        low = bus.peek(current_addr + 1)
        operation = decode_opcode((high << 8) | low)
        result.append((current_addr, f"{high:02X} {low:02X}", operation.to_assembly()))
        current_addr += operation.length

    return result
