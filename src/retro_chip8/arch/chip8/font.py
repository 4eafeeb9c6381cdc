# src/retro_chip8/arch/chip8/font.py
"""
16進数字 (0-F) の組み込みフォント。
各グリフは幅4ピクセル・高さ5ピクセルで、1行を1バイトの上位4ビットで表します。
"""

# @intent:constant フォントテーブルの配置先アドレスと1グリフあたりのバイト数。
FONT_BASE = 0x050
GLYPH_SIZE = 5

# @intent:constant 0x050-0x09Fに書き込まれるフォントデータ (16グリフ x 5バイト)。
FONT_SET = bytes([
    0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
    0x20, 0x60, 0x20, 0x20, 0x70,  # 1
    0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
    0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
    0x90, 0x90, 0xF0, 0x10, 0x10,  # 4
    0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
    0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
    0xF0, 0x10, 0x20, 0x40, 0x40,  # 7
    0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
    0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
    0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
    0xE0, 0x90, 0xE0, 0x90, 0xE0,  # B
    0xF0, 0x80, 0x80, 0x80, 0xF0,  # C
    0xE0, 0x90, 0x90, 0x90, 0xE0,  # D
    0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
    0xF0, 0x80, 0xF0, 0x80, 0x80,  # F
])


# @intent:utility_function 指定した16進数字のグリフ先頭アドレスを返します。下位4ビットのみ使用します。
def glyph_address(digit: int) -> int:
    return FONT_BASE + (digit & 0x0F) * GLYPH_SIZE
