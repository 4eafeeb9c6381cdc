from dataclasses import dataclass, field
from typing import Dict, Optional

# @intent:constant 標準的なキーボード配列 (1234/QWER/ASDF/ZXCV) からCHIP-8キーへのマッピング。
DEFAULT_KEY_MAP: Dict[str, int] = {
    "1": 0x1, "2": 0x2, "3": 0x3, "4": 0xC,
    "Q": 0x4, "W": 0x5, "E": 0x6, "R": 0xD,
    "A": 0x7, "S": 0x8, "D": 0x9, "F": 0xE,
    "Z": 0xA, "X": 0x0, "C": 0xB, "V": 0xF,
}

@dataclass
class DisplayConfig:
    scale: int = 10
    foreground: str = "#FFFFFF"
    background: str = "#000000"

@dataclass
class MachineConfig:
    speed: str = "normal"  # "slow", "normal", "fast", "fastest"
    cycles_per_tick: Optional[int] = None  # 指定時はspeedより優先
    timer_hz: int = 60
    strict_opcodes: bool = False
    random_seed: Optional[int] = None
    display: DisplayConfig = field(default_factory=DisplayConfig)
    key_map: Dict[str, int] = field(default_factory=lambda: dict(DEFAULT_KEY_MAP))
