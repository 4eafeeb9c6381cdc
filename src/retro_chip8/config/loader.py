import logging
from typing import Any, Dict, Optional

import yaml

from retro_chip8.host.scheduler import SPEED_PRESETS
from retro_chip8.arch.chip8.keypad import KEY_COUNT
from .models import MachineConfig, DisplayConfig, DEFAULT_KEY_MAP

logger = logging.getLogger(__name__)

KNOWN_KEYS = {
    "speed", "cycles_per_tick", "timer_hz", "strict_opcodes",
    "random_seed", "display", "key_map",
}

class ConfigLoader:
    def load_from_file(self, path: str) -> MachineConfig:
        with open(path, 'r', encoding="utf-8") as f:
            data = yaml.safe_load(f)
        return self.parse(data or {})

    def load_from_string(self, text: str) -> MachineConfig:
        return self.parse(yaml.safe_load(text) or {})

    def parse(self, data: Dict[str, Any]) -> MachineConfig:
        if not isinstance(data, dict):
            raise ValueError("Configuration root must be a mapping.")

        for key in data:
            if key not in KNOWN_KEYS:
                logger.warning("Ignoring unknown configuration key '%s'", key)

        speed = str(data.get("speed", "normal")).lower()
        if speed not in SPEED_PRESETS:
            raise ValueError(f"Unknown speed '{speed}'. Choose from: {', '.join(SPEED_PRESETS)}")

        cycles_per_tick = self._parse_optional_int(data.get("cycles_per_tick"))
        if cycles_per_tick is not None and cycles_per_tick < 1:
            raise ValueError(f"cycles_per_tick must be at least 1, got {cycles_per_tick}.")

        timer_hz = self._parse_int(data.get("timer_hz", 60))
        if timer_hz < 1:
            raise ValueError(f"timer_hz must be at least 1, got {timer_hz}.")

        # Parse Display
        display_data = data.get("display") or {}
        display = DisplayConfig(
            scale=self._parse_int(display_data.get("scale", 10)),
            foreground=str(display_data.get("foreground", "#FFFFFF")),
            background=str(display_data.get("background", "#000000")),
        )
        if display.scale < 1:
            raise ValueError(f"display.scale must be at least 1, got {display.scale}.")

        # Parse Key Map
        key_map_data = data.get("key_map")
        if key_map_data is None:
            key_map = dict(DEFAULT_KEY_MAP)
        else:
            key_map = {}
            for name, value in key_map_data.items():
                key = self._parse_int(value)
                if not 0 <= key < KEY_COUNT:
                    raise ValueError(f"Key '{name}' maps to {value}, outside 0x0-0xF.")
                key_name = str(name).strip()
                # 1文字のキーのみ大文字に揃え、"PageUp" などの複数語の名前は記述どおり保持する
                key_map[key_name.upper() if len(key_name) == 1 else key_name] = key

        return MachineConfig(
            speed=speed,
            cycles_per_tick=cycles_per_tick,
            timer_hz=timer_hz,
            strict_opcodes=bool(data.get("strict_opcodes", False)),
            random_seed=self._parse_optional_int(data.get("random_seed")),
            display=display,
            key_map=key_map,
        )

    def _parse_optional_int(self, value: Any) -> Optional[int]:
        if value is None:
            return None
        return self._parse_int(value)

    def _parse_int(self, value: Any) -> int:
        if isinstance(value, bool):
            raise ValueError(f"Invalid integer format: {value}")
        if isinstance(value, int):
            return value
        if isinstance(value, str):
            text = value.strip()
            if text.lower().startswith("0x"):
                return int(text, 16)
            return int(text)
        raise ValueError(f"Invalid integer format: {value}")
