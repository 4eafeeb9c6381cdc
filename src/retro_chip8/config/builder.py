import random
from typing import Tuple

from retro_chip8.system.machine import Chip8Machine
from retro_chip8.host.scheduler import FrameScheduler, SPEED_PRESETS
from .models import MachineConfig

# @intent:responsibility 構成（Config）に基づいて、仮想マシンとフレームスケジューラを生成・接続します。
class MachineBuilder:
    def build(self, config: MachineConfig) -> Tuple[Chip8Machine, FrameScheduler]:
        # random_seedが未指定の場合はOSのエントロピーで初期化される
        rng = random.Random(config.random_seed)
        machine = Chip8Machine(rng=rng, strict=config.strict_opcodes)

        cycles = config.cycles_per_tick
        if cycles is None:
            cycles = SPEED_PRESETS[config.speed]
        scheduler = FrameScheduler(machine, cycles_per_tick=cycles)

        return machine, scheduler
