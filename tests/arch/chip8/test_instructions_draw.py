import random
import unittest
from retro_chip8.transport.bus import Bus, RAM
from retro_chip8.arch.chip8.cpu import Chip8Cpu
from retro_chip8.arch.chip8.display import DisplayBuffer
from retro_chip8.arch.chip8.font import FONT_BASE, FONT_SET
from retro_chip8.arch.chip8.keypad import Keypad
from retro_chip8.arch.chip8.timers import TimerUnit

class TestChip8DrawInstructions(unittest.TestCase):
    def setUp(self):
        self.bus = Bus()
        self.bus.register_device(0x000, 0xFFF, RAM(0x1000))
        self.bus.load(FONT_BASE, FONT_SET)
        self.display = DisplayBuffer()
        self.cpu = Chip8Cpu(self.bus, self.display, Keypad(), TimerUnit(), rng=random.Random(0))
        self.state = self.cpu.get_state()

    def _execute(self, opcode):
        self.bus.write(0x200, opcode >> 8)
        self.bus.write(0x201, opcode & 0xFF)
        self.state.pc = 0x200
        return self.cpu.step()

    def test_draw_twice_erases_and_reports_collision(self):
        self.state.i = FONT_BASE # グリフ "0"
        self._execute(0xD015)
        self.assertEqual(self.state.vf, 0)
        self.assertTrue(self.display.get_pixel(0, 0))
        self.assertEqual(self.display.lit_count(), 14)
        self.assertTrue(self.display.changed)

        self._execute(0xD015)
        self.assertEqual(self.state.vf, 1)
        self.assertEqual(self.display.lit_count(), 0)

    def test_draw_reads_coordinates_from_registers(self):
        self.bus.write(0x300, 0x80)
        self.state.i = 0x300
        self.state.v[2] = 10
        self.state.v[3] = 4
        self._execute(0xD231)
        self.assertTrue(self.display.get_pixel(10, 4))
        self.assertEqual(self.display.lit_count(), 1)

    # 座標はVFをクリアする前に読むため、DFyn の原点xはVFの元の値 (10) になる。
    # VFを先に0にしてから座標を読む実装とは意図的に異なる。
    def test_draw_with_vf_as_coordinate(self):
        self.bus.write(0x300, 0x80)
        self.state.i = 0x300
        self.state.vf = 10
        self._execute(0xDF01)
        self.assertTrue(self.display.get_pixel(10, 0))
        self.assertEqual(self.state.vf, 0)

    def test_cls(self):
        self.display.draw_sprite(0, 0, [0xFF])
        self.display.acknowledge()
        self._execute(0x00E0)
        self.assertEqual(self.display.lit_count(), 0)
        self.assertTrue(self.display.changed)

if __name__ == '__main__':
    unittest.main()
