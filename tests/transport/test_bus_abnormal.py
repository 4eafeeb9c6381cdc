import unittest
from retro_chip8.transport.bus import Bus, Device, RAM

class DummyDevice(Device):
    def read(self, address):
        return 0xAA

    def write(self, address, data):
        pass

    def clear(self):
        pass

class TestBusAbnormal(unittest.TestCase):
    def setUp(self):
        self.bus = Bus()
        self.bus.register_device(0x0000, 0x0FFF, RAM(0x1000)) # 4KB RAM

    def test_write_out_of_bounds(self):
        with self.assertRaises(IndexError):
            self.bus.write(0x1000, 0xFF)

    def test_register_device_invalid_range(self):
        # Start > End
        with self.assertRaises(ValueError):
            self.bus.register_device(0x2000, 0x1000, RAM(0x100))

        with self.assertRaises(ValueError):
            self.bus.register_device(-1, 0x100, RAM(0x100))

    def test_register_device_size_mismatch(self):
        with self.assertRaises(ValueError):
            self.bus.register_device(0x1000, 0x10FF, RAM(0x200))

    def test_register_non_device(self):
        with self.assertRaises(TypeError):
            self.bus.register_device(0x1000, 0x10FF, object())

    def test_load_block_past_end(self):
        with self.assertRaises(IndexError):
            self.bus.load(0x0FFF, b"\x01\x02")

    def test_load_into_non_ram_device(self):
        self.bus.register_device(0x1000, 0x10FF, DummyDevice())
        with self.assertRaises(TypeError):
            self.bus.load(0x1000, b"\x01")

    def test_load_empty_is_noop(self):
        self.bus.load(0x2000, b"")
        self.assertEqual(self.bus.get_and_clear_activity_log(), [])

if __name__ == '__main__':
    unittest.main()
