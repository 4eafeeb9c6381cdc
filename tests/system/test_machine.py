# tests/system/test_machine.py
"""
retro_chip8.system.machineモジュールの単体テスト。
ロード、実行、リセット、ファイルからの読み込みを仮想マシン全体として検証します。
"""
import random

import pytest
from retro_chip8.common.errors import ImageTooLarge, SourceUnavailable
from retro_chip8.arch.chip8.font import FONT_BASE, FONT_SET
from retro_chip8.system.machine import Chip8Machine

# @intent:test_suite 仮想マシンのライフサイクルとホスト向けアクセサの検証。

class TestChip8Machine:
    @pytest.fixture
    def machine(self):
        return Chip8Machine(rng=random.Random(0))

    # @intent:test_case_init 生成直後にフォントがロードされ、PCが0x200であることを検証します。
    def test_initial_state(self, machine):
        assert bytes(machine.peek(FONT_BASE + i) for i in range(len(FONT_SET))) == FONT_SET
        assert machine.get_state().pc == 0x200
        assert machine.has_program is False
        assert machine.source is None

    # @intent:test_case_program 6005 7003 の実行でV0=8、PC=0x204となることを検証します。
    def test_simple_program(self, machine):
        machine.load(bytes([0x60, 0x05, 0x70, 0x03]))
        machine.step()
        machine.step()
        assert machine.get_state().v[0] == 8
        assert machine.get_state().pc == 0x204

    # @intent:test_case_load_buffer_types bytearrayやmemoryviewもプログラムイメージとして受け付けることを検証します。
    @pytest.mark.parametrize("wrap", [bytearray, memoryview])
    def test_load_buffer_types(self, machine, wrap):
        machine.load(wrap(b"\x12\x34"))
        assert machine.peek(0x200) == 0x12
        assert machine.peek(0x201) == 0x34

    # @intent:test_case_load_max ちょうど3584バイトのイメージはロードでき、メモリ末尾まで書き込まれることを検証します。
    def test_load_maximum_image(self, machine):
        image = bytes((i * 7) & 0xFF for i in range(3584))
        machine.load(image)
        assert machine.peek(0x200) == image[0]
        assert machine.peek(0xFFF) == image[-1]
        assert machine.has_program

    # @intent:test_case_load_too_large 3585バイトのイメージはImageTooLargeとなり、状態が変化しないことを検証します。
    def test_load_oversized_image_leaves_state(self, machine):
        machine.load(bytes([0x60, 0x05, 0x70, 0x03]))
        machine.step()

        with pytest.raises(ImageTooLarge) as exc_info:
            machine.load(bytes(3585))
        assert exc_info.value.size == 3585
        assert exc_info.value.limit == 3584

        assert machine.get_state().pc == 0x202
        assert machine.get_state().v[0] == 5
        assert machine.peek(0x202) == 0x70

    # @intent:test_case_load_zero_fill イメージの後ろのメモリはゼロであることを検証します。
    def test_memory_after_image_is_zero(self, machine):
        machine.load(bytes([0xFF] * 3584))
        machine.load(bytes([0x60, 0x05]))
        assert all(machine.peek(addr) == 0 for addr in range(0x202, 0x1000))

    # @intent:test_case_wait_key 画面消去後にキー待ちとなり、キー7の押下で再開することを検証します。
    def test_clear_then_wait_for_key(self, machine):
        machine.load(bytes([0x00, 0xE0, 0xF0, 0x0A]))

        machine.step()
        assert machine.display_changed
        assert not any(any(row) for row in machine.get_display())

        snapshot = machine.step()
        assert snapshot.metadata.waiting_for_key
        assert machine.get_state().pc == 0x202
        machine.step()
        assert machine.get_state().pc == 0x202

        machine.press_key(7)
        machine.step()
        assert machine.get_state().v[0] == 7
        assert machine.get_state().pc == 0x204

    # @intent:test_case_reset resetは冪等で、全コンポーネントを初期状態に戻すことを検証します。
    def test_reset_is_idempotent(self, machine):
        machine.load(bytes([0x60, 0x05, 0xF0, 0x15, 0xD0, 0x05]))
        machine.set_key(3, True)
        for _ in range(3):
            machine.step()

        machine.reset()
        first = (machine.get_register_map(), machine.get_display(), machine.timers.delay)
        machine.reset()
        second = (machine.get_register_map(), machine.get_display(), machine.timers.delay)

        assert first == second
        assert machine.get_state().pc == 0x200
        assert not machine.is_key_pressed(3)
        assert not machine.display_changed
        assert machine.peek(0x200) == 0
        assert machine.peek(FONT_BASE) == FONT_SET[0]

    # @intent:test_case_tick tickでタイマーが減算され、sound_activeが反映されることを検証します。
    def test_tick(self, machine):
        machine.load(bytes([0x60, 0x02, 0xF0, 0x18]))
        machine.step()
        machine.step()
        assert machine.sound_active
        machine.tick()
        machine.tick()
        assert not machine.sound_active

    # @intent:test_case_display 描画後にdisplay_changedが立ち、acknowledge_displayで下りることを検証します。
    def test_display_acknowledge(self, machine):
        # LD F, V0 (グリフ0) -> DRW V0, V0, 5
        machine.load(bytes([0xF0, 0x29, 0xD0, 0x05]))
        machine.step()
        machine.step()
        assert machine.display_changed
        assert machine.get_display()[0][0] is True
        machine.acknowledge_display()
        assert not machine.display_changed

    # @intent:test_case_load_file ファイルからのロードとreloadによる再実行を検証します。
    def test_load_file_and_reload(self, machine, tmp_path):
        rom = tmp_path / "count.ch8"
        rom.write_bytes(bytes([0x70, 0x01, 0x12, 0x00]))

        machine.load_file(rom)
        assert machine.source == str(rom)
        for _ in range(5):
            machine.step()
        assert machine.get_state().v[0] == 3

        machine.reload()
        assert machine.get_state().v[0] == 0
        assert machine.get_state().pc == 0x200
        assert machine.peek(0x200) == 0x70

    # @intent:test_case_missing_file 存在しないファイルはSourceUnavailableとなり、状態が変化しないことを検証します。
    def test_load_missing_file(self, machine, tmp_path):
        machine.load(bytes([0x60, 0x05]))
        with pytest.raises(SourceUnavailable) as exc_info:
            machine.load_file(tmp_path / "missing.ch8")
        assert isinstance(exc_info.value.__cause__, OSError)
        assert machine.peek(0x200) == 0x60
        assert machine.source is None

    # @intent:test_case_reload_empty 何もロードしていない状態でのreloadはSourceUnavailableとなることを検証します。
    def test_reload_without_program(self, machine):
        with pytest.raises(SourceUnavailable):
            machine.reload()

    # @intent:test_case_seed seed_randomで同じ乱数系列を再現できることを検証します。
    def test_seed_random(self, machine):
        machine.load(bytes([0xC0, 0xFF]))
        machine.seed_random(99)
        machine.step()
        first = machine.get_state().v[0]

        machine.reload()
        machine.seed_random(99)
        machine.step()
        assert machine.get_state().v[0] == first
