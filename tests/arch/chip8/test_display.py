# tests/arch/chip8/test_display.py
"""
retro_chip8.arch.chip8.displayモジュールの単体テスト。
"""
import pytest
from retro_chip8.arch.chip8.display import DisplayBuffer, WIDTH, HEIGHT

# @intent:test_suite フレームバッファのXOR描画、クリッピング、スナップショットを検証します。

class TestDisplayBuffer:
    @pytest.fixture
    def display(self):
        return DisplayBuffer()

    # @intent:test_case_init 初期状態では全ピクセルが消灯しており、changedフラグが下りていることを検証します。
    def test_initial_state(self, display):
        assert display.lit_count() == 0
        assert display.changed is False

    # @intent:test_case_xor 同じスプライトを2回描くと元に戻り、2回目で衝突が報告されることを検証します。
    def test_xor_draw_twice(self, display):
        assert display.draw_sprite(5, 5, [0xA5]) is False
        assert display.lit_count() == 4
        assert display.draw_sprite(5, 5, [0xA5]) is True
        assert display.lit_count() == 0

    # @intent:test_case_no_collision 消灯ピクセルのみに描画した場合は衝突しないことを検証します。
    def test_partial_overlap_without_erase(self, display):
        display.draw_sprite(0, 0, [0xF0])
        assert display.draw_sprite(0, 0, [0x0F]) is False
        assert display.lit_count() == 8

    # @intent:test_case_clip 右端・下端をはみ出したピクセルは折り返さずに切り捨てられることを検証します。
    def test_clipping(self, display):
        display.draw_sprite(60, 30, [0xFF, 0xFF, 0xFF])
        assert display.lit_count() == 8
        assert display.get_pixel(63, 31)
        assert not display.get_pixel(0, 0)
        assert not display.get_pixel(0, 30)

    # @intent:test_case_wrap 原点座標は画面サイズで折り返されることを検証します。
    def test_origin_wraps(self, display):
        display.draw_sprite(WIDTH + 2, HEIGHT + 1, [0x80])
        assert display.get_pixel(2, 1)
        assert display.lit_count() == 1

    # @intent:test_case_changed clearとdraw_spriteでフラグが立ち、acknowledgeとresetで下りることを検証します。
    def test_changed_flag(self, display):
        display.draw_sprite(0, 0, [])
        assert display.changed
        display.acknowledge()
        assert not display.changed

        display.clear()
        assert display.changed
        display.reset()
        assert not display.changed

    # @intent:test_case_snapshot スナップショットが不変であり、以後の描画の影響を受けないことを検証します。
    def test_snapshot_is_immutable_copy(self, display):
        display.draw_sprite(0, 0, [0x80])
        frame = display.snapshot()
        assert len(frame) == HEIGHT
        assert all(len(row) == WIDTH for row in frame)
        assert frame[0][0] is True

        with pytest.raises(TypeError):
            frame[0][0] = False

        display.clear()
        assert frame[0][0] is True

    # @intent:test_case_oob 範囲外のピクセル参照でIndexErrorが発生することを検証します。
    def test_get_pixel_out_of_range(self, display):
        with pytest.raises(IndexError):
            display.get_pixel(WIDTH, 0)
        with pytest.raises(IndexError):
            display.get_pixel(0, -1)
