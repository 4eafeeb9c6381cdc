# src/retro_chip8/arch/chip8/display.py
"""
64x32 モノクロフレームバッファ。

描画命令(Dxyn)と画面消去命令(00E0)からのみ変更されます。
ホスト（レンダラ）には不変のスナップショットのみを公開し、内部バッファへの参照は渡しません。
"""
from typing import Iterable, List

from retro_chip8.common.types import DisplayFrame

WIDTH = 64
HEIGHT = 32

# @intent:responsibility ピクセル状態の保持、XORスプライト描画、再描画要求フラグの管理を行います。
class DisplayBuffer:
    """
    CHIP-8のフレームバッファ。
    changedフラグは消去・描画のたびに立ち、ホストがacknowledge()で下ろします。
    """
    def __init__(self):
        self._pixels: List[bool] = [False] * (WIDTH * HEIGHT)
        self._changed = False

    @property
    def changed(self) -> bool:
        return self._changed

    # @intent:responsibility ホストが再描画を終えたことを通知し、changedフラグを下ろします。
    def acknowledge(self) -> None:
        self._changed = False

    # @intent:responsibility 全ピクセルを消去し、changedフラグを立てます。
    def clear(self) -> None:
        self._pixels = [False] * (WIDTH * HEIGHT)
        self._changed = True

    # @intent:responsibility 画面とフラグを電源投入直後の状態に戻します（changedは立てません）。
    def reset(self) -> None:
        self._pixels = [False] * (WIDTH * HEIGHT)
        self._changed = False

    def get_pixel(self, x: int, y: int) -> bool:
        if not (0 <= x < WIDTH and 0 <= y < HEIGHT):
            raise IndexError(f"Pixel ({x}, {y}) is outside the {WIDTH}x{HEIGHT} display.")
        return self._pixels[y * WIDTH + x]

    # @intent:responsibility スプライトをXOR描画し、点灯していたピクセルが消えた場合Trueを返します。
    # @intent:rationale 原点のみ画面サイズで折り返し、はみ出したピクセルは折り返さずに切り捨てます。
    def draw_sprite(self, x: int, y: int, rows: Iterable[int]) -> bool:
        """
        rowsの各バイトを1行（MSBが左端）として、原点(x mod 64, y mod 32)からXOR描画します。
        描画の有無にかかわらずchangedフラグを立てます。
        """
        origin_x = x % WIDTH
        origin_y = y % HEIGHT
        collision = False

        for row, sprite in enumerate(rows):
            py = origin_y + row
            if py >= HEIGHT:
                break
            for col in range(8):
                if not sprite & (0x80 >> col):
                    continue
                px = origin_x + col
                if px >= WIDTH:
                    continue
                index = py * WIDTH + px
                if self._pixels[index]:
                    collision = True
                self._pixels[index] = not self._pixels[index]

        self._changed = True
        return collision

    # @intent:responsibility フレームバッファの不変コピーを行単位で返します。
    def snapshot(self) -> DisplayFrame:
        return tuple(
            tuple(self._pixels[y * WIDTH:(y + 1) * WIDTH]) for y in range(HEIGHT)
        )

    def lit_count(self) -> int:
        return sum(self._pixels)
