# src/retro_chip8/ui/display_view.py
"""
フレームバッファを描画するウィジェット。
仮想マシンから受け取った不変スナップショットを固定パレットの画像に変換して表示します。
"""
from typing import Optional

from PySide6.QtWidgets import QWidget, QSizePolicy
from PySide6.QtGui import QColor, QImage, QPainter, QPaintEvent
from PySide6.QtCore import Qt, QSize

from retro_chip8.common.types import DisplayFrame
from retro_chip8.arch.chip8.display import WIDTH, HEIGHT

# @intent:responsibility 64x32のピクセル状態を拡大表示するウィジェットを提供します。
class DisplayView(QWidget):
    """
    CHIP-8の画面を表示するウィジェット。
    set_frame()で渡されたフレームのみを参照し、仮想マシンの状態には触れません。
    """
    def __init__(self, scale: int = 10, foreground: str = "#FFFFFF", background: str = "#000000", parent=None):
        super().__init__(parent)
        self._scale = scale
        self._foreground = QColor(foreground)
        self._background = QColor(background)
        self._frame: Optional[DisplayFrame] = None
        self.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Expanding)
        self.setFocusPolicy(Qt.StrongFocus)

    def sizeHint(self) -> QSize:
        return QSize(WIDTH * self._scale, HEIGHT * self._scale)

    # @intent:responsibility 表示するフレームを更新し、再描画を要求します。
    def set_frame(self, frame: DisplayFrame) -> None:
        self._frame = frame
        self.update()

    # @intent:responsibility 現在のフレームを1ピクセル=1画素のQImageに変換します。
    def render_image(self) -> QImage:
        image = QImage(WIDTH, HEIGHT, QImage.Format_RGB32)
        image.fill(self._background)
        if self._frame is None:
            return image

        foreground = self._foreground.rgb()
        for y, row in enumerate(self._frame):
            for x, lit in enumerate(row):
                if lit:
                    image.setPixel(x, y, foreground)
        return image

    # @intent:responsibility ウィジェット全体に画像を拡大描画します。ピクセルの輪郭をぼかさないよう補間は行いません。
    def paintEvent(self, event: QPaintEvent):
        painter = QPainter(self)
        painter.setRenderHint(QPainter.SmoothPixmapTransform, False)
        painter.fillRect(self.rect(), self._background)
        painter.drawImage(self.rect(), self.render_image())
        painter.end()
