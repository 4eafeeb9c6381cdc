# src/retro_chip8/ui/register_view.py
"""
レジスタインスペクタ。
CPUが公開するレイアウト情報（グループとビット幅）からラベルを生成し、フレームごとに値を更新します。
直前の更新から値が変わったレジスタは強調表示されます。
"""
from typing import Dict, Optional
from PySide6.QtWidgets import QWidget, QVBoxLayout, QFormLayout, QLabel, QGroupBox
from PySide6.QtCore import Qt

from retro_chip8.core.cpu import AbstractCpu
from retro_chip8.ui.fonts import monospace_stylesheet

GROUP_STYLE = """
    QGroupBox {
        font-weight: bold;
        border: 1px solid #2A2A2A;
        border-radius: 3px;
        margin-top: 18px;
        color: #E0E0E0;
    }
    QGroupBox::title {
        subcontrol-origin: margin;
        left: 8px;
        padding: 0 4px;
        color: #2A82DA;
    }
"""
VALUE_COLOR = "#FFD700"
CHANGED_COLOR = "#FF6060"

# @intent:responsibility CPUのレジスタ値を16進数で一覧表示します。CPUの具体的な型には依存しません。
class RegisterView(QWidget):
    def __init__(self, parent=None):
        super().__init__(parent)
        self._layout = QVBoxLayout(self)
        self._layout.setContentsMargins(4, 4, 4, 4)

        self._cpu: Optional[AbstractCpu] = None
        self._labels: Dict[str, QLabel] = {}
        self._digits: Dict[str, int] = {}
        self._last_values: Dict[str, int] = {}

    # @intent:responsibility 表示対象のCPUを設定し、そのレイアウトに従ってラベルを作り直します。
    def set_cpu(self, cpu: AbstractCpu) -> None:
        self._cpu = cpu
        self._rebuild()
        self.update_registers()

    def _rebuild(self) -> None:
        while self._layout.count():
            item = self._layout.takeAt(0)
            if item.widget():
                item.widget().deleteLater()
        self._labels.clear()
        self._digits.clear()
        self._last_values.clear()

        for group in self._cpu.get_register_layout():
            box = QGroupBox(group.group_name)
            box.setStyleSheet(GROUP_STYLE)
            form = QFormLayout(box)
            form.setLabelAlignment(Qt.AlignLeft)
            form.setSpacing(2)

            for reg in group.registers:
                # 8bit -> 2桁, 16bit -> 4桁
                self._digits[reg.name] = (reg.width + 3) // 4
                value_label = QLabel()
                value_label.setAlignment(Qt.AlignRight)
                form.addRow(QLabel(f"{reg.name}:"), value_label)
                self._labels[reg.name] = value_label

            self._layout.addWidget(box)

        self._layout.addStretch()

    # @intent:responsibility 現在のレジスタ値を表示に反映します。前回から変化した値は別の色で表示します。
    def update_registers(self) -> None:
        if self._cpu is None:
            return

        for name, value in self._cpu.get_register_map().items():
            label = self._labels.get(name)
            if label is None:
                continue
            changed = name in self._last_values and self._last_values[name] != value
            color = CHANGED_COLOR if changed else VALUE_COLOR
            label.setStyleSheet(f"{monospace_stylesheet(10)} color: {color};")
            label.setText(f"0x{value:0{self._digits[name]}X}")
            self._last_values[name] = value

    def get_register_text(self, name: str) -> str:
        return self._labels[name].text()

    # @intent:responsibility 直前の更新で値が変化したレジスタかどうかを返します。
    def is_highlighted(self, name: str) -> bool:
        return CHANGED_COLOR in self._labels[name].styleSheet()
