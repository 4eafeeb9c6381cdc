# src/retro_chip8/ui/main_window.py
"""
メインウィンドウの実装。
仮想マシンを固定レートで駆動し、画面・入力・サウンド通知・レジスタ表示をまとめます。
"""
from typing import Optional

from PySide6.QtWidgets import (
    QMainWindow, QApplication, QDockWidget, QFileDialog, QMessageBox,
)
from PySide6.QtGui import QAction, QActionGroup, QKeyEvent, QCloseEvent, QPalette, QColor
from PySide6.QtCore import Qt, QTimer, Slot

from retro_chip8.common.errors import Chip8Error, EngineFault
from retro_chip8.config.builder import MachineBuilder
from retro_chip8.config.models import MachineConfig
from retro_chip8.host.scheduler import SPEED_PRESETS
from retro_chip8.loader.loader import ROM_EXTENSIONS
from .display_view import DisplayView
from .fonts import monospace_stylesheet
from .keymap import KeyMapper
from .register_view import RegisterView

# @intent:responsibility アプリケーションのメインウィンドウを定義し、ホスト側の各コラボレータを組み立てます。
class MainWindow(QMainWindow):
    """
    アプリケーションのメインウィンドウクラス。
    QTimerのタイムアウトごとにFrameScheduler.run_frame()を呼び出します。
    """
    def __init__(self, config: Optional[MachineConfig] = None, parent=None):
        super().__init__(parent)
        self._config = config or MachineConfig()
        self.setWindowTitle("CHIP-8 Emulator")
        self._set_dark_theme()

        self._setup_backend()
        self._create_display()
        self._create_status_inspector()
        self._create_menus()
        self.statusBar().showMessage("No program loaded")

        self._sound_was_active = False
        self._timer = QTimer(self)
        self._timer.setTimerType(Qt.PreciseTimer)
        self._timer.timeout.connect(self._on_frame)
        self._timer.start(max(1, 1000 // self._config.timer_hz))

    # @intent:responsibility 仮想マシン、スケジューラ、キーマッパーを初期化します。
    def _setup_backend(self):
        self.machine, self.scheduler = MachineBuilder().build(self._config)
        self.key_mapper = KeyMapper(self._config.key_map)

    def _create_display(self):
        display_cfg = self._config.display
        self.display_view = DisplayView(display_cfg.scale, display_cfg.foreground, display_cfg.background)
        self.display_view.set_frame(self.machine.get_display())
        self.setCentralWidget(self.display_view)

    # @intent:responsibility 右側のレジスタインスペクタを作成します。
    def _create_status_inspector(self):
        dock = QDockWidget("Registers", self)
        dock.setAllowedAreas(Qt.RightDockWidgetArea | Qt.LeftDockWidgetArea)
        self.register_view = RegisterView()
        self.register_view.set_cpu(self.machine.cpu)
        dock.setWidget(self.register_view)
        self.addDockWidget(Qt.RightDockWidgetArea, dock)
        self.register_dock = dock

    # @intent:responsibility メニューバー (File / Emulation) を作成します。
    def _create_menus(self):
        menu_bar = self.menuBar()

        file_menu = menu_bar.addMenu("&File")
        self.open_action = QAction("Open Game...", self)
        self.open_action.setShortcut("Ctrl+O")
        self.open_action.triggered.connect(self._open_rom)
        file_menu.addAction(self.open_action)
        file_menu.addSeparator()
        exit_action = QAction("Exit", self)
        exit_action.triggered.connect(self.close)
        file_menu.addAction(exit_action)

        emulation_menu = menu_bar.addMenu("&Emulation")
        self.pause_action = QAction("Pause", self)
        self.pause_action.setShortcut("Ctrl+P")
        self.pause_action.triggered.connect(self._toggle_pause)
        emulation_menu.addAction(self.pause_action)

        self.reset_action = QAction("Reset", self)
        self.reset_action.setShortcut("Ctrl+R")
        self.reset_action.triggered.connect(self._reset_program)
        emulation_menu.addAction(self.reset_action)

        speed_menu = emulation_menu.addMenu("Speed")
        self.speed_group = QActionGroup(self)
        self.speed_group.setExclusive(True)
        self.speed_actions = {}
        for name in reversed(list(SPEED_PRESETS)):
            action = QAction(name.capitalize(), self, checkable=True)
            action.setData(name)
            action.setChecked(name == self._config.speed and self._config.cycles_per_tick is None)
            self.speed_group.addAction(action)
            speed_menu.addAction(action)
            self.speed_actions[name] = action
        self.speed_group.triggered.connect(self._change_speed)

        emulation_menu.addSeparator()
        emulation_menu.addAction(self.register_dock.toggleViewAction())

    # --- フレーム駆動 ---
    # @intent:responsibility 1フレーム分の実行、画面更新、サウンド通知、レジスタ表示更新を行います。
    @Slot()
    def _on_frame(self):
        if not self.machine.has_program:
            return
        try:
            executed = self.scheduler.run_frame()
        except EngineFault as e:
            self._report_fault(e)
            return
        if executed == 0:
            return

        if self.machine.display_changed:
            self.display_view.set_frame(self.machine.get_display())
            self.machine.acknowledge_display()

        self._update_sound(self.machine.sound_active)
        if self.register_dock.isVisible():
            self.register_view.update_registers()

    # @intent:responsibility サウンドタイマーが有効になった瞬間（立ち上がりエッジ）に一度だけビープを鳴らし、ステータスバーに表示します。
    # @intent:rationale sound_activeが真の間鳴り続ける音ではなく、エッジで1回鳴る通知音です。波形合成とオーディオデバイス管理はこのアプリケーションの対象外です。
    def _update_sound(self, active: bool) -> None:
        if active and not self._sound_was_active:
            self._beep()
        self._sound_was_active = active

    def _beep(self) -> None:
        QApplication.beep()
        self.statusBar().showMessage("♪", 200)

    def _report_fault(self, fault: EngineFault) -> None:
        self.pause_action.setText("Resume")
        self.statusBar().showMessage(f"Halted: {fault}")
        QMessageBox.critical(self, "Emulation Error", str(fault))

    # --- 入力 ---
    def keyPressEvent(self, event: QKeyEvent):
        if not self._handle_key(event, True):
            super().keyPressEvent(event)

    def keyReleaseEvent(self, event: QKeyEvent):
        if not self._handle_key(event, False):
            super().keyReleaseEvent(event)

    # @intent:responsibility キーイベントをCHIP-8キーに変換して仮想マシンに書き込みます。オートリピートは無視します。
    def _handle_key(self, event: QKeyEvent, pressed: bool) -> bool:
        key = self.key_mapper.lookup(event.key())
        if key is None:
            return False
        if not event.isAutoRepeat():
            self.machine.set_key(key, pressed)
        return True

    # --- メニュー操作 ---
    @Slot()
    def _open_rom(self):
        patterns = " ".join(f"*{ext}" for ext in ROM_EXTENSIONS)
        file_name, _ = QFileDialog.getOpenFileName(
            self, "Open ROM", "", f"CHIP-8 ROMs ({patterns});;All Files (*)"
        )
        if file_name:
            self.load_rom(file_name)

    # @intent:responsibility 指定されたファイルからプログラムをロードします。失敗時はメッセージボックスで通知します。
    def load_rom(self, file_name: str) -> bool:
        try:
            self.machine.load_file(file_name)
        except Chip8Error as e:
            self.statusBar().showMessage("Failed to load ROM")
            QMessageBox.critical(self, "Error", f"Failed to load ROM: {e}")
            return False

        self._after_program_start()
        self.statusBar().showMessage(f"Loaded ROM: {file_name}")
        return True

    @Slot()
    def _reset_program(self):
        if not self.machine.has_program:
            QMessageBox.critical(self, "Error", "No ROM loaded to reset")
            return
        self.machine.reload()
        self._after_program_start()
        self.statusBar().showMessage("ROM reloaded")

    def _after_program_start(self) -> None:
        self.scheduler.restart()
        self.pause_action.setText("Pause")
        self._sound_was_active = False
        self.display_view.set_frame(self.machine.get_display())
        self.register_view.update_registers()

    @Slot()
    def _toggle_pause(self):
        paused = self.scheduler.toggle_pause()
        self.pause_action.setText("Resume" if paused else "Pause")
        self.statusBar().showMessage("Paused" if paused else "Running")

    @Slot(QAction)
    def _change_speed(self, action: QAction):
        self.scheduler.set_speed(action.data())
        self.statusBar().showMessage(f"Speed: {action.text()}")

    # @intent:responsibility アプリケーションにダークテーマのパレットとスタイルシートを適用します。
    def _set_dark_theme(self):
        dark_palette = QPalette()
        dark_palette.setColor(QPalette.Window, QColor(29, 29, 29))
        dark_palette.setColor(QPalette.WindowText, QColor(224, 224, 224))
        dark_palette.setColor(QPalette.Base, QColor(30, 30, 30))
        dark_palette.setColor(QPalette.Text, QColor(224, 224, 224))
        dark_palette.setColor(QPalette.Button, QColor(53, 53, 53))
        dark_palette.setColor(QPalette.ButtonText, QColor(224, 224, 224))
        dark_palette.setColor(QPalette.Highlight, QColor(42, 130, 218))
        dark_palette.setColor(QPalette.HighlightedText, QColor(0, 0, 0))
        QApplication.setPalette(dark_palette)

        self.setStyleSheet(f"""
            QWidget {{ {monospace_stylesheet(10)} }}
            QMainWindow {{ background-color: #1D1D1D; border: none; }}
            QDockWidget::title {{ text-align: left; background: #101010; padding: 4px; font-weight: bold; }}
            QStatusBar {{ background-color: #101010; color: #E0E0E0; }}
        """)

    # @intent:responsibility ウィンドウ終了時にフレームタイマーを停止します。
    def closeEvent(self, event: QCloseEvent):
        self._timer.stop()
        event.accept()
