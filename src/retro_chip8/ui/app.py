# src/retro_chip8/ui/app.py
"""
PySide6アプリケーションのエントリポイント。
コマンドライン引数と設定ファイルを解釈し、メインウィンドウを起動します。
"""
import argparse
import logging
import sys
from typing import List, Optional

from PySide6.QtWidgets import QApplication

from retro_chip8.config.loader import ConfigLoader
from retro_chip8.config.models import MachineConfig
from retro_chip8.host.scheduler import SPEED_PRESETS
from .main_window import MainWindow

def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="retro-chip8", description="CHIP-8 emulator")
    parser.add_argument("rom", nargs="?", help="program image to load (.ch8 / .rom)")
    parser.add_argument("--config", help="YAML configuration file")
    parser.add_argument("--speed", choices=list(SPEED_PRESETS), help="override the configured speed preset")
    parser.add_argument("--log-level", default="WARNING",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"], help="logging verbosity")
    return parser

# @intent:responsibility 引数から実行時の構成を組み立てます。--speedは設定ファイルのcycles_per_tickより優先されます。
def load_config(args: argparse.Namespace) -> MachineConfig:
    config = ConfigLoader().load_from_file(args.config) if args.config else MachineConfig()
    if args.speed:
        config.speed = args.speed
        config.cycles_per_tick = None
    return config

# @intent:responsibility アプリケーションを起動し、メインウィンドウを表示します。
def main(argv: Optional[List[str]] = None):
    args = build_arg_parser().parse_args(argv)
    logging.basicConfig(level=args.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    app = QApplication(sys.argv[:1])
    main_win = MainWindow(load_config(args))
    if args.rom:
        main_win.load_rom(args.rom)
    main_win.show()
    sys.exit(app.exec())

if __name__ == '__main__':
    main()
