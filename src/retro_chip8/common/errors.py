"""
例外定義モジュール。

ロード時のエラーと、命令実行中に検出されるエンジンフォールトを定義します。
いずれもプロセスを終了させるものではなく、ホスト側が停止・リセット・無視を判断します。
"""
from typing import Optional


# @intent:responsibility 本パッケージが送出する全ての例外の基底クラスです。
class Chip8Error(Exception):
    pass


# @intent:responsibility プログラムイメージのロードに失敗したことを表します。
class LoadError(Chip8Error):
    pass


# @intent:responsibility プログラムイメージがロード可能領域 (0x200-0xFFF) に収まらないことを表します。
# @intent:rationale ValueErrorも継承し、入力値の不正として扱う呼び出し側とも互換にします。
class ImageTooLarge(LoadError, ValueError):
    def __init__(self, size: int, limit: int):
        super().__init__(f"Program image is {size} bytes; at most {limit} bytes fit at 0x200.")
        self.size = size
        self.limit = limit


# @intent:responsibility プログラムのバイト列をソースから読み出せなかったことを表します。
class SourceUnavailable(LoadError):
    def __init__(self, path: Optional[str], reason: str = ""):
        message = f"Cannot read program image from {path!r}"
        if reason:
            message += f": {reason}"
        super().__init__(message)
        self.path = path


# @intent:responsibility 命令実行中に検出された異常を表します。addressは異常を起こした命令のアドレスです。
class EngineFault(Chip8Error):
    def __init__(self, message: str, address: int):
        super().__init__(f"{message} at {address:#05x}")
        self.address = address


# @intent:responsibility 16段を超えるCALLのネストを表します。
class StackOverflow(EngineFault):
    def __init__(self, address: int):
        super().__init__("Call stack overflow", address)


# @intent:responsibility 空のコールスタックからのRETを表します。
class StackUnderflow(EngineFault):
    def __init__(self, address: int):
        super().__init__("Call stack underflow", address)


# @intent:responsibility 厳格モードで未定義のオペコードを検出したことを表します。
class UnknownOpcode(EngineFault):
    def __init__(self, opcode: int, address: int):
        super().__init__(f"Unknown opcode {opcode:04X}", address)
        self.opcode = opcode
