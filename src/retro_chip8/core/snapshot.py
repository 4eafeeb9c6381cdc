# retro_chip8/core/snapshot.py
"""
実行状態の不変スナップショット

このモジュールは、1命令の実行結果を記録した不変のデータ構造を定義します。
ホスト（UI）への情報提供と、デバッグ時の状態記録に用いる責務を負います。
"""
from dataclasses import dataclass, field
from typing import List, Tuple

from retro_chip8.core.state import CpuState
from retro_chip8.transport.bus import BusAccessType, BusAccess

__all__ = ["BusAccessType", "BusAccess", "Operation", "Metadata", "Snapshot"]


# @intent:responsibility デコードされた命令の詳細を記録します。アーキテクチャ固有の情報はサブクラスで追加します。
@dataclass(frozen=True) # 不変データ構造
class Operation:
    """
    デコードされた命令の詳細（HEX、ニーモニック、オペランド）を記録するデータクラス。
    """
    opcode_hex: str # 例: "A22A"
    mnemonic: str # 例: "LD"
    operands: Tuple[str, ...] = () # 例: ("I", "$22A")
    length: int = 2 # 命令のバイト長

    # @intent:responsibility ニーモニックとオペランドを連結したアセンブリ表記を返します。
    def to_assembly(self) -> str:
        if self.operands:
            return f"{self.mnemonic} {', '.join(self.operands)}"
        return self.mnemonic

# @intent:responsibility 実行に関するメタデータを記録します。
@dataclass(frozen=True) # 不変データ構造
class Metadata:
    """
    実行に関するメタデータ（累計ステップ数、キー入力待ち状態）を記録するデータクラス。
    """
    cycle_count: int
    waiting_for_key: bool = False # Fx0Aでキー入力待ちのためPCが巻き戻された場合True

# @intent:responsibility ある一時点におけるCPUの状態と、その命令で発生したバスアクセスを不変に記録します。
@dataclass(frozen=True) # 不変データ構造
class Snapshot:
    """
    1命令実行直後のCPU状態を記録した不変のデータ構造。
    stateは実行後のレジスタ状態のコピーであり、以後のstepで変化しません。
    """
    state: CpuState
    operation: Operation
    metadata: Metadata
    bus_activity: List[BusAccess] = field(default_factory=list)
