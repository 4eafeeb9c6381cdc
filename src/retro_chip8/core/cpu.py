# retro_chip8/core/cpu.py
"""
Core Layer (命令サイクル)

フェッチ・デコード・実行の1サイクルを定義する抽象基底クラスを提供します。
個々の命令の意味はarch/chip8/instructionsに、レジスタ構成はarch/chip8/stateに置かれます。
"""
from abc import ABC, abstractmethod
from typing import Dict, List

from retro_chip8.transport.bus import Bus
from retro_chip8.core.snapshot import Snapshot, Operation, Metadata
from retro_chip8.core.state import CpuState
from retro_chip8.common.types import RegisterLayoutInfo, DisassemblyLine

# @intent:responsibility 命令サイクルの共通手順と、インスペクタ（UI）向けの問い合わせインターフェースを定義します。
class AbstractCpu(ABC):
    """
    1回のstep()で1命令を完了させる同期的なCPUモデル。

    サブクラスが実装するもの:
      - _create_initial_state: 電源投入直後のレジスタ
      - _fetch / _decode / _execute: 命令サイクルの各段
      - get_register_map など: UIがCPUの内部構造を知らずに表示するための情報
    """
    def __init__(self, bus: Bus):
        self._bus = bus
        self._cycle_count = 0
        self._state: CpuState = self._create_initial_state()

    @abstractmethod
    def _create_initial_state(self) -> CpuState:
        pass

    # @intent:responsibility レジスタを初期状態に作り直し、累計ステップ数をゼロに戻します。
    def reset(self) -> None:
        self._state = self._create_initial_state()
        self._cycle_count = 0

    # @intent:responsibility 現在のレジスタ状態を返します。返されるのは実体であり、変更は即座にCPUへ反映されます。
    def get_state(self) -> CpuState:
        return self._state

    def get_cycle_count(self) -> int:
        return self._cycle_count

    # @intent:responsibility PCが指す位置からオペコードを読み出します。PCは変更しません。
    @abstractmethod
    def _fetch(self) -> int:
        pass

    @abstractmethod
    def _decode(self, opcode: int) -> Operation:
        pass

    # @intent:responsibility 命令を実行します。呼び出し時点でPCは既に次の命令を指しています。
    @abstractmethod
    def _execute(self, operation: Operation) -> None:
        pass

    # @intent:responsibility 1命令を実行し、実行後の状態とその命令によるバスアクセスをSnapshotとして返します。
    # @intent:rationale 手順（ログ破棄→フェッチ→デコード→PC前進→実行→Snapshot）はここで固定し、各段のみを差し替え可能にします。
    def step(self) -> Snapshot:
        self._bus.get_and_clear_activity_log()
        pc_before = self._state.pc

        operation = self._decode(self._fetch())
        self._update_pc(operation)
        self._execute(operation)

        return self._create_snapshot(pc_before, operation)

    # @intent:responsibility 実行前にPCを命令長だけ進めます。ジャンプ・スキップ・キー待ちは実行時にPCを書き換えます。
    def _update_pc(self, operation: Operation) -> None:
        self._state.pc = (self._state.pc + operation.length) & 0xFFFF

    def _create_snapshot(self, pc_before: int, operation: Operation) -> Snapshot:
        bus_activity = self._bus.get_and_clear_activity_log()
        self._cycle_count += 1
        return Snapshot(
            state=self._state.clone(),
            operation=operation,
            metadata=self._create_metadata(pc_before, operation),
            bus_activity=bus_activity,
        )

    # @intent:responsibility Snapshotに付けるメタデータを生成します。キー待ちなどの追加情報はサブクラスが付与します。
    def _create_metadata(self, pc_before: int, operation: Operation) -> Metadata:
        return Metadata(cycle_count=self._cycle_count)

    # --- インスペクタ向けAPI ---
    @abstractmethod
    def get_register_map(self) -> Dict[str, int]:
        """レジスタ名から現在値への辞書。"""
        pass

    @abstractmethod
    def get_register_layout(self) -> List[RegisterLayoutInfo]:
        """レジスタ表示のグループ分けとビット幅。"""
        pass

    @abstractmethod
    def get_flag_state(self) -> Dict[str, bool]:
        pass

    @abstractmethod
    def disassemble(self, start_addr: int, length: int) -> List[DisassemblyLine]:
        pass
