# tests/core/test_snapshot.py
"""
retro_chip8.core.snapshotモジュールの単体テスト。
"""
import pytest
from retro_chip8.core.state import CpuState
from retro_chip8.core.snapshot import (
    BusAccessType,
    BusAccess,
    Operation,
    Metadata,
    Snapshot,
)

# @intent:test_suite CPUとバスの状態を記録する不変スナップショットデータ構造の検証。

class TestOperation:
    """
    Operationデータクラスの単体テスト。
    """
    # @intent:test_case_defaults Operationのデフォルト値（オペランドなし、長さ2）を検証します。
    def test_operation_defaults(self):
        op = Operation(opcode_hex="00E0", mnemonic="CLS")
        assert op.operands == ()
        assert op.length == 2
        assert op.to_assembly() == "CLS"

    # @intent:test_case_assembly オペランドがカンマ区切りで連結されることを検証します。
    def test_operation_to_assembly(self):
        op = Operation(opcode_hex="D015", mnemonic="DRW", operands=("V0", "V1", "5"))
        assert op.to_assembly() == "DRW V0, V1, 5"

    # @intent:test_case_immutability Operationが不変であることを検証します。
    def test_operation_immutability(self):
        op = Operation(opcode_hex="1200", mnemonic="JP", operands=("$200",))
        with pytest.raises(AttributeError):
            op.mnemonic = "CALL"

class TestMetadata:
    # @intent:test_case_init キー待ちフラグのデフォルトがFalseであることを検証します。
    def test_metadata_defaults(self):
        meta = Metadata(cycle_count=3)
        assert meta.cycle_count == 3
        assert meta.waiting_for_key is False

class TestSnapshot:
    """
    Snapshotデータクラスの単体テスト。
    """
    # @intent:test_case_init Snapshotが全ての要素を保持し、不変であることを検証します。
    def test_snapshot_init_and_immutability(self):
        state = CpuState(pc=0x202, sp=1)
        op = Operation(opcode_hex="6005", mnemonic="LD", operands=("V0", "$05"))
        access = BusAccess(address=0x200, data=0x60, access_type=BusAccessType.READ)
        snapshot = Snapshot(state=state, operation=op, metadata=Metadata(cycle_count=1), bus_activity=[access])

        assert snapshot.state.pc == 0x202
        assert snapshot.operation is op
        assert snapshot.bus_activity == [access]
        with pytest.raises(AttributeError):
            snapshot.state = CpuState()

    # @intent:test_case_defaults bus_activityのデフォルトがインスタンスごとに独立した空リストであることを検証します。
    def test_snapshot_default_bus_activity(self):
        op = Operation(opcode_hex="00E0", mnemonic="CLS")
        first = Snapshot(state=CpuState(), operation=op, metadata=Metadata(cycle_count=0))
        second = Snapshot(state=CpuState(), operation=op, metadata=Metadata(cycle_count=0))
        assert first.bus_activity == []
        assert first.bus_activity is not second.bus_activity
