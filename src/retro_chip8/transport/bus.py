# retro_chip8/transport/bus.py
"""
Transport Layer (メモリバス)

4KBのアドレス空間をデバイスに割り当て、命令実行中の読み書きを記録します。
CHIP-8ではメモリはRAM 1枚のみですが、アドレス解決とアクセス記録はこの層に閉じ込めます。
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import List, NamedTuple, Tuple

class BusAccessType(Enum):
    READ = "READ"
    WRITE = "WRITE"

# @intent:responsibility 命令が行った1回分のメモリアクセスを記録します。Snapshotのbus_activityに格納されます。
@dataclass(frozen=True)
class BusAccess:
    address: int
    data: int
    access_type: BusAccessType

# @intent:responsibility バスに接続できるデバイスのインターフェースです。アドレスはデバイス先頭からのオフセットです。
class Device(ABC):
    @abstractmethod
    def read(self, address: int) -> int:
        pass

    @abstractmethod
    def write(self, address: int, data: int) -> None:
        pass

    # @intent:responsibility 電源投入直後の内容（全ゼロ）に戻します。仮想マシンのreset時に呼ばれます。
    @abstractmethod
    def clear(self) -> None:
        pass

# @intent:responsibility バイト単位で読み書きできるメモリです。プログラム、フォント、作業領域を全て保持します。
class RAM(Device):
    # @intent:pre-condition sizeは正の整数であること。
    def __init__(self, size: int):
        if not isinstance(size, int) or size <= 0:
            raise ValueError("RAM size must be a positive integer.")
        self._size = size
        self._memory = bytearray(size)

    def _check_address(self, address: int) -> None:
        if address < 0 or address >= self._size:
            raise IndexError(f"Address {address} out of bounds for RAM of size {self._size}.")

    def read(self, address: int) -> int:
        self._check_address(address)
        return self._memory[address]

    # @intent:pre-condition dataは0-255の範囲であること。範囲外の場合はValueErrorとし、メモリは変更しません。
    def write(self, address: int, data: int) -> None:
        self._check_address(address)
        if data < 0 or data > 0xFF:
            raise ValueError(f"Data {data} is not an 8-bit value.")
        self._memory[address] = data

    # @intent:responsibility バイト列を連続領域にまとめて書き込みます。プログラムとフォントのロード専用です。
    # @intent:pre-condition 範囲全体がRAMに収まること。収まらない場合は1バイトも書き込みません。
    def load_block(self, address: int, data: bytes) -> None:
        end = address + len(data)
        if address < 0 or end > self._size:
            raise IndexError(f"Block {address:#06x}-{end:#06x} does not fit in RAM of size {self._size}.")
        self._memory[address:end] = data

    def clear(self) -> None:
        self._memory[:] = bytes(self._size)

    def get_size(self) -> int:
        return self._size

class MappedRegion(NamedTuple):
    start: int
    end: int  # 終端アドレス（この番地を含む）
    device: Device

# @intent:responsibility アドレスをデバイスとオフセットに解決し、命令によるアクセスを時系列で記録します。
# @intent:rationale peekとloadは記録しません。Snapshotに残るのは命令自身のアクセスだけになります。
class Bus:
    def __init__(self):
        self._regions: List[MappedRegion] = []
        self._activity: List[BusAccess] = []

    # @intent:responsibility [start_address, end_address] の範囲にデバイスを割り当てます。
    # @intent:pre-condition RAMの場合はサイズが範囲の長さと一致すること。範囲の重複は検査しません。
    def register_device(self, start_address: int, end_address: int, device: Device) -> None:
        if start_address < 0 or end_address < start_address:
            raise ValueError("Invalid address range: start_address must be <= end_address and non-negative.")
        if not isinstance(device, Device):
            raise TypeError("Device must be an instance of a class derived from Device.")
        span = end_address - start_address + 1
        if isinstance(device, RAM) and device.get_size() != span:
            raise ValueError(
                f"Registered {type(device).__name__} device size ({device.get_size()} bytes) does not match "
                f"the specified address range size ({span} bytes)."
            )
        self._regions.append(MappedRegion(start_address, end_address, device))

    def _resolve(self, address: int) -> Tuple[Device, int]:
        for region in self._regions:
            if region.start <= address <= region.end:
                return region.device, address - region.start
        raise IndexError(f"Address {address:#06x} not mapped to any device.")

    def read(self, address: int) -> int:
        device, offset = self._resolve(address)
        data = device.read(offset)
        self._activity.append(BusAccess(address, data, BusAccessType.READ))
        return data

    def write(self, address: int, data: int) -> None:
        device, offset = self._resolve(address)
        device.write(offset, data)
        self._activity.append(BusAccess(address, data, BusAccessType.WRITE))

    # @intent:responsibility 記録を残さずに1バイト読み出します。逆アセンブラとUI用です。
    def peek(self, address: int) -> int:
        device, offset = self._resolve(address)
        return device.read(offset)

    # @intent:responsibility 記録を残さずにバイト列を書き込みます。
    # @intent:pre-condition 書き込み先はRAMであり、範囲全体が同じRAMに収まること。
    def load(self, address: int, data: bytes) -> None:
        if not data:
            return
        device, offset = self._resolve(address)
        if not isinstance(device, RAM):
            raise TypeError(f"Device at {address:#06x} does not support block loading.")
        device.load_block(offset, bytes(data))

    # @intent:responsibility これまでのアクセス記録を返し、記録を空にします。
    def get_and_clear_activity_log(self) -> List[BusAccess]:
        activity, self._activity = self._activity, []
        return activity

    # @intent:responsibility 全デバイスをゼロクリアし、未回収のアクセス記録も破棄します。
    def clear(self) -> None:
        for region in self._regions:
            region.device.clear()
        self._activity = []
