# retro_chip8/loader/loader.py
"""
プログラムイメージローダーモジュール。
ヘッダを持たない生のバイナリ (.ch8 / .rom) を読み込み、サイズを検証します。
"""
import logging
import os
from typing import Union

from retro_chip8.common.errors import ImageTooLarge, SourceUnavailable
from retro_chip8.arch.chip8.state import MEMORY_SIZE, PROGRAM_START

logger = logging.getLogger(__name__)

# @intent:constant 0x200から4KB末尾までに収まる最大イメージサイズ (3584バイト)。
MAX_IMAGE_SIZE = MEMORY_SIZE - PROGRAM_START

# @intent:constant ファイル選択ダイアログで使用する拡張子。
ROM_EXTENSIONS = (".ch8", ".rom")

PathLike = Union[str, "os.PathLike[str]"]


# @intent:responsibility イメージがロード可能領域に収まることを検証します。収まらない場合はImageTooLargeを送出します。
def validate_image(image: bytes) -> None:
    if len(image) > MAX_IMAGE_SIZE:
        raise ImageTooLarge(len(image), MAX_IMAGE_SIZE)


class RomLoader:
    """
    ファイルシステムからCHIP-8プログラムイメージを読み込むローダー。
    読み込みに失敗した場合、OSErrorはSourceUnavailableに変換されます。
    """
    def read_image(self, file_path: PathLike) -> bytes:
        path = os.fspath(file_path)
        try:
            with open(path, 'rb') as f:
                image = f.read()
        except OSError as e:
            logger.warning("Cannot read program image %s: %s", path, e)
            raise SourceUnavailable(path, e.strerror or str(e)) from e

        validate_image(image)
        logger.debug("Read %d bytes from %s", len(image), path)
        return image
