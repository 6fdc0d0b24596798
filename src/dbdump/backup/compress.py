"""Dump compression

Streams a dump artifact through zstandard into a sibling ``.zst`` file.
The source is only removed after the compressed file is flushed, synced
and closed; on failure the partial output is removed and the source kept.
"""

import os
from pathlib import Path
from typing import Optional

import zstandard

from dbdump.backup.artifacts import COMPRESSED_SUFFIX
from dbdump.exceptions import CompressionError
from dbdump.logger import Logger

DEFAULT_LEVEL = 19
CHUNK_SIZE = 1024 * 1024


class Compressor:
    """High-ratio streaming zstd compression of opaque files"""

    def __init__(self, level: int = DEFAULT_LEVEL, keep_source: bool = False, logger: Optional[Logger] = None):
        """
        Args:
            level: zstd compression level (1-22)
            keep_source: Preserve the uncompressed input after success
            logger: Optional logger for size reporting
        """
        if not 1 <= level <= zstandard.MAX_COMPRESSION_LEVEL:
            raise ValueError(f"Compression level must be 1-{zstandard.MAX_COMPRESSION_LEVEL}, got {level}")
        self.level = level
        self.keep_source = keep_source
        self.logger = logger

    def compress(self, input_path: "str | Path") -> Path:
        """Compress ``input_path`` to ``<input_path>.zst``

        Returns:
            Path of the compressed artifact

        Raises:
            CompressionError: Reading, encoding or writing failed
        """
        input_path = Path(input_path)
        output_path = input_path.with_name(input_path.name + COMPRESSED_SUFFIX)
        cctx = zstandard.ZstdCompressor(level=self.level)

        try:
            with open(input_path, "rb") as src, open(output_path, "wb") as dst:
                read, written = cctx.copy_stream(src, dst, read_size=CHUNK_SIZE, write_size=CHUNK_SIZE)
                dst.flush()
                os.fsync(dst.fileno())
        except (OSError, zstandard.ZstdError) as e:
            _remove_partial(output_path)
            raise CompressionError(
                f"Failed to compress {input_path.name}: {e}",
                details={"input": str(input_path)},
            ) from e

        if self.logger is not None:
            ratio = (1 - written / read) * 100 if read else 0
            self.logger.info(
                "Compression complete",
                artifact=output_path.name,
                raw_bytes=read,
                compressed_bytes=written,
                ratio=f"{ratio:.1f}%",
            )

        if not self.keep_source:
            try:
                input_path.unlink()
            except FileNotFoundError:
                pass
            except OSError as e:
                if self.logger is not None:
                    self.logger.warning("Failed to remove uncompressed dump", path=str(input_path), error=str(e))

        return output_path


def _remove_partial(path: Path) -> None:
    try:
        path.unlink()
    except FileNotFoundError:
        pass
