# Copyright (C) 2023 Leiden University Medical Center
# This file is part of fastxinfo
#
# fastxinfo is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as
# published by the Free Software Foundation, either version 3 of the
# License, or (at your option) any later version.
#
# fastxinfo is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU Affero General Public License for more details.
#
# You should have received a copy of the GNU Affero General Public License
# along with fastxinfo.  If not, see <https://www.gnu.org/licenses/

import io
import lzma
import os
import zlib
from typing import BinaryIO, Iterator, Optional

import tqdm

import xopen

import zstandard

DEFAULT_CHUNK_SIZE = 128 * 1024
DEFAULT_PROGRESS_INTERVAL = 10 * 1024 * 1024

# Errors that decompression libraries raise on corrupt or truncated input.
# gzip and bz2 errors are OSError subclasses, xz and zstd errors are not.
DECODE_ERRORS = (OSError, EOFError, zlib.error, lzma.LZMAError,
                 zstandard.ZstdError)


class OpenError(OSError):
    """Raised when an input file can not be opened or decoded."""


class PathResolutionError(OSError):
    """Raised when the absolute path of an input file can not be resolved."""


class ProgressBar:
    """
    Progress through the raw, possibly compressed, input file. It advances
    as decoded chunks are read, but the raw file position is only queried
    once every ``update_every`` decoded bytes since tell() and
    tqdm.update() are not free.
    """
    raw: io.BufferedReader
    update_every: int
    decoded_bytes: int
    reported_position: int
    _since_refresh: int
    bar: tqdm.tqdm

    def __init__(self, raw: io.BufferedReader,
                 update_every: int = DEFAULT_PROGRESS_INTERVAL):
        self.raw = raw
        self.update_every = update_every
        self.decoded_bytes = 0
        self.reported_position = 0
        self._since_refresh = 0
        # Pipes have no size, progress is then counted in decoded bytes.
        total = os.fstat(raw.fileno()).st_size if raw.seekable() else None
        self.bar = tqdm.tqdm(
            desc=f"Scanning {os.path.basename(raw.name)}",
            unit="iB", unit_scale=True, unit_divisor=1024,
            total=total,
            smoothing=0.05,
        )

    def _position(self) -> int:
        if self.raw.seekable():
            return self.raw.tell()
        return self.decoded_bytes

    def refresh(self):
        position = self._position()
        self.bar.update(position - self.reported_position)
        self.reported_position = position

    def advance(self, chunk: bytes):
        self.decoded_bytes += len(chunk)
        self._since_refresh += len(chunk)
        if self._since_refresh >= self.update_every:
            self._since_refresh = 0
            self.refresh()

    def close(self):
        self.refresh()
        self.bar.close()


class SequenceFile:
    """
    A forward-only stream of decoded bytes from a plain or compressed
    sequence file. Compression is detected by xopen from the magic bytes.

    Iterating yields chunks of decoded data, ``read_byte`` returns one byte
    at a time and None at the end of the stream. Both draw from the same
    stream so they can be mixed.
    """
    filepath: str
    raw: io.BufferedReader
    file: BinaryIO
    progress: Optional[ProgressBar]
    format: Optional[str]
    blank_start: bool
    chunk_size: int
    _buffer: bytes
    _buffer_position: int

    def __init__(self, filepath: str, threads: int = 0,
                 progress: bool = False,
                 chunk_size: int = DEFAULT_CHUNK_SIZE):
        if chunk_size < 1:
            raise ValueError(f"chunk_size must be at least 1, got {chunk_size}.")
        self.filepath = filepath
        self.chunk_size = chunk_size
        try:
            self.raw = open(filepath, "rb")  # type: ignore
        except OSError as error:
            raise OpenError(
                f"Failed in opening file {filepath}: "
                f"{error.strerror or error}") from error
        try:
            self.file = xopen.xopen(self.raw, "rb", threads=threads)
        except DECODE_ERRORS as error:
            self.raw.close()
            raise OpenError(
                f"Failed in opening file {filepath}: {error}") from error
        self.progress = ProgressBar(self.raw) if progress else None
        try:
            # Keep the first chunk around so the format can be guessed
            # without relying on the decompressor supporting peek().
            self._buffer = self._read()
        except OpenError:
            self.close()
            raise
        self._buffer_position = 0
        self.format = guess_format_from_data(self._buffer)
        self.blank_start = not self._buffer.strip()

    def _read(self) -> bytes:
        try:
            chunk = self.file.read(self.chunk_size)
        except DECODE_ERRORS as error:
            raise OpenError(
                f"Failed in reading file {self.filepath}: {error}") from error
        if self.progress is not None:
            self.progress.advance(chunk)
        return chunk

    def __iter__(self) -> Iterator[bytes]:
        pending = self._buffer[self._buffer_position:]
        self._buffer = b""
        self._buffer_position = 0
        if pending:
            yield pending
        while True:
            chunk = self._read()
            if not chunk:
                return
            yield chunk

    def read_byte(self) -> Optional[int]:
        if self._buffer_position >= len(self._buffer):
            self._buffer = self._read()
            self._buffer_position = 0
            if not self._buffer:
                return None
        byte = self._buffer[self._buffer_position]
        self._buffer_position += 1
        return byte

    def close(self):
        if self.progress is not None:
            self.progress.close()
        self.file.close()
        self.raw.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


def guess_format_from_data(data: bytes) -> Optional[str]:
    """
    Guess the sequence format from a block of decoded data at the start of
    the file.
    :param data: a block of data
    :return: "FASTA", "FASTQ" or None if the format is not recognized.
    """
    data = data.lstrip()
    if not data:
        # Empty file
        return None
    if data[0] == ord(">"):
        return "FASTA"
    if data[0] == ord("@"):
        return "FASTQ"
    return None
