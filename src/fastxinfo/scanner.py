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

"""
Streaming record scanners for FASTA and FASTQ data.

The scanners classify every byte against an explicit parse state and emit a
Record each time a record boundary is found. They perform no I/O: data is
pushed in with ``step`` (one byte) or ``feed`` (a chunk of bytes) and both
give the same result for any chunking of the same stream.
"""

import enum
import typing
from typing import Iterable, Iterator, List, Optional, Union

DEFAULT_MISSING_CHARACTERS = "Nn?Xx-"
PHRED_OFFSET = 33
# Same set as C's isspace() in the "C" locale.
WHITESPACE = b" \t\n\r\v\f"
NEWLINE = ord("\n")
FASTA_HEADER_START = ord(">")


class Record(typing.NamedTuple):
    sequence_length: int
    gap_count: int = 0
    quality_sum: int = 0


class FastaState(enum.Enum):
    HEADER = enum.auto()
    SEQUENCE = enum.auto()


class FastqLine(enum.IntEnum):
    HEADER = 0
    SEQUENCE = 1
    SEPARATOR = 2
    QUALITY = 3


class FastaScanner:
    """
    Scan FASTA data. A record starts at each '>' that is not part of a
    header line and ends at the next one or at the end of the stream.

    Sequence characters before the first header are attributed to the first
    record. If no header is ever seen the stream holds zero records.
    """
    count_gaps: bool
    missing_characters: bytes
    state: FastaState
    header_seen: bool
    sequence_length: int
    gap_count: int

    def __init__(self, count_gaps: bool = False,
                 missing_characters: str = DEFAULT_MISSING_CHARACTERS):
        if not missing_characters.isascii():
            raise ValueError(f"Missing characters must be ASCII, "
                             f"got {missing_characters!r}.")
        self.count_gaps = count_gaps
        self.missing_characters = missing_characters.encode("ascii")
        self.reset()

    def reset(self):
        self.state = FastaState.SEQUENCE
        self.header_seen = False
        self.sequence_length = 0
        self.gap_count = 0

    def _close_record(self) -> Record:
        record = Record(self.sequence_length, self.gap_count)
        self.sequence_length = 0
        self.gap_count = 0
        return record

    def _start_header(self) -> Optional[Record]:
        record = self._close_record() if self.header_seen else None
        self.header_seen = True
        self.state = FastaState.HEADER
        return record

    def _count_sequence(self, segment: bytes):
        self.sequence_length += len(segment.translate(None, WHITESPACE))
        if self.count_gaps:
            self.gap_count += len(segment) - len(
                segment.translate(None, self.missing_characters))

    def step(self, byte: int) -> Optional[Record]:
        if self.state is FastaState.HEADER:
            if byte == NEWLINE:
                self.state = FastaState.SEQUENCE
            return None
        if byte == FASTA_HEADER_START:
            return self._start_header()
        if byte not in WHITESPACE:
            self.sequence_length += 1
        if self.count_gaps and byte in self.missing_characters:
            self.gap_count += 1
        return None

    def feed(self, data: bytes) -> List[Record]:
        records = []
        position = 0
        end = len(data)
        while position < end:
            if self.state is FastaState.HEADER:
                newline = data.find(b"\n", position)
                if newline == -1:
                    break
                self.state = FastaState.SEQUENCE
                position = newline + 1
                continue
            header_start = data.find(b">", position)
            stop = end if header_start == -1 else header_start
            self._count_sequence(data[position:stop])
            if header_start == -1:
                break
            record = self._start_header()
            if record is not None:
                records.append(record)
            position = header_start + 1
        return records

    def finish(self) -> Optional[Record]:
        """
        Flush the last record at the end of the stream. The last record is
        emitted even when it is empty, as there is no trailing '>' to close
        it. Returns None when the stream contained no header at all.
        The scanner is reset afterwards.
        """
        record = self._close_record() if self.header_seen else None
        self.reset()
        return record


class FastqScanner:
    """
    Scan FASTQ data as a cycle of four newline-terminated lines: header,
    sequence, separator and qualities. Only complete records are emitted,
    a trailing record without its fourth newline is dropped.
    """
    count_quality: bool
    line: FastqLine
    sequence_length: int
    quality_sum: int

    def __init__(self, count_quality: bool = False):
        self.count_quality = count_quality
        self.reset()

    def reset(self):
        self.line = FastqLine.HEADER
        self.sequence_length = 0
        self.quality_sum = 0

    def _end_line(self) -> Optional[Record]:
        if self.line is FastqLine.QUALITY:
            record = Record(self.sequence_length, quality_sum=self.quality_sum)
            self.reset()
            return record
        self.line = FastqLine(self.line + 1)
        return None

    def step(self, byte: int) -> Optional[Record]:
        if byte == NEWLINE:
            return self._end_line()
        if byte in WHITESPACE:
            return None
        if self.line is FastqLine.SEQUENCE:
            self.sequence_length += 1
        elif self.line is FastqLine.QUALITY and self.count_quality:
            self.quality_sum += byte - PHRED_OFFSET
        return None

    def feed(self, data: bytes) -> List[Record]:
        records = []
        position = 0
        end = len(data)
        while position < end:
            newline = data.find(b"\n", position)
            stop = end if newline == -1 else newline
            if self.line is FastqLine.SEQUENCE:
                self.sequence_length += len(
                    data[position:stop].translate(None, WHITESPACE))
            elif self.line is FastqLine.QUALITY and self.count_quality:
                qualities = data[position:stop].translate(None, WHITESPACE)
                self.quality_sum += sum(qualities) - PHRED_OFFSET * len(qualities)
            if newline == -1:
                break
            record = self._end_line()
            if record is not None:
                records.append(record)
            position = newline + 1
        return records

    def finish(self) -> Optional[Record]:
        self.reset()
        return None


Scanner = Union[FastaScanner, FastqScanner]


def scan(scanner: Scanner, chunks: Iterable[bytes]) -> Iterator[Record]:
    for chunk in chunks:
        yield from scanner.feed(chunk)
    record = scanner.finish()
    if record is not None:
        yield record
