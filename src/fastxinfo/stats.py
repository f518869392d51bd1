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

import typing
from typing import Iterable, Optional

from .scanner import (DEFAULT_MISSING_CHARACTERS, FastaScanner, FastqScanner,
                      Record, Scanner, scan)
from .util import OpenError, SequenceFile


class Summary(typing.NamedTuple):
    record_count: int
    min_length: int
    max_length: int
    mean_length: int
    min_gap_fraction: Optional[float] = None
    max_gap_fraction: Optional[float] = None
    mean_gap_fraction: Optional[float] = None
    mean_quality: Optional[int] = None


def divide_and_round(numerator: int, denominator: int) -> int:
    """
    Divide two integers and round the result to the nearest integer. Halves
    are rounded away from zero, like C's round(), rather than to even like
    Python's round(). Integer arithmetic is used so large sums are exact.
    """
    if denominator == 0:
        raise ZeroDivisionError("division by zero")
    quotient, remainder = divmod(abs(numerator), abs(denominator))
    if 2 * remainder >= abs(denominator):
        quotient += 1
    if (numerator < 0) != (denominator < 0):
        return -quotient
    return quotient


class RecordAccumulator:
    """
    Fold closed records into running per-file aggregates.

    Minimum and maximum length only consider non-empty records. When
    ``empty_record_sets_minimum`` is set (FASTA) an empty record forces the
    minimum length to 0, otherwise (FASTQ) empty records do not influence
    the minimum at all. A record without gaps forces the minimum gap
    fraction to 0. Mean quality is a mean of rounded per-record means where
    records with a zero quality sum add nothing but still count.
    """
    count_gaps: bool
    count_quality: bool
    empty_record_sets_minimum: bool
    record_count: int
    length_sum: int
    min_length: Optional[int]
    max_length: Optional[int]
    min_gap_fraction: float
    max_gap_fraction: float
    gap_fraction_sum: float
    quality_sum_total: int

    def __init__(self, count_gaps: bool = False, count_quality: bool = False,
                 empty_record_sets_minimum: bool = True):
        self.count_gaps = count_gaps
        self.count_quality = count_quality
        self.empty_record_sets_minimum = empty_record_sets_minimum
        self.record_count = 0
        self.length_sum = 0
        # None means no record has set it yet.
        self.min_length = None
        self.max_length = None
        self.min_gap_fraction = 1.0
        self.max_gap_fraction = 0.0
        self.gap_fraction_sum = 0.0
        self.quality_sum_total = 0

    def add_record(self, record: Record):
        length = record.sequence_length
        self.record_count += 1
        self.length_sum += length
        if length > 0:
            if self.max_length is None or length > self.max_length:
                self.max_length = length
            if self.min_length is None or length < self.min_length:
                self.min_length = length
        elif self.empty_record_sets_minimum:
            self.min_length = 0

        if self.count_gaps:
            if record.gap_count > 0:
                if length > 0:
                    fraction = record.gap_count / length
                    if fraction > self.max_gap_fraction:
                        self.max_gap_fraction = fraction
                    if fraction < self.min_gap_fraction:
                        self.min_gap_fraction = fraction
                    self.gap_fraction_sum += fraction
            else:
                self.min_gap_fraction = 0.0

        if self.count_quality and record.quality_sum != 0 and length > 0:
            self.quality_sum_total += divide_and_round(record.quality_sum,
                                                       length)

    def summary(self) -> Summary:
        if self.record_count == 0:
            return Summary(
                0, 0, 0, 0,
                min_gap_fraction=0.0 if self.count_gaps else None,
                max_gap_fraction=0.0 if self.count_gaps else None,
                mean_gap_fraction=0.0 if self.count_gaps else None,
                mean_quality=0 if self.count_quality else None,
            )
        if self.count_gaps:
            min_gap_fraction: Optional[float] = self.min_gap_fraction
            max_gap_fraction: Optional[float] = self.max_gap_fraction
            if self.gap_fraction_sum > 0:
                mean_gap_fraction: Optional[float] = (
                    self.gap_fraction_sum / self.record_count)
            else:
                mean_gap_fraction = 0.0
        else:
            min_gap_fraction = max_gap_fraction = mean_gap_fraction = None
        if self.count_quality:
            mean_quality: Optional[int] = divide_and_round(
                self.quality_sum_total, self.record_count)
        else:
            mean_quality = None
        return Summary(
            record_count=self.record_count,
            # All records empty: nothing ever set these.
            min_length=self.min_length or 0,
            max_length=self.max_length or 0,
            mean_length=divide_and_round(self.length_sum, self.record_count),
            min_gap_fraction=min_gap_fraction,
            max_gap_fraction=max_gap_fraction,
            mean_gap_fraction=mean_gap_fraction,
            mean_quality=mean_quality,
        )


def accumulator_for_fasta(count_gaps: bool = False) -> RecordAccumulator:
    return RecordAccumulator(count_gaps=count_gaps,
                             empty_record_sets_minimum=True)


def accumulator_for_fastq(count_quality: bool = False) -> RecordAccumulator:
    return RecordAccumulator(count_quality=count_quality,
                             empty_record_sets_minimum=False)


def summarize(chunks: Iterable[bytes], scanner: Scanner,
              accumulator: RecordAccumulator) -> Summary:
    for record in scan(scanner, chunks):
        accumulator.add_record(record)
    return accumulator.summary()


def summarize_file(filepath: str,
                   file_format: Optional[str] = None,
                   count_gaps: bool = False,
                   missing_characters: str = DEFAULT_MISSING_CHARACTERS,
                   count_quality: bool = False,
                   threads: int = 0,
                   progress: bool = False) -> Summary:
    """
    Summarize a plain or compressed FASTA or FASTQ file.

    :param filepath: path to the sequence file.
    :param file_format: "FASTA" or "FASTQ". None guesses the format from
        the first byte of the decoded data. Files that start blank are
        treated as FASTA.
    :param count_gaps: report missing data fractions (FASTA only).
    :param missing_characters: the characters that count as missing data.
    :param count_quality: report mean quality (FASTQ only).
    :param threads: number of background decompression threads.
    :param progress: show a progress bar on stderr.
    """
    with SequenceFile(filepath, threads=threads,
                      progress=progress) as sequence_file:
        if file_format is None:
            file_format = sequence_file.format
            if file_format is None:
                if not sequence_file.blank_start:
                    raise OpenError(
                        f"Unrecognized sequence format in {filepath}: "
                        f"expected FASTA or FASTQ.")
                file_format = "FASTA"
        scanner: Scanner
        if file_format == "FASTA":
            scanner = FastaScanner(count_gaps, missing_characters)
            accumulator = accumulator_for_fasta(count_gaps)
        elif file_format == "FASTQ":
            scanner = FastqScanner(count_quality)
            accumulator = accumulator_for_fastq(count_quality)
        else:
            raise ValueError(f"Unsupported format: {file_format}")
        return summarize(sequence_file, scanner, accumulator)
