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

import math
from pathlib import Path

import pytest

from fastxinfo import (FastaScanner, FastqScanner, OpenError, Record,
                       RecordAccumulator, Summary, accumulator_for_fasta,
                       accumulator_for_fastq, divide_and_round, summarize,
                       summarize_file)

DATA = Path(__file__).parent / "data"


def fasta_summary(data: bytes, count_gaps: bool = False) -> Summary:
    return summarize([data], FastaScanner(count_gaps=count_gaps),
                     accumulator_for_fasta(count_gaps=count_gaps))


def fastq_summary(data: bytes, count_quality: bool = False) -> Summary:
    return summarize([data], FastqScanner(count_quality=count_quality),
                     accumulator_for_fastq(count_quality=count_quality))


@pytest.mark.parametrize(["numerator", "denominator", "result"], [
    (0, 1, 0),
    (6, 2, 3),
    (7, 2, 4),
    (5, 2, 3),
    (1, 3, 0),
    (2, 3, 1),
    (-5, 2, -3),
    (-7, 3, -2),
    (5, -2, -3),
    (10 ** 30 + 1, 2, 5 * 10 ** 29 + 1),
])
def test_divide_and_round(numerator, denominator, result):
    assert divide_and_round(numerator, denominator) == result


def test_divide_and_round_zero():
    with pytest.raises(ZeroDivisionError):
        divide_and_round(1, 0)


def test_fasta_concrete_scenario():
    summary = fasta_summary(b">s1\nACGT\n>s2\nAC\n")
    assert summary == Summary(2, 2, 4, 3)


def test_fasta_concrete_scenario_gaps():
    summary = fasta_summary(b">s1\nACGT\n>s2\nAC\n", count_gaps=True)
    assert summary == Summary(2, 2, 4, 3, 0.0, 0.0, 0.0)


def test_fasta_zero_records():
    assert fasta_summary(b"") == Summary(0, 0, 0, 0)
    assert fasta_summary(b"ACGT\n") == Summary(0, 0, 0, 0)
    assert fasta_summary(b"", count_gaps=True) == Summary(
        0, 0, 0, 0, 0.0, 0.0, 0.0)


def test_fasta_single_empty_record():
    assert fasta_summary(b">only\n\n") == Summary(1, 0, 0, 0)


def test_fasta_empty_record_forces_minimum():
    summary = fasta_summary(b">a\nACGT\n>b\n>c\nACGTACGT\n")
    assert summary.min_length == 0
    assert summary.max_length == 8
    assert summary.mean_length == 4


def test_fasta_empty_first_record_forces_minimum():
    summary = fasta_summary(b">a\n>b\nACGTACGT\n")
    assert summary == Summary(2, 0, 8, 4)


def test_fasta_gap_fractions():
    summary = fasta_summary(b">a\nNNAA\n>b\nNAAAAAAA\n", count_gaps=True)
    assert summary.min_gap_fraction == 0.125
    assert summary.max_gap_fraction == 0.5
    assert summary.mean_gap_fraction == pytest.approx(0.3125)


def test_fasta_record_without_gaps_forces_minimum_gap():
    summary = fasta_summary(b">a\nNNAA\n>b\nAAAA\n>c\nNNNN\n", count_gaps=True)
    assert summary.min_gap_fraction == 0.0
    assert summary.max_gap_fraction == 1.0
    assert summary.mean_gap_fraction == pytest.approx(0.5)


def test_fasta_all_gap_record():
    summary = fasta_summary(b">a\nNNNN\n", count_gaps=True)
    assert summary == Summary(1, 4, 4, 4, 1.0, 1.0, 1.0)


def test_fasta_empty_record_gap_fraction_is_not_nan():
    summary = fasta_summary(b">a\nNN\n>b\n", count_gaps=True)
    assert summary.min_gap_fraction == 0.0
    assert summary.max_gap_fraction == 1.0
    assert not math.isnan(summary.mean_gap_fraction)
    assert summary.mean_gap_fraction == 0.5


def test_fasta_mean_rounds_half_away_from_zero():
    # 5 / 2 = 2.5 rounds to 3, not to even.
    summary = fasta_summary(b">a\nAA\n>b\nAAA\n")
    assert summary.mean_length == 3


@pytest.mark.parametrize("data", [
    b">a\nA\n",
    b">a\nACGT\n>b\nA\n>c\nACGTACGTAA\n",
    b">a\n\n>b\nACG\n",
])
def test_fasta_mean_between_min_and_max(data):
    summary = fasta_summary(data)
    assert summary.min_length <= summary.mean_length <= summary.max_length


def test_fasta_concatenation():
    first = b">a\nACGTACGT\n"
    second = b">b\nACG\n"
    summary = fasta_summary(first + second)
    assert summary.record_count == 2
    assert summary.min_length == 3
    assert summary.max_length == 8
    accumulator = accumulator_for_fasta()
    summarize([first + second], FastaScanner(), accumulator)
    assert accumulator.length_sum == 11


def test_fasta_chunking_does_not_matter():
    data = b">s1 desc\nACGTNNNN\nACGT\n>s2\nAC-?\n>s3\nACGTACGTAC\n"
    chunks = [data[i: i + 5] for i in range(0, len(data), 5)]
    assert (summarize(chunks, FastaScanner(True), accumulator_for_fasta(True))
            == fasta_summary(data, count_gaps=True))


def test_summarize_twice_is_identical():
    data = b">a\nACGTN\n>b\n\n>c\nNN\n"
    assert fasta_summary(data, True) == fasta_summary(data, True)


def test_fastq_concrete_scenario_quality():
    summary = fastq_summary(b"@r1\nACGT\n+\n!!!!\n", count_quality=True)
    assert summary == Summary(1, 4, 4, 4, mean_quality=0)


def test_fastq_zero_records():
    assert fastq_summary(b"", count_quality=True) == Summary(
        0, 0, 0, 0, mean_quality=0)
    assert fastq_summary(b"@r1\nACGT\n+\nIIII") == Summary(0, 0, 0, 0)


def test_fastq_empty_record_does_not_set_minimum():
    summary = fastq_summary(b"@r1\n\n+\n\n@r2\nACGT\n+\nIIII\n")
    assert summary == Summary(2, 4, 4, 2)


def test_fastq_all_empty_records():
    summary = fastq_summary(b"@r1\n\n+\n\n@r2\n\n+\n\n")
    assert summary == Summary(2, 0, 0, 0)


def test_fastq_mean_of_means():
    # Per record means: 40 and 30. A zero quality record adds nothing but
    # still counts: (40 + 30 + 0) / 3 = 23.3 -> 23.
    data = (b"@r1\nAC\n+\nII\n"
            b"@r2\nACGT\n+\n????\n"
            b"@r3\nACGTACGT\n+\n!!!!!!!!\n")
    summary = fastq_summary(data, count_quality=True)
    assert summary.mean_quality == 23


def test_fastq_record_mean_is_rounded():
    # (40 + 40 + 10) / 3 = 30, (40 + 10) / 2 = 25
    data = b"@r1\nACG\n+\nII+\n@r2\nAC\n+\nI+\n"
    accumulator = accumulator_for_fastq(count_quality=True)
    summarize([data], FastqScanner(True), accumulator)
    assert accumulator.quality_sum_total == 55
    assert accumulator.summary().mean_quality == 28


def test_accumulator_without_modes_reports_none():
    accumulator = RecordAccumulator()
    accumulator.add_record(Record(10, gap_count=3, quality_sum=100))
    summary = accumulator.summary()
    assert summary.min_gap_fraction is None
    assert summary.mean_quality is None


def test_accumulator_quality_guards_empty_sequence():
    accumulator = accumulator_for_fastq(count_quality=True)
    accumulator.add_record(Record(0, quality_sum=40))
    assert accumulator.summary() == Summary(1, 0, 0, 0, mean_quality=0)


def test_summarize_file_fasta():
    summary = summarize_file(str(DATA / "gaps.fasta"), "FASTA",
                             count_gaps=True)
    assert summary.record_count == 3
    assert summary.min_length == 4
    assert summary.max_length == 12
    assert summary.mean_length == 9
    assert summary.min_gap_fraction == 0.0
    assert summary.max_gap_fraction == 0.5
    assert summary.mean_gap_fraction == pytest.approx((4 / 12 + 0.5) / 3)


def test_summarize_file_fastq():
    summary = summarize_file(str(DATA / "simple.fastq"), "FASTQ",
                             count_quality=True)
    assert summary == Summary(3, 7, 8, 7, mean_quality=40)


@pytest.mark.parametrize(["filename", "record_count"], [
    ("simple.fasta", 2),
    ("simple.fasta.gz", 2),
    ("simple.fastq", 3),
    ("simple.fastq.gz", 3),
    ("empty.fasta", 0),
])
def test_summarize_file_detects_format(filename, record_count):
    summary = summarize_file(str(DATA / filename))
    assert summary.record_count == record_count


def test_summarize_file_unknown_format():
    with pytest.raises(OpenError) as error:
        summarize_file(str(DATA / "not_sequence.txt"))
    error.match("not_sequence.txt")
    error.match("Unrecognized")


def test_fastq_record_mean_rounds_half_away_from_zero():
    # 'I' + '"' is 40 + 1 = 41 over 2 bases: 20.5 rounds to 21.
    summary = fastq_summary(b"@r\nAC\n+\nI\"\n", count_quality=True)
    assert summary.mean_quality == 21
