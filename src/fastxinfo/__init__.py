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

from ._version import __version__
from .report import display_path, format_summary, header_line
from .scanner import (
    DEFAULT_MISSING_CHARACTERS, FastaScanner, FastaState, FastqLine,
    FastqScanner, PHRED_OFFSET, Record, scan
)
from .stats import (
    RecordAccumulator, Summary, accumulator_for_fasta, accumulator_for_fastq,
    divide_and_round, summarize, summarize_file,
)
from .util import OpenError, PathResolutionError, SequenceFile


__all__ = [
    "DEFAULT_MISSING_CHARACTERS",
    "PHRED_OFFSET",
    "FastaScanner",
    "FastaState",
    "FastqLine",
    "FastqScanner",
    "Record",
    "scan",
    "RecordAccumulator",
    "Summary",
    "accumulator_for_fasta",
    "accumulator_for_fastq",
    "divide_and_round",
    "summarize",
    "summarize_file",
    "header_line",
    "format_summary",
    "display_path",
    "OpenError",
    "PathResolutionError",
    "SequenceFile",
    "__version__"
]
