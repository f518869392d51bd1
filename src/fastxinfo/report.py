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

import os
from typing import List

from .stats import Summary
from .util import PathResolutionError

LENGTH_COLUMNS = ("Nseqs", "Min.len", "Max.len", "Avg.len")
GAP_COLUMNS = ("Min.gap", "Max.gap", "Avg.gap")
QUALITY_COLUMNS = ("Avg.qual",)
FILE_COLUMN = "File"


def header_line(count_gaps: bool = False, count_quality: bool = False) -> str:
    columns: List[str] = list(LENGTH_COLUMNS)
    if count_gaps:
        columns.extend(GAP_COLUMNS)
    if count_quality:
        columns.extend(QUALITY_COLUMNS)
    columns.append(FILE_COLUMN)
    return "\t".join(columns)


def format_summary(summary: Summary, path: str) -> str:
    fields = [
        str(summary.record_count),
        str(summary.min_length),
        str(summary.max_length),
        str(summary.mean_length),
    ]
    if summary.mean_gap_fraction is not None:
        fields.extend(f"{fraction:.2f}" for fraction in (
            summary.min_gap_fraction,
            summary.max_gap_fraction,
            summary.mean_gap_fraction))
    if summary.mean_quality is not None:
        fields.append(str(summary.mean_quality))
    fields.append(path)
    return "\t".join(fields)


def display_path(filepath: str, full_path: bool = False) -> str:
    if not full_path:
        return os.path.basename(filepath)
    try:
        return os.path.realpath(filepath, strict=True)
    except OSError as error:
        raise PathResolutionError(
            f"Failed getting realpath of infile {filepath}.") from error
