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

import argparse
import sys
from typing import Optional

from ._version import __version__
from .report import display_path, format_summary, header_line
from .scanner import DEFAULT_MISSING_CHARACTERS
from .stats import summarize_file
from .util import OpenError, PathResolutionError


def _add_common_arguments(parser: argparse.ArgumentParser):
    parser.add_argument("input", metavar="INPUT", nargs="+",
                        help="Input file(s). Gzip compressed files are "
                             "detected and decompressed automatically.")
    parser.add_argument("-n", "--no-verbose", dest="verbose",
                        action="store_false",
                        help="Do not print the column header to stderr.")
    parser.add_argument("-p", "--full-path", action="store_true",
                        help="Report the absolute path of each input file "
                             "instead of its base name.")
    parser.add_argument("-t", "--threads", type=int, default=1,
                        help="Number of threads to use. If greater than one "
                             "additional threads for gzip decompression "
                             "will be used. Default: 1.")
    parser.add_argument("--progress", action="store_true",
                        help="Show a progress bar on stderr.")
    parser.add_argument("-V", "--version", action="version",
                        version=__version__)


def _add_gap_arguments(parser: argparse.ArgumentParser):
    parser.add_argument("-g", "--gaps", dest="count_gaps",
                        action="store_true",
                        help=f"Report the minimum, maximum and average "
                             f"fraction of missing data per sequence. "
                             f"Missing data symbols: "
                             f"{DEFAULT_MISSING_CHARACTERS}.")
    parser.add_argument("-m", "--missing", dest="missing_characters",
                        metavar="CHARS",
                        help=f"Characters that count as missing data. "
                             f"Implies --gaps. "
                             f"Default: {DEFAULT_MISSING_CHARACTERS}.")


def _add_quality_arguments(parser: argparse.ArgumentParser):
    parser.add_argument("-q", "--quality", dest="count_quality",
                        action="store_true",
                        help="Report the average read quality "
                             "(phred scores with ASCII base 33).")


def fasta_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="get_fasta_info",
        description="Get basic summary info about fasta formatted files.")
    _add_common_arguments(parser)
    _add_gap_arguments(parser)
    parser.set_defaults(count_quality=False)
    return parser


def fastq_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="get_fastq_info",
        description="Get basic summary info about fastq formatted files.")
    _add_common_arguments(parser)
    _add_quality_arguments(parser)
    parser.set_defaults(count_gaps=False, missing_characters=None)
    return parser


def argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fastxinfo",
        description="Get basic summary info about fasta or fastq formatted "
                    "files. The format is detected for each file. Gap "
                    "options apply to FASTA files, quality options to "
                    "FASTQ files.")
    _add_common_arguments(parser)
    _add_gap_arguments(parser)
    _add_quality_arguments(parser)
    return parser


def run(parser: argparse.ArgumentParser, file_format: Optional[str] = None):
    args = parser.parse_args()
    if args.threads < 1:
        parser.error(f"Threads must be at least 1, got {args.threads}.")
    if args.missing_characters is None:
        args.missing_characters = DEFAULT_MISSING_CHARACTERS
    else:
        args.count_gaps = True
    if not args.missing_characters.isascii():
        parser.error(f"Missing characters must be ASCII, got "
                     f"{args.missing_characters!r}.")
    for filepath in args.input:
        try:
            summary = summarize_file(
                filepath,
                file_format=file_format,
                count_gaps=args.count_gaps,
                missing_characters=args.missing_characters,
                count_quality=args.count_quality,
                threads=args.threads - 1,
                progress=args.progress,
            )
            path = display_path(filepath, full_path=args.full_path)
        except (OpenError, PathResolutionError) as error:
            sys.exit(f"Error: {error}")
        if args.verbose:
            print(header_line(
                      count_gaps=summary.mean_gap_fraction is not None,
                      count_quality=summary.mean_quality is not None),
                  file=sys.stderr, flush=True)
        print(format_summary(summary, path), flush=True)


def fasta_main() -> None:
    run(fasta_argument_parser(), "FASTA")


def fastq_main() -> None:
    run(fastq_argument_parser(), "FASTQ")


def main() -> None:
    run(argument_parser())


if __name__ == "__main__":  # pragma: no cover
    main()
