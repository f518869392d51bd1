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

from setuptools import find_packages, setup

setup(
    name="fastxinfo",
    version="2.4.0",
    description="Get basic summary info about FASTA and FASTQ files.",
    license="AGPL-3.0-or-later",
    python_requires=">=3.10",
    package_dir={"": "src"},
    packages=find_packages("src"),
    install_requires=[
        "xopen>=1.8.0",
        "tqdm",
        "zstandard",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "fastxinfo = fastxinfo.__main__:main",
            "get_fasta_info = fastxinfo.__main__:fasta_main",
            "get_fastq_info = fastxinfo.__main__:fastq_main",
        ],
    },
)
