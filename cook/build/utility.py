# SPDX-License-Identifier: BSD-3-Clause
"""
Utility functions for the cook build orchestrator.
"""

from decimal import Decimal
import os
import re

MIB = 1024 ** 2

# Files the source indexers care about
SOURCE_EXTENSIONS = {'.c', '.h', '.S', '.cpp', '.hpp', '.ld', '.mk', '.kconfig'}
SOURCE_NAMES = {'Kconfig', 'Makefile'}

# Directories to skip
SKIP_DIRS = {'.git', 'out', '__pycache__'}


def parse_size(size: str, default_unit: str = 'm') -> int:
    """Parse a size string with optional k/m/g suffix into bytes.

    A bare number is read in default_unit.
    """
    size_match = re.fullmatch(r'([0-9\.]+)([kmg]?)i?b?', size.strip(), re.IGNORECASE)
    if size_match is None:
        raise ValueError(f'Invalid size {size}')

    result = Decimal(size_match.group(1))
    multiplier = size_match.group(2).lower() or default_unit

    multipliers = {'k': 1024, 'm': 1024**2, 'g': 1024**3}
    if multiplier in multipliers:
        result *= multipliers[multiplier]

    return int(result)


def size_in_mib(size: str) -> int:
    """Parse a size string and round it up to whole MiB (at least 1)."""
    return max(1, -(-parse_size(size) // MIB))


def find_sources(root_dir: str) -> list:
    """Find indexable source files under root_dir.

    Returns:
        Paths relative to root_dir, sorted
    """
    sources = []
    for dirpath, dirnames, filenames in os.walk(root_dir):
        dirnames[:] = [d for d in dirnames if d not in SKIP_DIRS]

        for filename in filenames:
            ext = os.path.splitext(filename)[1]
            if ext in SOURCE_EXTENSIONS or filename in SOURCE_NAMES:
                full_path = os.path.join(dirpath, filename)
                sources.append(os.path.relpath(full_path, root_dir))

    return sorted(sources)
