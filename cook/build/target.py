# SPDX-License-Identifier: BSD-3-Clause
"""
Target path validation.

Confirms a directory is a source root of the requested kind before any
clean, reset or build step is allowed to touch it.
"""

from pathlib import Path

from cook.build.errors import InvalidTarget
from cook.build.request import TargetKind


def validate_target(target_path: str, kind: TargetKind) -> Path:
    """Validate a target root and return it as a resolved Path.

    Args:
        target_path: Path given on the command line
        kind: Kind of tree the path must contain

    Returns:
        Absolute path to the target root

    Raises:
        InvalidTarget: path is empty, missing, or lacks the kind's marker
    """
    if not target_path or not str(target_path).strip():
        raise InvalidTarget(f"{kind.value.capitalize()} path is required "
                            "(use -h for more information)")

    root = Path(target_path).expanduser()
    if not root.is_dir():
        raise InvalidTarget(f"Target path does not exist: {root}")

    if not (root / kind.marker).is_dir():
        raise InvalidTarget(f"Invalid {kind.value} path {root}, "
                            f"make sure the target is {kind.value} source "
                            f"(missing {kind.marker}/)")

    return root.resolve()
