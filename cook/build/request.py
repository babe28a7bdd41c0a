# SPDX-License-Identifier: BSD-3-Clause
"""
Build request model.

A BuildRequest is constructed once per invocation from command-line input
and passed by value through validation, environment resolution and
dispatch.
"""

import enum
from dataclasses import dataclass
from pathlib import Path

from cook.build.arch import DEFAULT_ARCH
from cook.build.errors import MissingOperation, UnrecognizedOperation


class Operation(enum.Enum):
    """Operations the dispatcher can run, keyed by their CLI spelling."""

    BUILD = 'build'
    CLEAN = 'clean'
    CLEAN_ALL = 'cleanall'
    CONFIG = 'config'
    RESET_CONFIG = 'mrproper'
    GENERATE_INDEX = 'tags'
    INSTALL = 'install'
    PACKAGE = 'ext4'


class TargetKind(enum.Enum):
    KERNEL = 'kernel'
    BUSYBOX = 'busybox'

    @property
    def marker(self) -> str:
        """Subdirectory that identifies a source root of this kind."""
        return TARGET_MARKERS[self]

    @property
    def operations(self) -> tuple:
        return SUPPORTED_OPERATIONS[self]


TARGET_MARKERS = {
    TargetKind.KERNEL: 'kernel',
    TargetKind.BUSYBOX: 'libbb',
}

SUPPORTED_OPERATIONS = {
    TargetKind.KERNEL: (
        Operation.BUILD,
        Operation.CLEAN,
        Operation.CLEAN_ALL,
        Operation.CONFIG,
        Operation.RESET_CONFIG,
        Operation.GENERATE_INDEX,
    ),
    TargetKind.BUSYBOX: (
        Operation.BUILD,
        Operation.CLEAN,
        Operation.CONFIG,
        Operation.RESET_CONFIG,
        Operation.GENERATE_INDEX,
        Operation.INSTALL,
        Operation.PACKAGE,
    ),
}


def parse_operation(name: str, kind: TargetKind) -> Operation:
    """Turn a CLI operation name into an Operation supported by kind.

    Raises:
        MissingOperation: name is empty or None
        UnrecognizedOperation: name is unknown or unsupported for kind
    """
    if not name:
        raise MissingOperation("No operation requested")

    try:
        operation = Operation(name.strip().lower())
    except ValueError:
        raise UnrecognizedOperation(name, kind.value) from None

    if operation not in kind.operations:
        raise UnrecognizedOperation(name, kind.value)
    return operation


@dataclass(frozen=True)
class BuildRequest:
    """One invocation's worth of input.

    Attributes:
        target_path: Validated source root of the target tree
        operation: The single operation to run
        target_kind: Kernel or busybox tree
        toolchain_path: Cross-toolchain prefix as supplied (kernel only)
        arch: Deployment architecture from ARCH_CONFIG, None to build for the host
        jobs: Parallel job count handed to the build system
    """

    target_path: Path
    operation: Operation
    target_kind: TargetKind
    toolchain_path: str = None
    arch: str = DEFAULT_ARCH
    jobs: int = 1
