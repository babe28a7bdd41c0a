# SPDX-License-Identifier: BSD-3-Clause
"""
Root filesystem image packaging for the busybox target.

This module handles:
- Backing file allocation
- Filesystem formatting
- Loop mounting/unmounting
- Copying the staging tree into the image
"""

import contextlib
import os
import sys
from dataclasses import dataclass
from pathlib import Path

import sh

from cook.build.errors import InvalidTarget, PhaseFailure
from cook.build.utility import MIB

DEFAULT_IMAGE = 'rootfs.ext4'
DEFAULT_MOUNT_DIR = 'fs'
DEFAULT_SIZE_MB = 21
DEFAULT_FILESYSTEM = 'ext4'

# Filesystem configurations
FS_CONFIG = {
    'ext2': {'mkfs_cmd': 'mkfs.ext2'},
    'ext3': {'mkfs_cmd': 'mkfs.ext3'},
    'ext4': {'mkfs_cmd': 'mkfs.ext4'},
}


def get_fs_config(fs: str) -> dict:
    """Get filesystem configuration by name."""
    if fs not in FS_CONFIG:
        raise ValueError(f"Unsupported filesystem: {fs}. "
                        f"Supported: {list(FS_CONFIG.keys())}")
    return FS_CONFIG[fs]


def get_supported_filesystems() -> list:
    """Get list of supported filesystems."""
    return list(FS_CONFIG.keys())


@dataclass(frozen=True)
class PackagingSpec:
    """What to package and where.

    Attributes:
        staging_dir: Tree populated by the install phase
        image_path: Backing file to create
        size_mb: Image size in MiB
        mount_dir: Scratch mount point, reusable across runs
        filesystem: Filesystem to format the image with
    """

    staging_dir: Path
    image_path: Path
    size_mb: int = DEFAULT_SIZE_MB
    mount_dir: Path = Path(DEFAULT_MOUNT_DIR)
    filesystem: str = DEFAULT_FILESYSTEM


class FilesystemImage:
    """Builds a mountable filesystem image from a staging tree."""

    def __init__(self, spec: PackagingSpec, use_sudo: bool = None):
        """
        Args:
            spec: Packaging parameters
            use_sudo: Prefix mount/umount/cp with sudo; defaults to
                True unless running as root
        """
        self.spec = spec
        self.use_sudo = os.geteuid() != 0 if use_sudo is None else use_sudo
        self._mounted = False

    def _command(self, name: str, privileged: bool = False):
        """Return an sh command, run through sudo when privileged."""
        if privileged and self.use_sudo:
            return sh.sudo.bake(name)
        return sh.Command(name)

    def _step(self, step: str, name: str, *args, privileged: bool = False):
        """Run one external step, turning its failure into PhaseFailure."""
        try:
            self._command(name, privileged)(*[str(arg) for arg in args])
        except sh.ErrorReturnCode as e:
            stderr = e.stderr.decode(errors='replace').strip() if e.stderr else ''
            raise PhaseFailure(step, e.exit_code, stderr or None) from e
        except sh.CommandNotFound as e:
            raise PhaseFailure(step, 127, f"{name} not found") from e

    def allocate(self):
        """Create the zero-filled backing file."""
        print(f"   DD {self.spec.image_path} ({self.spec.size_mb} MiB)")
        chunk = bytes(MIB)
        try:
            with open(self.spec.image_path, 'wb') as f:
                for _ in range(self.spec.size_mb):
                    f.write(chunk)
        except OSError as e:
            raise PhaseFailure('allocate', e.errno or 1, str(e)) from e

    def format(self):
        """Format the backing file."""
        fs_config = get_fs_config(self.spec.filesystem)
        print(f"   MKFS {self.spec.filesystem} {self.spec.image_path}")
        self._step('format', fs_config['mkfs_cmd'], '-F', self.spec.image_path)

    def is_mounted(self) -> bool:
        return os.path.ismount(self.spec.mount_dir)

    def release_stale_mount(self):
        """Unmount a mount left behind by an earlier failed run."""
        if self.is_mounted():
            print(f"   UMOUNT stale {self.spec.mount_dir}")
            self._step('unmount', 'umount', self.spec.mount_dir, privileged=True)

    def mount(self):
        """Loop-mount the image on the scratch mount point."""
        os.makedirs(self.spec.mount_dir, exist_ok=True)
        print(f"   MOUNT {self.spec.image_path} {self.spec.mount_dir}")
        self._step('mount', 'mount', '-o', 'loop', self.spec.image_path,
                   self.spec.mount_dir, privileged=True)
        self._mounted = True

    def unmount(self):
        """Unmount the image if this instance mounted it."""
        if not self._mounted:
            return
        print(f"   UMOUNT {self.spec.mount_dir}")
        self._step('unmount', 'umount', self.spec.mount_dir, privileged=True)
        self._mounted = False

    @contextlib.contextmanager
    def mounted(self):
        """Mount the image for the duration of the block.

        The image is unmounted on both success and failure. If the block
        fails and the unmount fails too, the block's error is the one
        raised.
        """
        self.mount()
        try:
            yield self.spec.mount_dir
        except BaseException:
            try:
                self.unmount()
            except PhaseFailure as e:
                print(f"Error: {e}", file=sys.stderr)
            raise
        self.unmount()

    def copy(self):
        """Copy the staging tree into the mounted image."""
        if not self._mounted:
            raise PhaseFailure('copy', 1, f"{self.spec.mount_dir} is not mounted")
        print(f"   CP {self.spec.staging_dir}/ {self.spec.mount_dir}/")
        self._step('copy', 'cp', '-a', f"{self.spec.staging_dir}/.",
                   f"{self.spec.mount_dir}/", privileged=True)

    def package(self):
        """Run every packaging step in order, stopping at the first failure."""
        if not Path(self.spec.staging_dir).is_dir():
            raise InvalidTarget(f"Staging directory not found: "
                                f"{self.spec.staging_dir} (run install first)")

        # The backing file must not be rewritten while still attached
        self.release_stale_mount()
        self.allocate()
        self.format()
        with self.mounted():
            self.copy()
