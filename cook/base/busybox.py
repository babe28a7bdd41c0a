#!/usr/bin/env python3
# SPDX-License-Identifier: BSD-3-Clause
"""
Busybox build orchestrator.

Builds busybox, installs it into the staging tree and packages the
staging tree into an ext4 root filesystem image.
"""

import argparse
import multiprocessing
import sys

from cook.base.cli import run_orchestrator
from cook.build.arch import get_supported_archs
from cook.build.disk import (DEFAULT_FILESYSTEM, DEFAULT_IMAGE, DEFAULT_MOUNT_DIR,
                             DEFAULT_SIZE_MB, get_supported_filesystems)
from cook.build.request import TargetKind
from cook.build.utility import size_in_mib


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='cook-busybox',
        description='Build busybox and its root filesystem image',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='''
cmds:
  config      set up configuration
  build       build busybox
  install     create filesystem skeleton
  ext4        create ext4 filesystem
  clean       clean built objects
  mrproper    remove previous configuration
  tags        tags for better code reading

Examples:
  %(prog)s -p busybox/ -c install
  %(prog)s -p busybox/ -c ext4 -s 64M
  %(prog)s -p busybox/ -c ext4 --fs ext2
''',
    )

    parser.add_argument('-p', '--path',
                        help='Path to target busybox source code')
    parser.add_argument('-c', '--cmd', metavar='CMD',
                        help='Operation to run (see cmds below)')
    parser.add_argument('-a', '--arch', choices=get_supported_archs(),
                        help='Deployment architecture (default: build for the host)')
    parser.add_argument('-j', '--jobs', type=int,
                        default=multiprocessing.cpu_count(),
                        help=f'Parallel jobs (default: {multiprocessing.cpu_count()})')
    parser.add_argument('-s', '--size', type=size_in_mib,
                        default=DEFAULT_SIZE_MB,
                        help=f'Image size, bare numbers in MiB (default: {DEFAULT_SIZE_MB}M)')
    parser.add_argument('-i', '--image', default=DEFAULT_IMAGE,
                        help=f'Image file, relative to the tree (default: {DEFAULT_IMAGE})')
    parser.add_argument('-m', '--mount-dir', default=DEFAULT_MOUNT_DIR,
                        help=f'Scratch mount point (default: {DEFAULT_MOUNT_DIR})')
    parser.add_argument('--fs', choices=get_supported_filesystems(),
                        default=DEFAULT_FILESYSTEM,
                        help=f'Filesystem for the ext4 command (default: {DEFAULT_FILESYSTEM})')
    parser.add_argument('--cscope', action='store_true',
                        help='Also build the cscope database when installed')
    parser.add_argument('--no-sudo', action='store_true',
                        help='Run mount/umount/cp without sudo')
    return parser


def main(argv: list = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    return run_orchestrator(
        parser, args, TargetKind.BUSYBOX,
        arch=args.arch,
        enable_depgraph=args.cscope,
        image=args.image,
        size_mb=args.size,
        mount_dir=args.mount_dir,
        use_sudo=False if args.no_sudo else None,
        filesystem=args.fs,
    )


if __name__ == '__main__':
    sys.exit(main())
