#!/usr/bin/env python3
# SPDX-License-Identifier: BSD-3-Clause
"""
Linux kernel build orchestrator.

Builds, cleans, configures and indexes a kernel tree, keeping build
output and the active configuration under out/.
"""

import argparse
import multiprocessing
import sys

from cook.base.cli import run_orchestrator
from cook.build.arch import DEFAULT_ARCH, get_supported_archs
from cook.build.request import TargetKind


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='cook-kernel',
        description='Build Linux kernel images',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='''
cmds:
  build       build the target kernel
  clean       clean built kernel objects
  cleanall    remove output directory
  config      kernel menuconfig
  mrproper    remove previous configuration
  tags        tags for better code reading

Examples:
  %(prog)s -p linux/ -c build
  %(prog)s -p linux/ -t /opt/gcc-arm/bin/aarch64-none-linux-gnu- -c build
  %(prog)s -p linux/ -c tags --cscope
''',
    )

    parser.add_argument('-p', '--path',
                        help='Path to target kernel source code')
    parser.add_argument('-t', '--toolchain',
                        help='Absolute cross-toolchain prefix')
    parser.add_argument('-c', '--cmd', metavar='CMD',
                        help='Operation to run (see cmds below)')
    parser.add_argument('-a', '--arch', default=DEFAULT_ARCH,
                        choices=get_supported_archs(),
                        help=f'Deployment architecture (default: {DEFAULT_ARCH})')
    parser.add_argument('-j', '--jobs', type=int,
                        default=multiprocessing.cpu_count(),
                        help=f'Parallel jobs (default: {multiprocessing.cpu_count()})')
    parser.add_argument('--cscope', action='store_true',
                        help='Also build the cscope database when installed')
    return parser


def main(argv: list = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    return run_orchestrator(
        parser, args, TargetKind.KERNEL,
        toolchain_path=args.toolchain,
        arch=args.arch,
        enable_depgraph=args.cscope,
    )


if __name__ == '__main__':
    sys.exit(main())
