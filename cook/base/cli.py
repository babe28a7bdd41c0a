# SPDX-License-Identifier: BSD-3-Clause
"""
Shared flow for the kernel and busybox orchestrators.

Parse, validate the target, parse the operation, resolve the
environment, dispatch one phase, exit.
"""

import argparse
import sys

from cook.build.dispatch import dispatch
from cook.build.environment import report_environment, resolve_environment
from cook.build.errors import (InvalidTarget, MissingOperation, PhaseFailure,
                               UnrecognizedOperation)
from cook.build.request import BuildRequest, TargetKind, parse_operation
from cook.build.target import validate_target

# Exit codes
EXIT_OK = 0
EXIT_INVALID_TARGET = 1
EXIT_USAGE = 2
EXIT_INTERRUPTED = 130


def exit_code(returncode: int) -> int:
    """Map a failed phase's return code to a process exit code.

    A child killed by signal N reports -N; the shell convention is 128+N.
    """
    if returncode < 0:
        return 128 + abs(returncode)
    return returncode or 1


def run_orchestrator(parser: argparse.ArgumentParser, args: argparse.Namespace,
                     kind: TargetKind, toolchain_path: str = None,
                     arch: str = None, **options) -> int:
    """Run one operation for the tree named on the command line.

    Validation happens before environment resolution, and both happen
    before any external process starts.

    Args:
        parser: Parser used to print usage
        args: Parsed arguments, with path, cmd and jobs attributes
        kind: Target kind
        toolchain_path: Cross-toolchain prefix (kernel only)
        arch: Deployment architecture, None to build for the host
        **options: Passed to dispatch()

    Returns:
        Process exit code
    """
    try:
        target_path = validate_target(args.path, kind)
        operation = parse_operation(args.cmd, kind)
    except InvalidTarget as e:
        print(f"Error: {e}", file=sys.stderr)
        if not args.path:
            parser.print_usage(sys.stderr)
        return EXIT_INVALID_TARGET
    except MissingOperation:
        parser.print_help()
        return EXIT_USAGE
    except UnrecognizedOperation as e:
        print(f"Error: {e}", file=sys.stderr)
        parser.print_help()
        return EXIT_USAGE

    request = BuildRequest(
        target_path=target_path,
        operation=operation,
        target_kind=kind,
        toolchain_path=toolchain_path,
        arch=arch,
        jobs=args.jobs,
    )

    profile = resolve_environment(request.arch, request.toolchain_path)
    report_environment(profile)

    try:
        dispatch(request, profile, **options)
    except InvalidTarget as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_INVALID_TARGET
    except PhaseFailure as e:
        print(f"\nError: {e}", file=sys.stderr)
        return exit_code(e.returncode)
    except KeyboardInterrupt:
        print("\nBuild interrupted.")
        return EXIT_INTERRUPTED

    return EXIT_OK
