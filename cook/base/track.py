#!/usr/bin/env python3
# SPDX-License-Identifier: BSD-3-Clause
"""
Track - generate tags for a better code reading experience.

Indexes any source tree with whichever of ctags, cscope and gtags are
installed. Missing tools are reported and skipped.
"""

import argparse
import subprocess
import sys
from pathlib import Path

from cook.base.cli import exit_code
from cook.build.capability import CapabilitySet, probe_capabilities
from cook.build.errors import InvalidTarget, PhaseFailure
from cook.build.runner import run_command
from cook.build.timer import PhaseTimer
from cook.build.utility import find_sources

CTAGS_LANGUAGES = 'Asm,c,c++,Sh,Make'

# Index files written by each tool
INDEX_FILES = {
    'ctags': ('tags',),
    'cscope': ('cscope.files', 'cscope.out', 'cscope.in.out', 'cscope.po.out'),
    'gtags': ('gtags.files', 'GTAGS', 'GPATH', 'GRTAGS'),
}


class Tracker:
    """Builds source indexes in one tree."""

    def __init__(self, root: str, capabilities: CapabilitySet,
                 use_gtags: bool = False, runner=run_command):
        """
        Args:
            root: Source tree to index
            capabilities: Probed indexers
            use_gtags: Build GNU global tags when installed
            runner: Callable with run_command's signature
        """
        self.root = Path(root)
        self.capabilities = capabilities
        self.use_gtags = use_gtags
        self.runner = runner

    def _run(self, tool: str, cmd: list):
        try:
            self.runner(cmd, cwd=self.root)
        except subprocess.CalledProcessError as e:
            raise PhaseFailure(tool, e.returncode) from e

    def remove_previous(self, tool: str):
        for name in INDEX_FILES[tool]:
            path = self.root / name
            if path.is_file():
                path.unlink()

    def write_file_list(self, name: str, sources: list):
        with open(self.root / name, 'w') as f:
            for source in sources:
                f.write(source + '\n')

    def track(self) -> list:
        """Run every usable indexer. Returns the tools that ran."""
        ran = []
        sources = find_sources(str(self.root))
        print(f"[track] {len(sources)} source files")

        if self.capabilities.indexer_available:
            self.remove_previous('ctags')
            self._run('ctags', ['ctags', f'--languages={CTAGS_LANGUAGES}', '-R'])
            ran.append('ctags')

        if self.capabilities.use_depgraph:
            self.remove_previous('cscope')
            self.write_file_list('cscope.files', sources)
            self._run('cscope', ['cscope', '-q', '-R', '-b', '-i', 'cscope.files'])
            ran.append('cscope')

        if self.use_gtags and self.capabilities.secondary_indexer_available:
            self.remove_previous('gtags')
            self.write_file_list('gtags.files', sources)
            self._run('gtags', ['gtags', '-i', '-f', 'gtags.files'])
            ran.append('gtags')

        if not ran:
            print("[track] No source indexers available, nothing to do")
        return ran


def main(argv: list = None) -> int:
    parser = argparse.ArgumentParser(
        prog='track',
        description='Generate tags for better code reading experience',
    )

    parser.add_argument('-p', '--path',
                        help='Path to target source code')
    parser.add_argument('--cscope', action='store_true',
                        help='Also build a cscope database')
    parser.add_argument('--gtags', action='store_true',
                        help='Also build GNU global tags')

    args = parser.parse_args(argv)

    if not args.path:
        parser.print_help()
        return 2

    try:
        if not Path(args.path).is_dir():
            raise InvalidTarget(f"Source root not found: {args.path}")

        print("----------------------- CODE TRACKER -----------------------")
        capabilities = probe_capabilities(enable_depgraph=args.cscope)
        tracker = Tracker(args.path, capabilities, use_gtags=args.gtags)
        with PhaseTimer('track', 'code tracker setup'):
            tracker.track()
        print("----------------------- CODE TRACKER -----------------------")
    except InvalidTarget as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except PhaseFailure as e:
        print(f"\nError: {e}", file=sys.stderr)
        return exit_code(e.returncode)
    except KeyboardInterrupt:
        print("\nInterrupted.")
        return 130

    return 0


if __name__ == '__main__':
    sys.exit(main())
