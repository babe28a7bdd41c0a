# SPDX-License-Identifier: BSD-3-Clause
"""
Capability probing for optional source indexers.

Looks up each optional tool on the search path and records what was
found. A missing tool is an expected state: the prober prints one
advisory per absent tool and the indexing phase runs with whatever is
left, possibly nothing.
"""

import shutil
from dataclasses import dataclass

from cook.build.errors import ToolUnavailable
from cook.build.packages import detect_distro, install_hint

# Optional tools: capability flag, executable, make target
INDEXERS = (
    ('indexer', 'ctags', 'tags'),
    ('depgraph', 'cscope', 'cscope'),
    ('secondary_indexer', 'gtags', 'gtags'),
)


@dataclass(frozen=True)
class CapabilitySet:
    """Which optional tools are usable for this invocation.

    Attributes:
        indexer_available: ctags is installed
        depgraph_available: cscope is installed
        secondary_indexer_available: gtags is installed
        depgraph_enabled: cscope may be used even when installed
        missing: Advisory records for the absent tools
    """

    indexer_available: bool = False
    depgraph_available: bool = False
    secondary_indexer_available: bool = False
    depgraph_enabled: bool = False
    missing: tuple = ()

    @property
    def use_depgraph(self) -> bool:
        return self.depgraph_available and self.depgraph_enabled

    def make_targets(self) -> list:
        """Index targets the build system should generate."""
        usable = {
            'indexer': self.indexer_available,
            'depgraph': self.use_depgraph,
            'secondary_indexer': self.secondary_indexer_available,
        }
        return [target for flag, _, target in INDEXERS if usable[flag]]

    def advisories(self) -> list:
        return [f"[cook] {record}" for record in self.missing]


def probe_capabilities(which=None, enable_depgraph: bool = False,
                       distro: str = None, report: bool = True) -> CapabilitySet:
    """Probe the search path for optional indexers.

    Never raises for a missing tool.

    Args:
        which: Search-path lookup, shutil.which when None
        enable_depgraph: Allow cscope to be used when it is installed
        distro: Distribution family for package hints, detected when None
        report: Print one advisory line per missing tool
    """
    which = which or shutil.which
    if distro is None:
        distro = detect_distro(which)

    found = {}
    missing = []
    for flag, tool, _ in INDEXERS:
        found[flag] = which(tool) is not None
        if not found[flag]:
            missing.append(ToolUnavailable(tool, install_hint(tool, distro)))

    capabilities = CapabilitySet(
        indexer_available=found['indexer'],
        depgraph_available=found['depgraph'],
        secondary_indexer_available=found['secondary_indexer'],
        depgraph_enabled=enable_depgraph,
        missing=tuple(missing),
    )

    if report:
        for line in capabilities.advisories():
            print(line)

    return capabilities
