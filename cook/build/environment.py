# SPDX-License-Identifier: BSD-3-Clause
"""
Build environment resolution.

Decides whether a build is native or cross and produces the explicit set
of variables handed to the underlying build system.
"""

from dataclasses import dataclass

from cook.build.arch import detect_host_arch, get_arch_config, is_native

# Variables owned by cook; inherited values are never passed through
MANAGED_VARIABLES = ('CROSS_COMPILE', 'ARCH')


@dataclass(frozen=True)
class EnvironmentProfile:
    """Resolved build environment for one invocation.

    The cross fields are either both set (cross build) or both None
    (native build).
    """

    host_arch: str
    cross_toolchain_prefix: str = None
    target_arch: str = None

    @property
    def is_cross(self) -> bool:
        return self.cross_toolchain_prefix is not None

    def build_env(self) -> dict:
        """Variables to export to the build system, empty for native builds."""
        if not self.is_cross:
            return {}
        return {
            'CROSS_COMPILE': self.cross_toolchain_prefix,
            'ARCH': self.target_arch,
        }


def resolve_environment(arch: str = None, toolchain_path: str = None,
                        host_arch: str = None) -> EnvironmentProfile:
    """Resolve the environment for building arch on this host.

    Cross variables are only populated when the host cannot build arch
    natively. A supplied toolchain prefix is used verbatim; otherwise the
    architecture's default prefix is used.

    Args:
        arch: Deployment architecture name, None to build for the host
        toolchain_path: Cross-toolchain prefix from the command line
        host_arch: Host machine name, detected when omitted
    """
    host_arch = host_arch or detect_host_arch()

    if arch is None or is_native(host_arch, arch):
        return EnvironmentProfile(host_arch=host_arch)

    arch_config = get_arch_config(arch)
    return EnvironmentProfile(
        host_arch=host_arch,
        cross_toolchain_prefix=toolchain_path or arch_config['toolchain_prefix'],
        target_arch=arch_config['kernel_arch'],
    )


def report_environment(profile: EnvironmentProfile):
    """Print the resolved environment."""
    if profile.is_cross:
        print(f"[cook] Toolchain: {profile.cross_toolchain_prefix}")
        print(f"[cook] Target arch: {profile.target_arch}")
    print(f"[cook] Host machine: {profile.host_arch}")
    print()
