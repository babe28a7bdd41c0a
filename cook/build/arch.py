# SPDX-License-Identifier: BSD-3-Clause
"""
Architecture configuration for the cook build orchestrator.

This module maps deployment architectures to:
- The kernel ARCH value passed to the build system
- Host machine names that can build them natively
- A default cross-toolchain prefix
"""

import platform

DEFAULT_ARCH = 'arm64'

# Architecture configurations
ARCH_CONFIG = {
    'arm64': {
        'kernel_arch': 'arm64',
        'machines': ('aarch64', 'arm64'),
        'toolchain_prefix': 'aarch64-linux-gnu-',
    },
    'arm': {
        'kernel_arch': 'arm',
        'machines': ('armv7l', 'armv6l', 'arm'),
        'toolchain_prefix': 'arm-linux-gnueabihf-',
    },
    'x86_64': {
        'kernel_arch': 'x86_64',
        'machines': ('x86_64', 'amd64'),
        'toolchain_prefix': 'x86_64-linux-gnu-',
    },
    'riscv': {
        'kernel_arch': 'riscv',
        'machines': ('riscv64',),
        'toolchain_prefix': 'riscv64-linux-gnu-',
    },
}


def get_arch_config(arch: str) -> dict:
    """Get architecture configuration by name."""
    if arch not in ARCH_CONFIG:
        raise ValueError(f"Unsupported architecture: {arch}. "
                        f"Supported: {list(ARCH_CONFIG.keys())}")
    return ARCH_CONFIG[arch]


def get_supported_archs() -> list:
    """Get list of supported architectures."""
    return list(ARCH_CONFIG.keys())


def detect_host_arch() -> str:
    """Detect the host machine name (as reported by uname -m)."""
    return platform.machine().lower()


def is_native(host_arch: str, arch: str) -> bool:
    """Check whether a host can build for arch without a cross toolchain."""
    return host_arch.lower() in get_arch_config(arch)['machines']
