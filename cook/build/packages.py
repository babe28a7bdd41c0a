# SPDX-License-Identifier: BSD-3-Clause
"""
Package hints for optional developer tools.

Detects the Linux distribution family and names the package that
provides each optional tool, so advisories can tell the operator what to
install.
"""

import os
import shutil

# Packages providing each tool, by distribution family
TOOL_PACKAGES = {
    'debian': {
        'packages': {
            'ctags': 'universal-ctags',
            'cscope': 'cscope',
            'gtags': 'global',
        },
        'install_cmd': ['apt-get', 'install'],
    },
    'fedora': {
        'packages': {
            'ctags': 'ctags',
            'cscope': 'cscope',
            'gtags': 'global',
        },
        'install_cmd': ['dnf', 'install'],
    },
    'arch': {
        'packages': {
            'ctags': 'ctags',
            'cscope': 'cscope',
            'gtags': 'global',
        },
        'install_cmd': ['pacman', '-S'],
    },
    'suse': {
        'packages': {
            'ctags': 'ctags',
            'cscope': 'cscope',
            'gtags': 'global',
        },
        'install_cmd': ['zypper', 'install'],
    },
    'alpine': {
        'packages': {
            'ctags': 'ctags',
            'cscope': 'cscope',
            'gtags': 'global',
        },
        'install_cmd': ['apk', 'add'],
    },
}

# Extra steps some tools need beyond the distribution package
EXTRA_HINTS = {
    'gtags': 'pip3 install pygments',
}

DEFAULT_DISTRO = 'debian'

# os-release IDs, by distribution family
OS_RELEASE_IDS = {
    'debian': 'debian',
    'ubuntu': 'debian',
    'fedora': 'fedora',
    'rhel': 'fedora',
    'centos': 'fedora',
    'arch': 'arch',
    'suse': 'suse',
    'sles': 'suse',
    'alpine': 'alpine',
}


def detect_distro(which=shutil.which, os_release: str = '/etc/os-release') -> str:
    """Detect the Linux distribution family, or None if unknown."""
    # Check for package managers
    if which('apt-get'):
        return 'debian'
    elif which('dnf') or which('yum'):
        return 'fedora'
    elif which('pacman'):
        return 'arch'
    elif which('zypper'):
        return 'suse'
    elif which('apk'):
        return 'alpine'

    # Fallback: check the ID and ID_LIKE fields of /etc/os-release
    for os_id in read_os_ids(os_release):
        if os_id in OS_RELEASE_IDS:
            return OS_RELEASE_IDS[os_id]
        if os_id.startswith('opensuse'):
            return 'suse'

    return None


def read_os_ids(os_release: str = '/etc/os-release') -> list:
    """Return the ID value followed by the ID_LIKE values, lowercased."""
    if not os.path.exists(os_release):
        return []

    fields = {}
    with open(os_release) as f:
        for line in f:
            key, sep, value = line.strip().partition('=')
            if sep:
                fields[key] = value.strip('"\'').lower()

    return fields.get('ID', '').split() + fields.get('ID_LIKE', '').split()


def install_hint(tool: str, distro: str = None) -> str:
    """Return the command that installs tool, or None if no package is known.

    Args:
        tool: Tool executable name (e.g. 'ctags')
        distro: Distribution family, Debian naming when None or unknown
    """
    config = TOOL_PACKAGES.get(distro) or TOOL_PACKAGES[DEFAULT_DISTRO]
    package = config['packages'].get(tool)
    if package is None:
        return None

    hint = '[sudo] ' + ' '.join(config['install_cmd'] + [package])
    if tool in EXTRA_HINTS:
        hint += f" && {EXTRA_HINTS[tool]}"
    return hint
