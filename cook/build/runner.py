# SPDX-License-Identifier: BSD-3-Clause
"""
External process runner.

All build-system invocations go through run_command, which echoes the
command and hands the child an explicit environment.
"""

import os
import subprocess


def run_command(cmd: list, env: dict = None, cwd: str = None,
                check: bool = True, unset: tuple = ()) -> subprocess.CompletedProcess:
    """Run a command with logging and block until it exits.

    If the caller is interrupted (e.g. Ctrl-C) while waiting, the child is
    killed before the interrupt propagates.

    Args:
        cmd: Command and arguments
        env: Variables to set on top of the inherited environment
        cwd: Working directory for the child
        check: Raise CalledProcessError on non-zero exit
        unset: Inherited variables to remove before applying env

    Returns:
        The completed process
    """
    print(f"  $ {' '.join(str(part) for part in cmd)}")
    merged_env = os.environ.copy()
    for name in unset:
        merged_env.pop(name, None)
    if env:
        merged_env.update(env)

    return subprocess.run([str(part) for part in cmd], env=merged_env,
                          cwd=None if cwd is None else str(cwd), check=check)
