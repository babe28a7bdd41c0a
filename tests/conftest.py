# SPDX-License-Identifier: BSD-3-Clause
"""Shared fixtures: throwaway source trees and a command-invocation spy."""

import subprocess

import pytest

from cook.build.environment import EnvironmentProfile
from cook.build.request import BuildRequest, Operation, TargetKind


class RecordingRunner:
    """Stands in for run_command and records every invocation.

    Args:
        fail_on: Fail any command containing this argument
        returncode: Exit status used for injected failures
        on_run: Callback(cmd, cwd) run before the result is decided
    """

    def __init__(self, fail_on: str = None, returncode: int = 2, on_run=None):
        self.calls = []
        self.fail_on = fail_on
        self.returncode = returncode
        self.on_run = on_run

    def __call__(self, cmd, env=None, cwd=None, check=True, unset=()):
        cmd = [str(part) for part in cmd]
        self.calls.append({
            'cmd': cmd,
            'env': dict(env or {}),
            'cwd': cwd,
            'unset': tuple(unset),
        })
        if self.on_run:
            self.on_run(cmd, cwd)
        if self.fail_on is not None and self.fail_on in cmd:
            raise subprocess.CalledProcessError(self.returncode, cmd)
        return subprocess.CompletedProcess(cmd, 0)

    @property
    def commands(self) -> list:
        return [call['cmd'] for call in self.calls]


@pytest.fixture
def runner():
    return RecordingRunner()


@pytest.fixture
def kernel_tree(tmp_path):
    root = tmp_path / 'linux'
    (root / 'kernel').mkdir(parents=True)
    return root


@pytest.fixture
def busybox_tree(tmp_path):
    root = tmp_path / 'busybox'
    (root / 'libbb').mkdir(parents=True)
    return root


@pytest.fixture
def native_profile():
    return EnvironmentProfile(host_arch='aarch64')


@pytest.fixture
def cross_profile():
    return EnvironmentProfile(
        host_arch='x86_64',
        cross_toolchain_prefix='/opt/gcc/bin/aarch64-none-linux-gnu-',
        target_arch='arm64',
    )


@pytest.fixture
def make_request():
    def factory(root, operation: Operation, kind: TargetKind = TargetKind.KERNEL,
                jobs: int = 4):
        return BuildRequest(
            target_path=root,
            operation=operation,
            target_kind=kind,
            jobs=jobs,
        )
    return factory


@pytest.fixture
def spawn_spy(monkeypatch):
    """Replace subprocess.run so no real process can start."""
    calls = []

    def fake_run(cmd, **kwargs):
        calls.append({'cmd': list(cmd), **kwargs})
        return subprocess.CompletedProcess(cmd, 0)

    monkeypatch.setattr(subprocess, 'run', fake_run)
    return calls
