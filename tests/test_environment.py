# SPDX-License-Identifier: BSD-3-Clause
from cook.build.environment import EnvironmentProfile, resolve_environment


def test_native_host_has_no_cross_fields():
    profile = resolve_environment('arm64', '/opt/gcc/bin/aarch64-', host_arch='aarch64')

    assert profile.host_arch == 'aarch64'
    assert profile.cross_toolchain_prefix is None
    assert profile.target_arch is None
    assert not profile.is_cross
    assert profile.build_env() == {}


def test_mismatched_host_carries_prefix_verbatim():
    prefix = '/opt/gcc-arm/bin/aarch64-none-linux-gnu-'
    profile = resolve_environment('arm64', prefix, host_arch='x86_64')

    assert profile.cross_toolchain_prefix == prefix
    assert profile.target_arch == 'arm64'
    assert profile.build_env() == {'CROSS_COMPILE': prefix, 'ARCH': 'arm64'}


def test_mismatched_host_without_prefix_uses_arch_default():
    profile = resolve_environment('arm', host_arch='x86_64')

    assert profile.cross_toolchain_prefix == 'arm-linux-gnueabihf-'
    assert profile.target_arch == 'arm'


def test_no_arch_means_host_build():
    profile = resolve_environment(None, host_arch='x86_64')

    assert profile == EnvironmentProfile(host_arch='x86_64')


def test_host_is_detected_when_not_given(monkeypatch):
    monkeypatch.setattr('cook.build.environment.detect_host_arch', lambda: 'riscv64')

    profile = resolve_environment('riscv')

    assert profile.host_arch == 'riscv64'
    assert not profile.is_cross
