# SPDX-License-Identifier: BSD-3-Clause
import subprocess

import pytest

from cook.build.errors import PhaseFailure
from cook.build.timer import PhaseTimer, format_duration


def fake_clock(*ticks):
    values = iter(ticks)
    return lambda: next(values)


@pytest.mark.parametrize('seconds, text', [
    (0, '0m 0s'),
    (59.9, '0m 59s'),
    (60, '1m 0s'),
    (192, '3m 12s'),
    (3725, '62m 5s'),
])
def test_format_duration(seconds, text):
    assert format_duration(seconds) == text


def test_successful_phase_is_reported(capsys):
    with PhaseTimer('build', 'compiling kernel', clock=fake_clock(100.0, 292.5)) as result:
        pass

    assert result.phase_name == 'build'
    assert result.exit_status == 0
    assert result.duration == 192.5
    assert capsys.readouterr().out.endswith('[cook] Done compiling kernel in 3m 12s\n')


def test_failure_passes_through_unchanged(capsys):
    failure = PhaseFailure('clean', 7)

    with pytest.raises(PhaseFailure) as excinfo:
        with PhaseTimer('clean', clock=fake_clock(0.0, 61.0)) as result:
            raise failure

    assert excinfo.value is failure
    assert result.exit_status == 7
    assert not result.succeeded
    assert '[cook] clean failed after 1m 1s (exit status 7)' in capsys.readouterr().out


def test_called_process_error_status_is_recorded():
    with pytest.raises(subprocess.CalledProcessError):
        with PhaseTimer('tags', clock=fake_clock(0.0, 1.0)) as result:
            raise subprocess.CalledProcessError(3, ['make', 'tags'])

    assert result.exit_status == 3


def test_interrupt_is_recorded_and_propagated():
    with pytest.raises(KeyboardInterrupt):
        with PhaseTimer('build', clock=fake_clock(0.0, 1.0)) as result:
            raise KeyboardInterrupt

    assert result.exit_status == 130
