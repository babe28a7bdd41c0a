# SPDX-License-Identifier: BSD-3-Clause
import pytest

from cook.base.track import CTAGS_LANGUAGES, Tracker
from cook.build.capability import CapabilitySet
from cook.build.errors import PhaseFailure
from cook.build.utility import find_sources

from tests.conftest import RecordingRunner

ALL_TOOLS = CapabilitySet(indexer_available=True, depgraph_available=True,
                          depgraph_enabled=True, secondary_indexer_available=True)


@pytest.fixture
def source_root(tmp_path):
    (tmp_path / 'init').mkdir()
    (tmp_path / 'init' / 'main.c').write_text('int main(void) { return 0; }\n')
    (tmp_path / 'include').mkdir()
    (tmp_path / 'include' / 'kernel.h').write_text('#pragma once\n')
    (tmp_path / 'Makefile').write_text('all:\n')
    (tmp_path / 'README').write_text('not indexed\n')
    (tmp_path / '.git').mkdir()
    (tmp_path / '.git' / 'stray.c').write_text('int x;\n')
    return tmp_path


def file_list(path) -> list:
    return path.read_text().splitlines()


def test_every_indexer_runs_in_order(source_root, runner):
    ran = Tracker(source_root, ALL_TOOLS, use_gtags=True, runner=runner).track()

    assert ran == ['ctags', 'cscope', 'gtags']
    assert runner.commands == [
        ['ctags', f'--languages={CTAGS_LANGUAGES}', '-R'],
        ['cscope', '-q', '-R', '-b', '-i', 'cscope.files'],
        ['gtags', '-i', '-f', 'gtags.files'],
    ]
    assert all(call['cwd'] == source_root for call in runner.calls)


def test_file_lists_match_source_scan(source_root, runner):
    Tracker(source_root, ALL_TOOLS, use_gtags=True, runner=runner).track()

    sources = find_sources(str(source_root))
    assert file_list(source_root / 'cscope.files') == sources
    assert file_list(source_root / 'gtags.files') == sources
    assert 'README' not in sources
    assert not any(path.startswith('.git') for path in sources)


def test_stale_indexes_are_removed(source_root, runner):
    for name in ['tags', 'cscope.out', 'cscope.in.out', 'GTAGS', 'GRTAGS']:
        (source_root / name).write_text('stale')

    Tracker(source_root, ALL_TOOLS, use_gtags=True, runner=runner).track()

    for name in ['tags', 'cscope.out', 'cscope.in.out', 'GTAGS', 'GRTAGS']:
        assert not (source_root / name).exists()


def test_installed_cscope_is_not_used_unless_enabled(source_root, runner):
    capabilities = CapabilitySet(indexer_available=True, depgraph_available=True)
    (source_root / 'cscope.out').write_text('stale')

    ran = Tracker(source_root, capabilities, runner=runner).track()

    assert ran == ['ctags']
    assert runner.commands == [['ctags', f'--languages={CTAGS_LANGUAGES}', '-R']]
    assert not (source_root / 'cscope.files').exists()
    assert (source_root / 'cscope.out').exists()


def test_gtags_needs_both_flag_and_tool(source_root, runner):
    without_flag = Tracker(source_root, ALL_TOOLS, use_gtags=False, runner=runner).track()
    without_tool = Tracker(source_root, CapabilitySet(), use_gtags=True, runner=runner).track()

    assert without_flag == ['ctags', 'cscope']
    assert without_tool == []
    assert ['gtags', '-i', '-f', 'gtags.files'] not in runner.commands


def test_nothing_available(source_root, runner, capsys):
    assert Tracker(source_root, CapabilitySet(), runner=runner).track() == []

    assert runner.commands == []
    assert 'nothing to do' in capsys.readouterr().out


def test_indexer_failure_stops_later_tools(source_root):
    runner = RecordingRunner(fail_on='cscope.files', returncode=1)

    with pytest.raises(PhaseFailure) as excinfo:
        Tracker(source_root, ALL_TOOLS, use_gtags=True, runner=runner).track()

    assert excinfo.value.phase == 'cscope'
    assert excinfo.value.returncode == 1
    assert [cmd[0] for cmd in runner.commands] == ['ctags', 'cscope']
