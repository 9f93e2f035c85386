"""Tests for the agency-os command line."""

import pytest

import cli.main as cli_main
from agency_os.persistence import PersistenceBridge, SnapshotStore
from tests.fixtures import seeded_snapshot


@pytest.fixture
def bridge(db_path, monkeypatch):
    monkeypatch.setattr(cli_main, "configure_logging", lambda *a, **kw: None)
    store = SnapshotStore(db_path)
    store.save(seeded_snapshot())
    return PersistenceBridge(store)


class TestStatus:
    def test_prints_kpis_and_badges(self, bridge, capsys):
        assert cli_main.main(["status"], bridge=bridge) == 0
        out = capsys.readouterr().out
        assert "AGENCY STATUS" in out
        assert "Cash collected:   150,000" in out
        assert "Active sprints:   1" in out
        assert "Pipeline leads:   1" in out
        assert "BADGES" in out
        assert "0 total, 0 blocked" in out
        assert "HEALTH" in out
        assert " at-risk, " in out


class TestRoster:
    def test_lists_clients(self, bridge, capsys):
        assert cli_main.main(["roster"], bridge=bridge) == 0
        out = capsys.readouterr().out
        assert "Mozart House" in out
        assert "YZ Corp" in out

    def test_status_filter(self, bridge, capsys):
        cli_main.main(["roster", "--status", "Discovery"], bridge=bridge)
        out = capsys.readouterr().out
        assert "YZ Corp" in out
        assert "Mozart House" not in out

    def test_no_match(self, bridge, capsys):
        cli_main.main(["roster", "--query", "nobody"], bridge=bridge)
        assert "No clients match." in capsys.readouterr().out


class TestSprint:
    def test_generates_and_persists(self, bridge, db_path, capsys):
        assert cli_main.main(["sprint", "2"], bridge=bridge) == 0
        assert "Generated 7 sprint tasks for YZ Corp (ids 2-8)" in capsys.readouterr().out

        stored = SnapshotStore(db_path).load()
        assert [t.id for t in stored.tasks if t.client_id == 2] == list(range(2, 9))

    def test_unknown_client(self, bridge, capsys):
        assert cli_main.main(["sprint", "99"], bridge=bridge) == 1
        assert "Client 99 not found." in capsys.readouterr().out


class TestInit:
    def test_sets_phrases_once(self, bridge, db_path, capsys):
        args = ["init", "--elevated", "north star", "--standard", "daily grind"]
        assert cli_main.main(args, bridge=bridge) == 0
        assert "Access phrases saved" in capsys.readouterr().out
        assert SnapshotStore(db_path).load().settings.initialized

        fresh = PersistenceBridge(SnapshotStore(db_path))
        assert cli_main.main(args, bridge=fresh) == 1
        assert "already configured" in capsys.readouterr().out

    def test_force_replaces(self, bridge, db_path):
        cli_main.main(["init", "--elevated", "a", "--standard", "b"], bridge=bridge)
        before = SnapshotStore(db_path).load().settings.access_phrase_hashes

        fresh = PersistenceBridge(SnapshotStore(db_path))
        args = ["init", "--elevated", "c", "--standard", "d", "--force"]
        assert cli_main.main(args, bridge=fresh) == 0
        assert SnapshotStore(db_path).load().settings.access_phrase_hashes != before

    def test_identical_phrases_rejected(self, bridge, capsys):
        assert cli_main.main(["init", "--elevated", "same", "--standard", "same"], bridge=bridge) == 1
        assert "Setup failed" in capsys.readouterr().out
