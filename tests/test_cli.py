"""
Tests for cli.py
Runs commands against a temporary balances CSV.
"""

import argparse

import pytest

import cli


@pytest.fixture(autouse=True)
def temp_csv(tmp_path, monkeypatch):
    path = tmp_path / "data" / "balances.csv"
    monkeypatch.setattr(cli, "CSV_PATH", path)
    return path


def _args(**kwargs):
    return argparse.Namespace(**kwargs)


class TestBalanceCommands:

    def test_add_writes_csv(self, temp_csv, capsys):
        cli.cmd_add(_args(program="chase-ur", points=80000))

        assert temp_csv.exists()
        balances = cli.load_balances()
        assert [(b.program_id, b.balance) for b in balances] == [("chase-ur", 80000)]
        assert "Chase Ultimate Rewards" in capsys.readouterr().out

    def test_add_unknown_program_exits(self, capsys):
        with pytest.raises(SystemExit) as exc:
            cli.cmd_add(_args(program="nope", points=1))

        assert exc.value.code == 1
        assert "Error: Unknown program" in capsys.readouterr().out

    def test_add_negative_points_exits(self):
        with pytest.raises(SystemExit):
            cli.cmd_add(_args(program="chase-ur", points=-1))

    def test_add_twice_exits(self):
        cli.cmd_add(_args(program="chase-ur", points=100))

        with pytest.raises(SystemExit):
            cli.cmd_add(_args(program="chase-ur", points=200))

    def test_update_keeps_order(self):
        cli.cmd_add(_args(program="amex-mr", points=10))
        cli.cmd_add(_args(program="chase-ur", points=20))

        cli.cmd_update(_args(program="amex-mr", points=55000))

        balances = cli.load_balances()
        assert [b.program_id for b in balances] == ["amex-mr", "chase-ur"]
        assert balances[0].balance == 55000

    def test_update_missing_exits(self):
        with pytest.raises(SystemExit):
            cli.cmd_update(_args(program="chase-ur", points=5))

    def test_remove(self):
        cli.cmd_add(_args(program="chase-ur", points=20))

        cli.cmd_remove(_args(program="chase-ur"))

        assert cli.load_balances() == []
        with pytest.raises(SystemExit):
            cli.cmd_remove(_args(program="chase-ur"))


class TestExploreCommand:

    def test_explore_without_balances(self, capsys):
        cli.cmd_explore(_args(destination=None, home=None, limit=10, links=False))

        assert "No balances found" in capsys.readouterr().out

    def test_explore_japan_lists_affordable_award(self, capsys):
        cli.cmd_add(_args(program="chase-ur", points=80000))
        capsys.readouterr()

        cli.cmd_explore(_args(destination="Japan", home="bos", limit=10, links=False))

        out = capsys.readouterr().out
        assert "=== Award Opportunities to Japan ===" in out
        assert "ANA First Class to Japan" in out
        assert "CAN BOOK" in out
        assert "Positioning from BOS" in out

    def test_explore_rejects_zero_limit(self):
        with pytest.raises(SystemExit):
            cli.cmd_explore(_args(destination=None, home=None, limit=0, links=False))


def test_destinations_search(capsys):
    cli.cmd_destinations(_args(query="japan"))

    assert "Japan (Asia)" in capsys.readouterr().out
