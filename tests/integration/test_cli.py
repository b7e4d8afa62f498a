from pathlib import Path

import pytest

from src.app_shell import cli

PROJECT_ROOT = Path(__file__).resolve().parents[2]

SUBJECT = "cli@example.com"


@pytest.fixture
def cli_env(tmp_path, monkeypatch):
    monkeypatch.setenv("TRACKER_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("TRACKER_RULES_PATH", str(PROJECT_ROOT / "rules.yaml"))


def test_migrate(cli_env, capsys, tmp_path):
    cli.main(["migrate"])
    assert "Database ready" in capsys.readouterr().out
    assert (tmp_path / "data" / "tracker.db").exists()


def test_add_list_and_stats(cli_env, capsys):
    cli.main(["add", "--subject", SUBJECT, "entry", "2024-01-01T10:00:00-05:00", "--port", "YUL"])
    cli.main(["add", "--subject", SUBJECT, "exit", "2024-01-10T10:00:00-05:00", "--port", "YUL"])
    capsys.readouterr()

    cli.main(["list", "--subject", SUBJECT])
    listing = capsys.readouterr().out.splitlines()
    assert len(listing) == 2
    assert "ENTRY" in listing[0] and "2024-01-01 10:00" in listing[0]

    cli.main(["stats", "--subject", SUBJECT, "--today", "2024-03-15", "--trace"])
    out = capsys.readouterr().out
    assert "2024-01-01 -> 2024-01-10: 10 day(s)" in out
    assert "Days in Canada: 10" in out
    assert "Remaining: 720 of 730" in out


def test_add_rejects_bad_timestamp(cli_env):
    with pytest.raises(SystemExit):
        cli.main(["add", "--subject", SUBJECT, "entry", "soon", "--port", "YUL"])


def test_delete(cli_env, capsys):
    cli.main(["add", "--subject", SUBJECT, "entry", "2024-01-01T10:00:00Z", "--port", "YYC"])
    crossing_id = capsys.readouterr().out.split()[-1]

    cli.main(["delete", "--subject", SUBJECT, crossing_id])
    assert f"Deleted {crossing_id}" in capsys.readouterr().out

    with pytest.raises(SystemExit):
        cli.main(["delete", "--subject", SUBJECT, crossing_id])


def test_empty_list(cli_env, capsys):
    cli.main(["list", "--subject", SUBJECT])
    assert "No crossings recorded." in capsys.readouterr().out


def _rules_file(tmp_path, monkeypatch, text):
    path = tmp_path / "broken-rules.yaml"
    path.write_text(text)
    monkeypatch.setenv("TRACKER_RULES_PATH", str(path))


def test_invalid_rules_exit_cleanly(cli_env, tmp_path, monkeypatch, caplog):
    _rules_file(tmp_path, monkeypatch, "presence:\n  target_days: -5\n")

    with pytest.raises(SystemExit) as exc:
        cli.main(["list", "--subject", SUBJECT])

    assert exc.value.code == 1
    assert any("Cannot load configuration" in r.getMessage() for r in caplog.records)


def test_unknown_timezone_exit_cleanly(cli_env, tmp_path, monkeypatch, caplog):
    _rules_file(tmp_path, monkeypatch, "presence:\n  timezone: Mars/Olympus_Mons\n")

    with pytest.raises(SystemExit) as exc:
        cli.main(["stats", "--subject", SUBJECT])

    assert exc.value.code == 1
    assert any(
        r.levelname == "CRITICAL" and "Unknown timezone: Mars/Olympus_Mons" in r.getMessage()
        for r in caplog.records
    )


def test_missing_rules_file(cli_env, tmp_path, monkeypatch):
    monkeypatch.setenv("TRACKER_RULES_PATH", str(tmp_path / "absent.yaml"))

    with pytest.raises(SystemExit) as exc:
        cli.main(["migrate"])
    assert exc.value.code == 1
