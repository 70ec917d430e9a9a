import logging

import pytest
from click.testing import CliRunner

from session_logger.cli import main
from session_logger.services.session_store import SessionStore


@pytest.fixture
def db_path(tmp_path):
    return str(tmp_path / "cli.db")


@pytest.fixture
def runner():
    return CliRunner()


def invoke(runner: CliRunner, db_path: str, *args: str):
    return runner.invoke(main, ["--db", db_path, "--level", "3", *args])


def test_start_and_show(runner, db_path):
    result = invoke(
        runner, db_path, "start", "--package", "p", "--name", "n", "--filename", "f.log", "--title", "t"
    )
    assert result.exit_code == 0, result.output
    key = int(result.output.strip())

    result = invoke(runner, db_path, "show", "f.log")
    assert result.exit_code == 0, result.output
    fields = result.output.strip().split("\t")
    assert fields[0] == str(key)
    assert fields[3] == "f.log"
    assert fields[6] == "open"
    assert fields[7] == "t"


def test_start_prints_notice_at_info(runner, db_path):
    result = runner.invoke(
        main,
        ["--db", db_path, "--level", "6", "start", "--package", "p", "--name", "n", "--filename", "f.log"],
    )

    assert result.exit_code == 0, result.output
    assert result.output.startswith("INFO: Start logger\n")


def test_start_twice_reuses_session(runner, db_path):
    args = ("start", "--package", "p", "--name", "n", "--filename", "f.log")
    first = invoke(runner, db_path, *args)
    second = invoke(runner, db_path, *args)

    assert first.output == second.output


def test_end_closes_session(runner, db_path):
    invoke(runner, db_path, "start", "--package", "p", "--name", "n", "--filename", "f.log")

    result = invoke(runner, db_path, "end", "f.log")
    assert result.exit_code == 0, result.output

    with SessionStore(db_path) as store:
        assert store.find_latest_open_session("f.log") is None
        assert store.find_latest_session_key("f.log") is not None


def test_end_unknown_file_fails(runner, db_path):
    result = invoke(runner, db_path, "end", "missing.log")

    assert result.exit_code != 0
    assert "No session found for missing.log" in result.output


def test_title_updates_latest_session(runner, db_path):
    invoke(runner, db_path, "start", "--package", "p", "--name", "n", "--filename", "f.log")

    result = invoke(runner, db_path, "title", "f.log", "renamed")
    assert result.exit_code == 0, result.output

    result = invoke(runner, db_path, "show", "f.log")
    assert result.output.strip().split("\t")[7] == "renamed"


def test_list_and_reset(runner, db_path):
    invoke(runner, db_path, "start", "--package", "p", "--name", "n", "--filename", "a.log")
    invoke(runner, db_path, "start", "--package", "p", "--name", "n", "--filename", "b.log")

    result = invoke(runner, db_path, "list")
    assert len(result.output.strip().splitlines()) == 2

    result = invoke(runner, db_path, "reset")
    assert result.exit_code != 0

    result = invoke(runner, db_path, "reset", "--yes")
    assert result.exit_code == 0, result.output

    result = invoke(runner, db_path, "list")
    assert result.output == ""


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers = handlers
    root.setLevel(level)


def test_log_dir_adds_file_handler(runner, db_path, tmp_path, restore_root_logger):
    log_dir = tmp_path / "logs"

    result = runner.invoke(
        main, ["--db", db_path, "--level", "3", "--log-dir", str(log_dir), "list"]
    )

    assert result.exit_code == 0, result.output
    assert [p.name.startswith("session-logger.") for p in log_dir.glob("*.log")] == [True]
    assert any(
        isinstance(handler, logging.FileHandler)
        for handler in restore_root_logger.handlers
    )
