import sys

import pytest
from loguru import logger

import main
from config.logging import configure_logging


@pytest.fixture(autouse=True)
def restore_loguru():
    yield
    logger.remove()
    logger.add(sys.stderr)


def test_configure_logging_writes_file(tmp_path):
    log_file = tmp_path / "logs" / "bundles.log"

    configure_logging(level="DEBUG", log_file=str(log_file))
    logger.debug("hello from the bundle pipeline")
    logger.complete()

    assert "hello from the bundle pipeline" in log_file.read_text()


def test_cli_lists_eligible_files(tmp_path, monkeypatch, capsys):
    (tmp_path / "app.js").write_text("")
    (tmp_path / "notes.txt").write_text("")
    monkeypatch.setattr(
        sys,
        "argv",
        ["main.py", "--workspace", str(tmp_path), "--extensions", ".js"],
    )

    with pytest.raises(SystemExit) as exit_info:
        main.main()

    out = capsys.readouterr().out
    assert exit_info.value.code == 0
    assert f"{tmp_path}: 1 eligible files" in out
    assert "  /app.js" in out


def test_cli_with_empty_filters_fails(tmp_path, monkeypatch):
    monkeypatch.setattr(sys, "argv", ["main.py", "--workspace", str(tmp_path)])

    with pytest.raises(SystemExit) as exit_info:
        main.main()

    assert exit_info.value.code == 1
