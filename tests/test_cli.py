"""Tests for the require-detective command line."""

import logging

import pytest

from require_detective.cli import main
from require_detective.constants import LOG_LEVEL_ENV_VAR, LOGGER_NAME, WORD_ENV_VAR


@pytest.fixture(autouse=True)
def restore_package_logger():
    """Undo the handler changes configure_logging makes."""
    logger = logging.getLogger(LOGGER_NAME)
    handlers = list(logger.handlers)
    level = logger.level
    propagate = logger.propagate
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)
    logger.propagate = propagate


@pytest.fixture
def js_file(tmp_path):
    """Write a small CommonJS module and return its path."""
    path = tmp_path / "index.js"
    path.write_text(
        "#!/usr/bin/env node\n"
        "var a = require('a');\n"
        "var b = require('./b');\n"
        "var c = require(dir + '/c');\n",
        encoding="utf-8",
    )
    return path


class TestMain:
    """Test the command line entry point."""

    def test_prints_dependencies(self, js_file, capsys):
        """Each resolved name is printed on its own line."""
        main([str(js_file)])
        captured = capsys.readouterr()
        assert captured.out == "a\n./b\n"
        assert captured.err == ""

    def test_no_arguments(self, capsys):
        """Without a file argument the tool exits 1 with an empty message."""
        with pytest.raises(SystemExit) as excinfo:
            main([])
        assert excinfo.value.code == 1
        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err == "\n"

    def test_missing_file(self, tmp_path, capsys):
        """An unreadable file exits 1 with the error on stderr."""
        with pytest.raises(SystemExit) as excinfo:
            main([str(tmp_path / "missing.js")])
        assert excinfo.value.code == 1
        assert "missing.js" in capsys.readouterr().err

    def test_syntax_error(self, tmp_path, capsys):
        """Invalid JavaScript exits 1 with the parse error on stderr."""
        path = tmp_path / "broken.js"
        path.write_text("var x = require('a'", encoding="utf-8")
        with pytest.raises(SystemExit) as excinfo:
            main([str(path)])
        assert excinfo.value.code == 1
        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err.strip() != ""

    def test_word_from_environment(self, tmp_path, capsys, monkeypatch):
        """The target identifier can be set through the environment."""
        path = tmp_path / "load.js"
        path.write_text("load('x'); require('y');", encoding="utf-8")
        monkeypatch.setenv(WORD_ENV_VAR, "load")
        main([str(path)])
        assert capsys.readouterr().out == "x\n"

    def test_uses_argv_by_default(self, js_file, capsys, monkeypatch):
        """sys.argv is read when no argument list is passed."""
        monkeypatch.setattr("sys.argv", ["require-detective", str(js_file)])
        main()
        assert capsys.readouterr().out == "a\n./b\n"

    def test_unknown_log_level(self, js_file, capsys, monkeypatch):
        """A bad log level setting exits 1 with a message instead of a traceback."""
        monkeypatch.setenv(LOG_LEVEL_ENV_VAR, "LOUD")
        with pytest.raises(SystemExit) as excinfo:
            main([str(js_file)])
        assert excinfo.value.code == 1
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "Unknown log level" in captured.err
