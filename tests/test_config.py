from __future__ import annotations

import io
import logging
import os

from mirrorc.compiler.pipeline import CompileOptions
from mirrorc.internals.config import get_effective_cwd, get_log_level, get_search_paths
from mirrorc.internals.logging import configure_logging, parse_level, verbosity_to_level
from mirrorc.mirror import default_synthesizer


def test_search_paths_from_environment(monkeypatch, tmp_path):
    monkeypatch.setenv("MIRRORC_PATH", os.pathsep.join([str(tmp_path), "", "/opt/mods"]))
    assert get_search_paths() == (str(tmp_path), "/opt/mods")
    monkeypatch.delenv("MIRRORC_PATH")
    assert get_search_paths() == ()


def test_effective_cwd(monkeypatch, tmp_path):
    monkeypatch.setenv("MIRRORC_CWD", str(tmp_path))
    assert get_effective_cwd() == tmp_path


def test_log_level(monkeypatch):
    monkeypatch.delenv("MIRRORC_LOG_LEVEL", raising=False)
    assert get_log_level() == "WARNING"
    monkeypatch.setenv("MIRRORC_LOG_LEVEL", "debug")
    assert get_log_level() == "DEBUG"


def test_level_parsing():
    assert parse_level("info") == logging.INFO
    assert parse_level("nonsense") == logging.WARNING
    assert parse_level(None, default=logging.ERROR) == logging.ERROR
    assert verbosity_to_level(0, "ERROR") == logging.ERROR
    assert verbosity_to_level(1) == logging.INFO
    assert verbosity_to_level(3) == logging.DEBUG


def test_configure_logging_replaces_its_handler():
    first, second = io.StringIO(), io.StringIO()
    logger = configure_logging("INFO", stream=first)
    configure_logging("DEBUG", stream=second)
    try:
        ours = [h for h in logger.handlers if getattr(h, "_mirrorc_handler", False)]
        assert len(ours) == 1
        logging.getLogger("mirrorc.tests").debug("hello")
        assert "DEBUG | mirrorc.tests | hello" in second.getvalue()
        assert first.getvalue() == ""
    finally:
        configure_logging("WARNING")


def test_compile_options_synthesizer(synthesizer, tmp_path):
    assert CompileOptions().resolve_synthesizer() is default_synthesizer()
    assert CompileOptions(synthesizer=synthesizer).resolve_synthesizer() is synthesizer

    options = CompileOptions(search_paths=[str(tmp_path)])
    private = options.resolve_synthesizer()
    assert private is not default_synthesizer()
    assert private.reflection.search_paths == (str(tmp_path),)
    assert options.resolve_synthesizer() is private
