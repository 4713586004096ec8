from __future__ import annotations

import pytest

from mirrorc.compiler.cli import main


def _write(tmp_path, name, text):
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return path


def test_success(tmp_path, capsys):
    path = _write(tmp_path, "geometry.mrc", "struct Point(x: int, y: int)\nlet p = Point(a, b)\n")
    assert main([str(path), "--describe"]) == 0

    out = capsys.readouterr().out
    assert "Unit: geometry" in out
    assert "struct Point = geometry:Point(x: int, y: int)" in out
    assert "let p = Point(a, b)" in out


def test_warnings_exit_1(tmp_path, capsys):
    path = _write(tmp_path, "w.mrc", "struct P(x: int)\nmatch m { _ -> all  P(x) -> never }\n")
    assert main([str(path), "--no-color"]) == 1
    assert "CW2001" in capsys.readouterr().err


def test_errors_exit_2(tmp_path, capsys):
    path = _write(tmp_path, "e.mrc", "struct Point(x: int, y: int)\nlet p = Point(a, b, c)\n")
    assert main([str(path), "--no-color"]) == 2

    err = capsys.readouterr().err
    assert "CE2001" in err
    assert "expects 2 sub-pattern(s), got 3" in err


def test_syntax_error_exit_2(tmp_path, capsys):
    path = _write(tmp_path, "s.mrc", "struct Point(x: int\n")
    assert main([str(path)]) == 2
    assert "CE3001" in capsys.readouterr().err


def test_missing_file(tmp_path, capsys):
    assert main([str(tmp_path / "nope.mrc")]) == 2
    assert "cannot read" in capsys.readouterr().err


def test_no_source(capsys):
    assert main([]) == 2
    assert "source file required" in capsys.readouterr().err


def test_relative_paths_use_mirrorc_cwd(tmp_path, monkeypatch):
    _write(tmp_path, "rel.mrc", "struct P(x: int)\n")
    monkeypatch.setenv("MIRRORC_CWD", str(tmp_path))
    assert main(["rel.mrc"]) == 0


def test_dump_flags(tmp_path, capsys):
    path = _write(tmp_path, "d.mrc", "struct P(x: int)\n")
    assert main([str(path), "--dump-parse", "--dump-ast"]) == 0
    out = capsys.readouterr().out
    assert "struct_def" in out
    assert "StructDef(" in out


def test_mirror(capsys):
    assert main(["--mirror", "shapes:Point"]) == 0
    out = capsys.readouterr().out
    assert "Type: shapes:Point" in out
    assert "Arity: 2" in out
    assert "  x: int" in out


def test_mirror_failure(capsys):
    assert main(["--mirror", "shapes:Blob"]) == 2
    assert "no canonical constructor" in capsys.readouterr().err


def test_version(capsys):
    assert main(["--version"]) == 0
    assert "mirrorc" in capsys.readouterr().out
