"""
End-to-end runs of the CLI over tests/e2e/*.mrc.

The file name states the expected exit code:
- test_*.mrc:      0 (no errors, no warnings)
- test_warn_*.mrc: 1 (compiled with warnings)
- test_err_*.mrc:  2 (compilation failed)
"""
from __future__ import annotations

from pathlib import Path

import pytest

from mirrorc.compiler.cli import main

E2E_DIR = Path(__file__).parent / "e2e"
CASES = sorted(E2E_DIR.glob("test_*.mrc"))


def get_expected_exit_code(test_file: Path) -> int:
    name = test_file.name
    if name.startswith("test_warn_"):
        return 1
    if name.startswith("test_err_"):
        return 2
    return 0


def test_cases_exist():
    assert CASES


@pytest.mark.parametrize("test_file", CASES, ids=lambda p: p.stem)
def test_e2e(test_file, capsys):
    exit_code = main([str(test_file), "--no-color"])
    captured = capsys.readouterr()
    assert exit_code == get_expected_exit_code(test_file), captured.err


EXPECTED_CODES = {
    "test_err_arity": {"CE2001"},
    "test_err_literal_type": {"CE2003"},
    "test_err_nested_type": {"CE2004"},
    "test_err_undescribable_foreign": {"CE1004"},
    "test_err_duplicates": {"CE1002", "CE1003", "CE1005", "CE2001"},
    "test_err_syntax": {"CE3001"},
    "test_warn_unreachable_arm": {"CW2001"},
}


@pytest.mark.parametrize("stem,codes", sorted(EXPECTED_CODES.items()))
def test_e2e_diagnostic_codes(stem, codes, capsys):
    main([str(E2E_DIR / f"{stem}.mrc"), "--no-color"])
    err = capsys.readouterr().err
    for code in codes:
        assert f"[{code}]" in err
