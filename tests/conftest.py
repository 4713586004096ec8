"""
Shared fixtures.

The directory holding this file is put on sys.path so that `shapes` (the
foreign classes the tests describe) imports as a top-level module, exactly
as a user's own module would.
"""
from __future__ import annotations

import os
import sys

import pytest

_TESTS_PATH = os.path.abspath(os.path.dirname(__file__))
if _TESTS_PATH not in sys.path:
    sys.path.insert(0, _TESTS_PATH)

from mirrorc.compiler.pipeline import CompileOptions  # noqa: E402
from mirrorc.mirror import MirrorSynthesizer, PythonReflection  # noqa: E402


@pytest.fixture
def synthesizer() -> MirrorSynthesizer:
    """A synthesizer with its own, empty descriptor cache."""
    return MirrorSynthesizer(reflection=PythonReflection())


@pytest.fixture
def options(synthesizer: MirrorSynthesizer) -> CompileOptions:
    return CompileOptions(synthesizer=synthesizer)
