"""mirrorc - destructuring contracts and type mirrors for structural product types."""
from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("mirrorc")
    __dev__ = False
except PackageNotFoundError:
    # Development mode - read from pyproject.toml
    import tomllib
    from pathlib import Path
    try:
        pyproject = Path(__file__).parent.parent / "pyproject.toml"
        with open(pyproject, "rb") as f:
            __version__ = tomllib.load(f).get("project", {}).get("version", "unknown")
    except OSError:
        __version__ = "unknown"
    __dev__ = True

from mirrorc.compiler.errors import CompilationError, PatternArityError
from mirrorc.compiler.pipeline import CompileOptions, compile_file, compile_program, compile_source
from mirrorc.backend.runtime import CaseDispatch, CompiledUnit, Destructure, MatchFailure
from mirrorc.mirror import DestructuringContract, TypeMetadata, canonical, mirror_of

__all__ = [
    "__version__",
    "CompilationError", "PatternArityError",
    "CompileOptions", "compile_file", "compile_program", "compile_source",
    "CaseDispatch", "CompiledUnit", "Destructure", "MatchFailure",
    "DestructuringContract", "TypeMetadata", "canonical", "mirror_of",
]
