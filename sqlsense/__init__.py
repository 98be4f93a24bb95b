"""sqlsense - Context-aware SQL completion."""

from importlib.metadata import PackageNotFoundError, version
from typing import TYPE_CHECKING, Any

__all__ = [
    "__version__",
    "main",
    "CompletionEngine",
    "IntellisenseConfig",
    "get_completions",
]

try:
    __version__ = version("sqlsense")
except PackageNotFoundError:
    __version__ = "0.0.0.dev"

if TYPE_CHECKING:
    from .cli import main
    from sqlsense.domains.query.completion.completion import CompletionEngine, get_completions
    from sqlsense.domains.query.completion.core import IntellisenseConfig


def __getattr__(name: str) -> Any:
    """Lazy import so `import sqlsense` stays free of side effects."""
    if name == "main":
        from .cli import main

        return main
    if name in ("CompletionEngine", "get_completions"):
        from sqlsense.domains.query.completion import completion

        return getattr(completion, name)
    if name == "IntellisenseConfig":
        from sqlsense.domains.query.completion.core import IntellisenseConfig

        return IntellisenseConfig
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
