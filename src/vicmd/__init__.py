"""UI-agnostic vi command engine: counts, operators, motions and repeat."""

__all__ = [
    "actions",
    "buffer",
    "errors",
    "keymaps",
    "modes",
    "motions",
    "parsing",
    "ranges",
    "repeat",
    "runtime",
]

__version__ = "0.1.0"
