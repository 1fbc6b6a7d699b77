"""Motion, operator and editing handlers bound by the default keymaps."""

from . import edit, motions, operators

__all__ = ["edit", "motions", "operators"]
