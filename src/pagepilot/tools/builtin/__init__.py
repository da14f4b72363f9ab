# Builtin tools package.

from pagepilot.tools.builtin.browser import BrowserTool

__all__ = [
    "BrowserTool",
]
