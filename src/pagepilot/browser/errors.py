"""Exceptions raised by the browser engine.

Only launch failures escape the engine; everything else is folded into an
``ActionResult`` at the primitive boundary.
"""


class PagePilotError(Exception):
    """Base class for engine errors."""


class BrowserLaunchError(PagePilotError):
    """The shared browser process could not be started."""
