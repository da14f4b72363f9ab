"""PagePilot: a Playwright-driven browser session and interaction engine."""

__version__ = "0.1.0"
