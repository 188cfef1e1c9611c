"""hnclient — terminal client for Hacker News."""

__version__ = "0.1.0"
