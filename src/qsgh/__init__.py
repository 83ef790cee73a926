"""qsgh — bootstrap the shared QS Git hooks on a developer machine."""

__version__ = "0.3.0"
