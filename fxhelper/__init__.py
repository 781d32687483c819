"""FX Helper: technical indicators and OANDA bridge."""

__version__ = "0.1.0"
