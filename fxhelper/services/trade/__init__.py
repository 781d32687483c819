"""
Trade Helpers

Signal preset templates and order preview sizing.
"""

from fxhelper.services.trade.service import preset_signal, preview_order

__all__ = ["preset_signal", "preview_order"]
