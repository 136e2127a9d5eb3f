"""
Number and text formatting shared by the calculator modules.

Every formatted number goes through ``fmt`` so that the decimal policy and the
rounding mode (half-up on the shortest decimal representation) are identical
across modules.
"""
from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable


def _to_decimal(value: float) -> Decimal:
    # repr() gives the shortest string that round-trips, so 0.125 stays 0.125
    return Decimal(repr(float(value)))


def fmt(value: float, decimals: int = 1) -> str:
    """Format ``value`` with a fixed number of decimals, rounding half-up."""
    quantum = Decimal(1).scaleb(-decimals)
    return str(_to_decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))


def round_half_up(value: float) -> int:
    """Round to the nearest integer; ties go away from zero."""
    return int(_to_decimal(value).quantize(Decimal(1), rounding=ROUND_HALF_UP))


def round_to_step(value: float, step: float) -> float:
    """Round ``value`` to the nearest multiple of ``step`` (half-up)."""
    return round_half_up(value / step) * step


def plain(value: float) -> str:
    """Render a float the way it was typed in templates: 200.0, 0.5, 74.5."""
    return repr(float(value))


def bullet_list(items: Iterable[str]) -> str:
    """Join items as a bulleted block: ``• a\\n• b``."""
    return "• " + "\n• ".join(items)


def lines(items: Iterable[str]) -> str:
    return "\n".join(items)
