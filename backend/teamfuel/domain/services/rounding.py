"""
Arrondis commerciaux (demi vers le haut) partages par les calculs du recalcul.
"""
from decimal import Decimal, ROUND_HALF_UP


def round_half_up(value: float, ndigits: int = 0) -> float:
    """Arrondit au plus proche, 0.5 vers le haut (round() de Python arrondit au pair)."""
    quantum = Decimal(1).scaleb(-ndigits)
    return float(Decimal(repr(float(value))).quantize(quantum, rounding=ROUND_HALF_UP))


def round_int(value: float) -> int:
    """round_half_up a l'unite, en entier."""
    return int(round_half_up(value))
