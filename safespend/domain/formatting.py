"""Currency display helpers."""

import math

CURRENCY_SYMBOL = "₹"


def _group_indian(digits: str) -> str:
    """Group integer digits the Indian way: last three, then pairs (12,34,567)."""
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    pairs = []
    while len(head) > 2:
        pairs.insert(0, head[-2:])
        head = head[:-2]
    if head:
        pairs.insert(0, head)
    return ",".join(pairs + [tail])


def format_currency(amount: float) -> str:
    """Format an amount in rupees with paise, e.g. ``₹1,23,456.78`` or ``-₹50.00``.

    Non-finite amounts are shown as zero.
    """
    safe = amount if math.isfinite(amount) else 0.0
    rounded = round(abs(safe), 2)
    whole, _, paise = f"{rounded:.2f}".partition(".")

    text = f"{CURRENCY_SYMBOL}{_group_indian(whole)}.{paise}"
    return f"-{text}" if safe < 0 and rounded > 0 else text
