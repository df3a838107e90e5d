"""Integer arithmetic utilities for cents-based settlement.

All balances and amounts use int (cents). No float, no Decimal.
All percentages use int basis points (10000 bps = 100%).
"""

BPS_DENOMINATOR = 10000


def validate_bps(bps: int) -> None:
    """Validate that a rate is in the range [0, 10000] bps."""
    if not (0 <= bps <= BPS_DENOMINATOR):
        raise ValueError(f"Rate must be between 0 and 10000 bps, got {bps}")


def cents_to_display(cents: int) -> str:
    """Convert cents to display string: 6500 -> '$65.00', -1200 -> '-$12.00'."""
    if cents < 0:
        abs_cents = -cents
        return f"-${abs_cents // 100:,}.{abs_cents % 100:02d}"
    return f"${cents // 100:,}.{cents % 100:02d}"


def bps_to_display(bps: int) -> str:
    """Convert bps to percent string: 1250 -> '12.50%'."""
    return f"{bps // 100}.{bps % 100:02d}%"


def apply_bps(amount: int, bps: int) -> int:
    """Return amount * bps / 10000, rounded half away from zero.

    Symmetric around zero: apply_bps(-x, r) == -apply_bps(x, r), so a loss
    is shared exactly like the mirrored profit.
    """
    if amount == 0 or bps == 0:
        return 0
    sign = -1 if (amount < 0) != (bps < 0) else 1
    quotient, remainder = divmod(abs(amount) * abs(bps), BPS_DENOMINATOR)
    if remainder * 2 >= BPS_DENOMINATOR:
        quotient += 1
    return sign * quotient
