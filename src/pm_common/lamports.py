"""Integer arithmetic utilities for lamport-denominated accounting.

All amounts, reserves and token supplies are unsigned 64-bit integers.
Python ints do not overflow, so every narrowing step is range-checked here.
"""

from src.pm_common.errors import MathOverflowError

LAMPORTS_PER_SOL = 1_000_000_000
U64_MAX = (1 << 64) - 1
BPS_DENOMINATOR = 10_000


def checked_u64(value: int) -> int:
    """Return value if it fits in u64, else raise MathOverflowError."""
    if not (0 <= value <= U64_MAX):
        raise MathOverflowError()
    return value


def checked_add(a: int, b: int) -> int:
    return checked_u64(a + b)


def saturating_sub(a: int, b: int) -> int:
    return a - b if a > b else 0


def saturate_u64(value: int) -> int:
    """Clamp into [0, U64_MAX]."""
    if value < 0:
        return 0
    return min(value, U64_MAX)


def bps_share(amount: int, bps: int) -> int:
    """Floor share: amount * bps / 10000 (no ceiling, residue stays in the vault)."""
    if amount == 0 or bps == 0:
        return 0
    return amount * bps // BPS_DENOMINATOR


def lamports_to_display(lamports: int) -> str:
    """Convert lamports to display string: 1_500_000_000 -> '1.500000000 SOL'."""
    sign = "-" if lamports < 0 else ""
    abs_lamports = abs(lamports)
    whole, frac = divmod(abs_lamports, LAMPORTS_PER_SOL)
    return f"{sign}{whole:,}.{frac:09d} SOL"
