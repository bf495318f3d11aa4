"""Resource quantity conversion for SDL size and cpu literals."""
import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Optional, Union

# Binary multipliers, applied the same way with or without the "i" suffix
UNIT_MULTIPLIERS = {
    "K": 1024,
    "KI": 1024,
    "M": 1024 ** 2,
    "MI": 1024 ** 2,
    "G": 1024 ** 3,
    "GI": 1024 ** 3,
    "T": 1024 ** 4,
    "TI": 1024 ** 4,
}

SIZE_PATTERN = re.compile(r"(\d+)([KMGT]i?)", re.IGNORECASE)
CPU_PATTERN = re.compile(r"(\d+(?:\.\d+)?|\.\d+)(m?)")


def is_size_literal(literal: Optional[str]) -> bool:
    """Check whether a literal matches the size grammar (e.g. "512Mi", "2G").

    Args:
        literal: Size string from the document.

    Returns:
        bool: True if the literal is a digits-plus-unit size.
    """
    if not isinstance(literal, str):
        return False
    return SIZE_PATTERN.fullmatch(literal) is not None


def parse_memory_size(literal: Optional[str]) -> int:
    """Convert a size literal into a byte count.

    Args:
        literal: Size string such as "512Mi", "2G" or "100k".

    Returns:
        int: Number of bytes, or 0 if the literal is not a valid size.
            Callers must treat 0 as unparseable.
    """
    if not isinstance(literal, str):
        return 0
    match = SIZE_PATTERN.fullmatch(literal)
    if not match:
        return 0
    value, unit = match.groups()
    return int(value) * UNIT_MULTIPLIERS[unit.upper()]


def parse_storage_size(literal: Optional[str]) -> int:
    """Convert a storage size literal into a byte count (same grammar as memory)."""
    return parse_memory_size(literal)


def parse_cpu_units(value: Union[str, int, float, None]) -> Optional[Decimal]:
    """Convert cpu units into a decimal number of cores.

    Accepts decimal cores ("0.5", 2) and millicores ("100m").

    Args:
        value: Cpu units from the compute profile.

    Returns:
        Optional[Decimal]: Number of cores, or None if the value is not a number.
    """
    if value is None or isinstance(value, bool):
        return None
    match = CPU_PATTERN.fullmatch(str(value).strip())
    if not match:
        return None
    number, milli = match.groups()
    try:
        cores = Decimal(number)
    except InvalidOperation:
        return None
    if milli:
        cores = cores / 1000
    return cores


def is_whole_millicores(cores: Decimal) -> bool:
    """Check that a core count has no fraction below one millicore."""
    return (cores * 1000) % 1 == 0


def parse_price_amount(value: Optional[str]) -> Optional[Decimal]:
    """Convert a bid price amount into a decimal.

    Args:
        value: Amount from a placement pricing entry, e.g. "1000" or "0.5".

    Returns:
        Optional[Decimal]: The amount, or None if it is not a finite
            non-negative number.
    """
    if value is None or isinstance(value, bool):
        return None
    try:
        amount = Decimal(str(value).strip())
    except InvalidOperation:
        return None
    if not amount.is_finite() or amount < 0:
        return None
    return amount


def format_memory_size(num_bytes: Union[int, float]) -> str:
    """Render a byte count with the largest binary unit that fits.

    Args:
        num_bytes: Byte count.

    Returns:
        str: Size string such as "2Gi", "512Mi" or "64Ki".
    """
    if num_bytes >= 1024 ** 3:
        return f"{_round_half_up(num_bytes, 1024 ** 3)}Gi"
    elif num_bytes >= 1024 ** 2:
        return f"{_round_half_up(num_bytes, 1024 ** 2)}Mi"
    elif num_bytes >= 1024:
        return f"{_round_half_up(num_bytes, 1024)}Ki"
    return f"{int(num_bytes)}"


def _round_half_up(num_bytes: Union[int, float], unit: int) -> int:
    return int((Decimal(num_bytes) / unit).quantize(Decimal(1), rounding=ROUND_HALF_UP))
