import math
import re
from dataclasses import dataclass, fields

_LEADING_FLOAT = re.compile(r'^\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?')


def _to_float(value, default: float = 0.0) -> float:
    """Read the leading number of ``value`` the way a browser ``parseFloat`` does.

    ``'12abc'`` gives 12. Unreadable, zero, NaN or infinite values give ``default``.
    """
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        try:
            n = float(value)
        except OverflowError:
            return default
    else:
        match = _LEADING_FLOAT.match(str(value))
        if not match:
            return default
        n = float(match.group(0))
    if math.isnan(n) or math.isinf(n):
        return default
    return n if n else default


@dataclass
class CalculatorInput:
    base_points: float = 0
    present_bonus: float = 0
    ornament_bonus: float = 0
    stocking_bonus: float = 0
    candy_cane_bonus: float = 0
    grinch_bonus: float = 0
    whoville_bonus: float = 0
    multiplier: float = 1

    @classmethod
    def from_raw(cls, data) -> 'CalculatorInput':
        """Build from loosely typed form values; unreadable numbers become 0 (multiplier 1)."""
        data = data or {}
        values = {}
        for f in fields(cls):
            default = 1.0 if f.name == 'multiplier' else 0.0
            values[f.name] = _to_float(data.get(f.name), default)
        return cls(**values)

    @property
    def subtotal(self) -> float:
        return (
            self.base_points + self.present_bonus + self.ornament_bonus
            + self.stocking_bonus + self.candy_cane_bonus + self.grinch_bonus
            + self.whoville_bonus
        )


def calculate_total(inputs: CalculatorInput) -> int:
    total = inputs.subtotal * inputs.multiplier
    # An overflowing total has no meaningful display value
    if not math.isfinite(total):
        return 0
    # Round half up, matching how the score is displayed in the browser
    return math.floor(total + 0.5)


def format_total(total: int) -> str:
    return f"{total:,}"
