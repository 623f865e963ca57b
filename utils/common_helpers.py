from decimal import Decimal, ROUND_HALF_UP

from config import settings


def pct(n: float, d: float) -> float:
    """n as a percentage of d; 0 when d is not positive."""
    return (n / d) * 100.0 if d > 0 else 0.0


def fmt_pct(value: float) -> str:
    """One-decimal percent text, ties rounded up (31.25 -> '31.3')."""
    return str(Decimal(value).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def _group_digits(digits: str, grouping: str) -> str:
    if grouping == "indian" and len(digits) > 3:
        head, tail = digits[:-3], digits[-3:]
        pairs = []
        while len(head) > 2:
            pairs.insert(0, head[-2:])
            head = head[:-2]
        if head:
            pairs.insert(0, head)
        return ",".join(pairs + [tail])
    return f"{int(digits):,}"


def format_currency(
    value: float,
    currency: str | None = None,
    grouping: str | None = None,
) -> str:
    """Whole-unit money string, e.g. 123456.7 -> '₹1,23,457' (en-IN style)."""
    currency = (currency or settings.DISPLAY_CURRENCY).upper()
    grouping = grouping or settings.DISPLAY_LOCALE_GROUPING
    symbol = settings.CURRENCY_SYMBOLS.get(currency, f"{currency} ")

    whole = Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    sign = "-" if whole < 0 else ""
    digits = str(abs(int(whole)))
    return f"{sign}{symbol}{_group_digits(digits, grouping)}"
