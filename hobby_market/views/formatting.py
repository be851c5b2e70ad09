from decimal import ROUND_HALF_UP, Decimal

# Bento-like staggering: a repeating cycle of five card widths (of 12 columns)
_CARD_SPANS = (7, 5, 6, 6, 4)


def price_whole_dollars(price: float) -> int:
    return int(Decimal(str(price)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def price_per_hour_label(price: float) -> str:
    return f"${price_whole_dollars(price)}/hr"


def short_host_id(host_id: str) -> str:
    return f"{host_id[:6]}..."


def card_span_class(idx: int) -> str:
    return f"col-span-12 md:col-span-{_CARD_SPANS[idx % len(_CARD_SPANS)]}"
