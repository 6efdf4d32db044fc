from decimal import Decimal, ROUND_HALF_UP

CENT = Decimal("0.01")


def to_money(value) -> Decimal:
    """Quantize to currency precision (two places, half-up)."""
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def food_total(food_orders) -> Decimal:
    total = sum(
        (Decimal(str(order["price"])) * int(order["quantity"]) for order in food_orders or []),
        Decimal("0"),
    )
    return to_money(total)
