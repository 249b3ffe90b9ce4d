from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from rbo.domain.common.errors import ValidationError

_CENT = Decimal("0.01")


@dataclass(frozen=True)
class Money:
    amount_cents: int
    currency: str

    def __post_init__(self) -> None:
        if self.amount_cents < 0:
            raise ValidationError("amount_cents must be >= 0", field="price")
        if len(self.currency) != 3 or not self.currency.isalpha() or not self.currency.isupper():
            raise ValidationError("currency must be a 3-letter uppercase code", field="currency")

    @classmethod
    def zero(cls, currency: str) -> Money:
        return cls(amount_cents=0, currency=currency)

    @classmethod
    def from_decimal(cls, value: Decimal | int | float | str, currency: str) -> Money:
        return cls(amount_cents=to_cents(value), currency=currency)

    def to_decimal(self) -> Decimal:
        return cents_to_decimal(self.amount_cents)

    def times(self, quantity: int) -> Money:
        if quantity < 0:
            raise ValidationError("quantity must be >= 0", field="quantity")
        return Money(amount_cents=self.amount_cents * quantity, currency=self.currency)

    def __add__(self, other: Money) -> Money:
        if not isinstance(other, Money):
            return NotImplemented
        if other.currency != self.currency:
            raise ValidationError("cannot add money in different currencies", field="currency")
        return Money(amount_cents=self.amount_cents + other.amount_cents, currency=self.currency)


def to_cents(value: Decimal | int | float | str) -> int:
    """Convert a decimal amount (35.90) into integer cents (3590), rounding half up."""
    if isinstance(value, float):
        value = str(value)
    try:
        amount = Decimal(value)
    except (InvalidOperation, TypeError, ValueError) as exc:
        raise ValidationError(f"invalid amount: {value!r}", field="price") from exc
    if not amount.is_finite():
        raise ValidationError(f"invalid amount: {value!r}", field="price")
    return int((amount / _CENT).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def cents_to_decimal(amount_cents: int) -> Decimal:
    return (Decimal(amount_cents) * _CENT).quantize(_CENT)
