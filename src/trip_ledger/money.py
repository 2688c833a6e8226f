"""Exact currency amounts stored as integer cents."""

from __future__ import annotations

from collections.abc import Iterable
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from pydantic import BaseModel, ConfigDict, StrictInt

from .exceptions import EmptyParticipantsError, InvalidAmountError

MINOR_UNIT_DIGITS = 2
MINOR_UNITS_PER_MAJOR = 10**MINOR_UNIT_DIGITS
MAX_MAJOR_DIGITS = 15


class Money(BaseModel):
    """An exact amount of money in minor units (cents).

    Floats never enter or leave this type. Decimal strings are only produced
    for display and only parsed at the snapshot boundary.
    """

    model_config = ConfigDict(frozen=True)

    cents: StrictInt

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def zero(cls) -> Money:
        return cls(cents=0)

    @classmethod
    def from_decimal(cls, value: Decimal | str | int) -> Money:
        """
        Parse a major-unit amount ("12.34", Decimal("12.34"), 12) into Money.

        Amounts with sub-cent precision are rejected rather than rounded, so no
        value is silently lost at the boundary.

        Raises:
            InvalidAmountError: If the value is a float, not a number, has
                more than two decimal places or more than 15 integer digits
        """
        if isinstance(value, (float, bool)):
            raise InvalidAmountError(
                f"Refusing to parse {type(value).__name__} {value!r} as money; "
                f"use a decimal string instead"
            )

        try:
            amount = value if isinstance(value, Decimal) else Decimal(str(value))
        except InvalidOperation as e:
            raise InvalidAmountError(f"Not a monetary amount: {value!r}") from e

        if not amount.is_finite():
            raise InvalidAmountError(f"Not a monetary amount: {value!r}")

        if amount.is_zero():
            return cls.zero()

        # adjusted() is the exponent of the leading digit; checked before scaling
        if amount.adjusted() >= MAX_MAJOR_DIGITS:
            raise InvalidAmountError(
                f"Amount {value} exceeds {MAX_MAJOR_DIGITS} digits in major units"
            )

        minor = amount.scaleb(MINOR_UNIT_DIGITS)
        if minor != minor.to_integral_value():
            raise InvalidAmountError(
                f"Amount {value} has more than {MINOR_UNIT_DIGITS} decimal places"
            )

        return cls(cents=int(minor))

    @classmethod
    def sum(cls, amounts: Iterable[Money]) -> Money:
        """Sum amounts exactly; an empty iterable sums to zero."""
        return cls(cents=sum(amount.cents for amount in amounts))

    # ------------------------------------------------------------------
    # Arithmetic
    # ------------------------------------------------------------------

    def __add__(self, other: Money) -> Money:
        if not isinstance(other, Money):
            return NotImplemented
        return Money(cents=self.cents + other.cents)

    def __radd__(self, other: object) -> Money:
        # Lets the builtin sum() start from 0
        if other == 0:
            return self
        return NotImplemented

    def __sub__(self, other: Money) -> Money:
        if not isinstance(other, Money):
            return NotImplemented
        return Money(cents=self.cents - other.cents)

    def __neg__(self) -> Money:
        return Money(cents=-self.cents)

    def __abs__(self) -> Money:
        return Money(cents=abs(self.cents))

    # ------------------------------------------------------------------
    # Comparison
    # ------------------------------------------------------------------

    def __lt__(self, other: Money) -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        return self.cents < other.cents

    def __le__(self, other: Money) -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        return self.cents <= other.cents

    def __gt__(self, other: Money) -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        return self.cents > other.cents

    def __ge__(self, other: Money) -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        return self.cents >= other.cents

    def is_zero(self) -> bool:
        return self.cents == 0

    def is_positive(self) -> bool:
        return self.cents > 0

    def is_negative(self) -> bool:
        return self.cents < 0

    # ------------------------------------------------------------------
    # Distribution
    # ------------------------------------------------------------------

    def distribute(self, parts: int) -> list[Money]:
        """
        Split this amount into `parts` shares that sum to exactly this amount.

        Every share gets floor(amount / parts); the remaining r cents go one
        each to the first r shares. Callers order the shares (membership
        order) so the extra cents land deterministically.

        Example:
            Money.from_decimal("100.00").distribute(3)
            -> [$33.34, $33.33, $33.33]

        Raises:
            EmptyParticipantsError: If parts is zero or negative
            InvalidAmountError: If this amount is negative
        """
        if parts <= 0:
            raise EmptyParticipantsError()
        if self.cents < 0:
            raise InvalidAmountError(f"Cannot distribute a negative amount ({self})")

        base, remainder = divmod(self.cents, parts)
        return [
            Money(cents=base + 1 if index < remainder else base)
            for index in range(parts)
        ]

    # ------------------------------------------------------------------
    # Presentation
    # ------------------------------------------------------------------

    def to_decimal(self) -> Decimal:
        """Major-unit Decimal with exactly two decimal places."""
        return Decimal(self.cents).scaleb(-MINOR_UNIT_DIGITS)

    def percentage_of(self, total: Money) -> Decimal:
        """Share of `total` as a percentage rounded to one decimal place."""
        if total.is_zero():
            return Decimal("0.0")
        ratio = Decimal(self.cents) * 100 / Decimal(total.cents)
        return ratio.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)

    def __str__(self) -> str:
        sign = "-" if self.cents < 0 else ""
        return f"{sign}${abs(self.to_decimal()):,.2f}"

    def __repr__(self) -> str:
        return f"Money('{self.to_decimal()}')"
