"""
Pricing engine for roll-up gate quotes.

Derives area, weight and the full price breakdown from dimensions, the
selected hardware and chosen optionals. Pure: the same input and catalog
snapshot always produce the same result.
"""

from dataclasses import dataclass, field
from decimal import Decimal

from rollup_quotes.exceptions import InvalidInputError
from rollup_quotes.services.quoting.catalog import (
    Axle, CatalogSnapshot, Motor, Profile, to_decimal,
)
from rollup_quotes.services.quoting.selection import (
    SelectionMode, select_axle, select_motor,
)

ZERO = Decimal("0")


@dataclass(frozen=True)
class QuoteInput:
    """Operator input for one quote calculation."""
    width: Decimal
    height: Decimal
    profile_id: str
    roll: Decimal = Decimal("0.4")
    quantity: int = 1
    motor_mode: SelectionMode = SelectionMode.AUTOMATIC
    manual_motor_id: str | None = None
    axle_mode: SelectionMode = SelectionMode.AUTOMATIC
    manual_axle_id: str | None = None
    selected_optional_ids: frozenset[str] = field(default_factory=frozenset)

    def __post_init__(self):
        # Accept floats/ints/strings from callers, store exact decimals.
        object.__setattr__(self, "width", to_decimal(self.width))
        object.__setattr__(self, "height", to_decimal(self.height))
        object.__setattr__(self, "roll", to_decimal(self.roll))
        object.__setattr__(
            self, "selected_optional_ids", frozenset(self.selected_optional_ids)
        )


@dataclass(frozen=True)
class OptionalLine:
    """Itemized optional contribution for display and export."""
    optional_id: str
    name: str
    contribution: Decimal


@dataclass(frozen=True)
class CalculationResult:
    """Full price breakdown of one calculation. May be invalid for saving."""
    input: QuoteInput
    profile: Profile
    area_per_unit: Decimal
    total_area: Decimal
    unit_weight: Decimal
    motor: Motor | None
    axle: Axle | None
    base_price: Decimal
    motor_price: Decimal
    axle_price: Decimal
    optionals_total: Decimal
    optional_lines: tuple[OptionalLine, ...]
    total_price: Decimal
    price_per_unit: Decimal
    unknown_optional_ids: tuple[str, ...] = ()
    issues: tuple[str, ...] = ()

    @property
    def is_valid(self) -> bool:
        return (
            self.input.width > 0
            and self.input.height > 0
            and self.input.quantity >= 1
            and self.motor is not None
            and self.axle is not None
        )

    @property
    def gate_subtotal(self) -> Decimal:
        """Gates with their hardware, optionals excluded."""
        return self.base_price + self.motor_price + self.axle_price


def validate_input(quote_input: QuoteInput) -> None:
    """Reject impossible dimensions before selection or pricing."""
    # NaN cannot be ordered and infinity cannot be priced.
    for name in ("width", "height", "roll"):
        if not getattr(quote_input, name).is_finite():
            raise InvalidInputError(f"{name.capitalize()} must be a finite number", field=name)
    if quote_input.width <= 0:
        raise InvalidInputError("Width must be greater than zero", field="width")
    if quote_input.height <= 0:
        raise InvalidInputError("Height must be greater than zero", field="height")
    if quote_input.roll < 0:
        raise InvalidInputError("Roll cannot be negative", field="roll")
    if int(quote_input.quantity) != quote_input.quantity or quote_input.quantity < 1:
        raise InvalidInputError("Quantity must be a whole number of at least 1", field="quantity")


class PricingEngine:
    """
    Computes quote prices against a catalog snapshot.

    Hardware is charged per gate: each unit gets its own motor and axle,
    sized for one unit's weight and width.
    """

    def calculate(self, quote_input: QuoteInput, catalog: CatalogSnapshot) -> CalculationResult:
        validate_input(quote_input)

        profile = catalog.find_profile(quote_input.profile_id)
        if profile is None:
            raise InvalidInputError(
                f"Profile not found: {quote_input.profile_id}", field="profile_id"
            )

        quantity = int(quote_input.quantity)

        area_per_unit = (quote_input.height + quote_input.roll) * quote_input.width
        total_area = area_per_unit * quantity
        unit_weight = area_per_unit * profile.weight_per_m2

        motor = select_motor(
            unit_weight,
            catalog.motors,
            quote_input.motor_mode,
            quote_input.manual_motor_id,
        )
        axle = select_axle(
            quote_input.width,
            catalog.axles,
            quote_input.axle_mode,
            quote_input.manual_axle_id,
        )

        base_price = total_area * profile.price_per_m2
        motor_price = motor.price * quantity if motor else ZERO
        axle_price = axle.price * quantity if axle else ZERO

        selected = quote_input.selected_optional_ids
        lines = tuple(
            OptionalLine(opt.id, opt.name, opt.pricing.contribution(quantity, total_area))
            for opt in catalog.optionals
            if opt.id in selected
        )
        known_ids = {opt.id for opt in catalog.optionals}
        unknown = tuple(sorted(selected - known_ids))
        optionals_total = sum((line.contribution for line in lines), ZERO)

        total_price = base_price + motor_price + axle_price + optionals_total

        return CalculationResult(
            input=quote_input,
            profile=profile,
            area_per_unit=area_per_unit,
            total_area=total_area,
            unit_weight=unit_weight,
            motor=motor,
            axle=axle,
            base_price=base_price,
            motor_price=motor_price,
            axle_price=axle_price,
            optionals_total=optionals_total,
            optional_lines=lines,
            total_price=total_price,
            price_per_unit=total_price / quantity,
            unknown_optional_ids=unknown,
            issues=self._issues(quote_input, motor, axle),
        )

    @staticmethod
    def _issues(quote_input: QuoteInput, motor: Motor | None, axle: Axle | None) -> tuple[str, ...]:
        issues = []
        if motor is None:
            if quote_input.motor_mode == SelectionMode.MANUAL:
                issues.append("Selected motor is not in the catalog")
            else:
                issues.append("No motor covers this weight")
        if axle is None:
            if quote_input.axle_mode == SelectionMode.MANUAL:
                issues.append("Selected axle is not in the catalog")
            else:
                issues.append("No axle covers this width")
        return tuple(issues)
