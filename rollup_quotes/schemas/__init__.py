"""
Pydantic schemas for API request/response validation.

Provides data transfer objects for all API endpoints.
"""

from datetime import datetime, timedelta
from decimal import Decimal

from pydantic import BaseModel, Field

from rollup_quotes.config.settings import settings
from rollup_quotes.models.catalog import OptionalUnitType
from rollup_quotes.models.quotes import QuoteStatus
from rollup_quotes.services.quoting.catalog import Axle, Motor, OptionalItem, Profile
from rollup_quotes.services.quoting.pricing import CalculationResult, QuoteInput
from rollup_quotes.services.quoting.selection import SelectionMode
from rollup_quotes.services.quoting.store import ClientData, QuoteRecord


# Quote calculation schemas
class QuoteCalculationRequest(BaseModel):
    """Gate configuration to price. A hardware id switches to manual selection."""
    width: Decimal = Field(..., gt=0, description="Gate width in metres")
    height: Decimal = Field(..., gt=0, description="Gate height in metres")
    roll: Decimal = Field(default_factory=lambda: settings.quoting.default_roll, ge=0)
    quantity: int = Field(1, ge=1)
    profile_id: str
    motor_id: str | None = None
    axle_id: str | None = None
    optional_ids: list[str] = []

    def to_input(self) -> QuoteInput:
        return QuoteInput(
            width=self.width,
            height=self.height,
            roll=self.roll,
            quantity=self.quantity,
            profile_id=self.profile_id,
            motor_mode=SelectionMode.MANUAL if self.motor_id else SelectionMode.AUTOMATIC,
            manual_motor_id=self.motor_id,
            axle_mode=SelectionMode.MANUAL if self.axle_id else SelectionMode.AUTOMATIC,
            manual_axle_id=self.axle_id,
            selected_optional_ids=frozenset(self.optional_ids),
        )


class HardwareResponse(BaseModel):
    id: str
    name: str
    price: float


class OptionalLineResponse(BaseModel):
    optional_id: str
    name: str
    price: float


class CalculationResponse(BaseModel):
    """Full price breakdown, including partial figures when invalid."""
    profile_id: str
    profile_name: str
    area_per_unit: float
    total_area: float
    unit_weight: float
    motor: HardwareResponse | None
    axle: HardwareResponse | None
    base_price: float
    motor_price: float
    axle_price: float
    optionals_total: float
    optionals: list[OptionalLineResponse]
    total_price: float
    price_per_unit: float
    is_valid: bool
    issues: list[str]
    unknown_optional_ids: list[str]

    @classmethod
    def from_result(cls, result: CalculationResult) -> "CalculationResponse":
        def hardware(item: Motor | Axle | None) -> HardwareResponse | None:
            if item is None:
                return None
            return HardwareResponse(id=item.id, name=item.name, price=float(item.price))

        return cls(
            profile_id=result.profile.id,
            profile_name=result.profile.name,
            area_per_unit=float(result.area_per_unit),
            total_area=float(result.total_area),
            unit_weight=float(result.unit_weight),
            motor=hardware(result.motor),
            axle=hardware(result.axle),
            base_price=float(result.base_price),
            motor_price=float(result.motor_price),
            axle_price=float(result.axle_price),
            optionals_total=float(result.optionals_total),
            optionals=[
                OptionalLineResponse(
                    optional_id=line.optional_id,
                    name=line.name,
                    price=float(line.contribution),
                )
                for line in result.optional_lines
            ],
            total_price=float(result.total_price),
            price_per_unit=float(result.price_per_unit),
            is_valid=result.is_valid,
            issues=list(result.issues),
            unknown_optional_ids=list(result.unknown_optional_ids),
        )


# Quote persistence schemas
class ClientPayload(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: str = ""
    phone: str = ""
    address: str = ""

    def to_data(self) -> ClientData:
        return ClientData(
            name=self.name,
            email=self.email,
            phone=self.phone,
            address=self.address,
        )


class QuoteSaveRequest(BaseModel):
    """Client plus gate configuration; the price is recomputed server-side."""
    client: ClientPayload
    quote: QuoteCalculationRequest
    idempotency_key: str | None = Field(None, max_length=128)


class ClientResponse(BaseModel):
    id: str
    name: str
    email: str
    phone: str
    address: str


class QuoteResponse(BaseModel):
    """Stored quote joined with its client."""
    id: str
    status: QuoteStatus
    client: ClientResponse
    width: float
    height: float
    roll: float
    quantity: int
    profile_id: str
    motor_id: str | None
    axle_id: str | None
    auto_motor: bool
    auto_axle: bool
    total_price: float
    optional_ids: list[str]
    created_at: datetime
    valid_until: datetime

    @classmethod
    def from_record(cls, record: QuoteRecord) -> "QuoteResponse":
        fields = record.fields
        return cls(
            id=record.id,
            status=record.status,
            client=ClientResponse(
                id=record.client.id,
                name=record.client.name,
                email=record.client.email,
                phone=record.client.phone,
                address=record.client.address,
            ),
            width=float(fields.width),
            height=float(fields.height),
            roll=float(fields.roll),
            quantity=fields.quantity,
            profile_id=fields.profile_id,
            motor_id=fields.motor_id,
            axle_id=fields.axle_id,
            auto_motor=fields.auto_motor,
            auto_axle=fields.auto_axle,
            total_price=float(fields.total_price),
            optional_ids=list(record.optional_ids),
            created_at=record.created_at,
            valid_until=record.created_at + timedelta(days=settings.quoting.quote_validity_days),
        )


class QuoteSavedResponse(BaseModel):
    id: str
    calculation: CalculationResponse


# Catalog schemas
class ProfileCreate(BaseModel):
    name: str = Field(..., min_length=1)
    price_per_m2: Decimal = Field(..., ge=0)
    weight_per_m2: Decimal = Field(..., ge=0)


class MotorCreate(BaseModel):
    name: str = Field(..., min_length=1)
    max_weight: Decimal = Field(..., ge=0)
    price: Decimal = Field(..., ge=0)


class AxleCreate(BaseModel):
    name: str = Field(..., min_length=1)
    max_width: Decimal = Field(..., ge=0)
    price: Decimal = Field(..., ge=0)


class OptionalCreate(BaseModel):
    name: str = Field(..., min_length=1)
    price: Decimal = Field(..., ge=0)
    unit_type: OptionalUnitType = OptionalUnitType.FIXED


def catalog_entry_to_dict(entry: Profile | Motor | Axle | OptionalItem) -> dict:
    """Serialize a catalog entry with floats for numeric columns."""
    if isinstance(entry, OptionalItem):
        return {
            "id": entry.id,
            "name": entry.name,
            "price": float(entry.price),
            "unit_type": entry.unit_type.value,
        }
    return {
        key: float(value) if isinstance(value, Decimal) else value
        for key, value in vars(entry).items()
    }


__all__ = [
    # Quotes
    "QuoteCalculationRequest",
    "HardwareResponse",
    "OptionalLineResponse",
    "CalculationResponse",
    "ClientPayload",
    "QuoteSaveRequest",
    "ClientResponse",
    "QuoteResponse",
    "QuoteSavedResponse",
    # Catalog
    "ProfileCreate",
    "MotorCreate",
    "AxleCreate",
    "OptionalCreate",
    "catalog_entry_to_dict",
]
