"""
Catalog models.

Profiles, motors, axles and optional accessories that quotes are priced
against. Rows are read into immutable snapshots before any calculation.
"""

from decimal import Decimal
from enum import Enum

from sqlalchemy import Enum as SQLEnum, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from rollup_quotes.database.base import Base


class OptionalUnitType(str, Enum):
    """How an optional accessory is charged."""
    FIXED = "fixed"
    PER_M2 = "per_m2"


class CatalogProfile(Base):
    """
    Material profile (slat type) of a roll-up gate.

    Price and weight are given per square metre of curtain.
    """

    __tablename__ = "profiles"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    price_per_m2: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    weight_per_m2: Mapped[Decimal] = mapped_column(Numeric(10, 3), nullable=False)


class CatalogMotor(Base):
    """Powered motor rated for a maximum curtain weight (kg)."""

    __tablename__ = "motors"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    max_weight: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)


class CatalogAxle(Base):
    """Support axle rated for a maximum gate width (m)."""

    __tablename__ = "axles"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    max_width: Mapped[Decimal] = mapped_column(Numeric(10, 3), nullable=False)
    price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)


class CatalogOptional(Base):
    """Optional accessory, charged per unit or per square metre."""

    __tablename__ = "optional_items"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    unit_type: Mapped[OptionalUnitType] = mapped_column(
        SQLEnum(OptionalUnitType),
        default=OptionalUnitType.FIXED,
        nullable=False,
    )
