"""
Quote models.

A quote owns its optional-accessory association rows and references one
client created alongside it. Catalog ids are stored without foreign keys so
a saved quote survives later catalog edits.
"""

from decimal import Decimal
from enum import Enum

from sqlalchemy import (
    Boolean, Enum as SQLEnum, ForeignKey, Integer, Numeric, String, Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from rollup_quotes.database.base import Base
from rollup_quotes.exceptions import InvalidStatusTransitionError


class QuoteStatus(str, Enum):
    """Quote lifecycle status. Moves forward only."""
    PENDING = "pending"
    APPROVED = "approved"

    def transition(self, target: "QuoteStatus") -> "QuoteStatus":
        """
        Return the status after moving to ``target``.

        Staying in the same status is allowed so approvals can be retried.
        """
        if target == self:
            return self
        if self == QuoteStatus.PENDING and target == QuoteStatus.APPROVED:
            return target
        raise InvalidStatusTransitionError(self.value, target.value)


class Client(Base):
    """Client contact captured with a quote. Never updated after creation."""

    __tablename__ = "clients"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), default="")
    phone: Mapped[str] = mapped_column(String(50), default="")
    address: Mapped[str] = mapped_column(Text, default="")

    quotes: Mapped[list["Quote"]] = relationship("Quote", back_populates="client")


class Quote(Base):
    """Priced roll-up gate order with a fixed total snapshot."""

    __tablename__ = "quotes"

    client_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("clients.id"),
        nullable=False,
    )

    # Dimensions (metres)
    width: Mapped[Decimal] = mapped_column(Numeric(10, 3), nullable=False)
    height: Mapped[Decimal] = mapped_column(Numeric(10, 3), nullable=False)
    roll: Mapped[Decimal] = mapped_column(Numeric(10, 3), default=0)
    quantity: Mapped[int] = mapped_column(Integer, default=1)

    # Catalog references
    profile_id: Mapped[str] = mapped_column(String(36), nullable=False)
    motor_id: Mapped[str | None] = mapped_column(String(36))
    axle_id: Mapped[str | None] = mapped_column(String(36))
    auto_motor: Mapped[bool] = mapped_column(Boolean, default=True)
    auto_axle: Mapped[bool] = mapped_column(Boolean, default=True)

    total_price: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    status: Mapped[QuoteStatus] = mapped_column(
        SQLEnum(QuoteStatus),
        default=QuoteStatus.PENDING,
        index=True,
    )
    idempotency_key: Mapped[str | None] = mapped_column(String(128), unique=True)

    client: Mapped["Client"] = relationship("Client", back_populates="quotes")
    optional_links: Mapped[list["QuoteOptional"]] = relationship(
        "QuoteOptional",
        back_populates="quote",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class QuoteOptional(Base):
    """Association between a quote and a selected optional accessory."""

    __tablename__ = "quote_optionals"

    quote_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("quotes.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    optional_id: Mapped[str] = mapped_column(String(36), nullable=False)

    quote: Mapped["Quote"] = relationship("Quote", back_populates="optional_links")

    __table_args__ = (
        UniqueConstraint("quote_id", "optional_id", name="uq_quote_optional"),
    )
