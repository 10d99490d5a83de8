"""
Catalog entities and repositories.

The engines only ever see a CatalogSnapshot: frozen dataclasses read once
per calculation session. Repositories are pluggable; the SQL one reads the
ORM tables, the in-memory one backs offline demos and tests.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import ClassVar, Union
from uuid import uuid4

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from rollup_quotes.models.catalog import (
    CatalogAxle, CatalogMotor, CatalogOptional, CatalogProfile, OptionalUnitType,
)


def to_decimal(value) -> Decimal:
    """Convert floats and strings without binary float artifacts."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


@dataclass(frozen=True)
class Profile:
    id: str
    name: str
    price_per_m2: Decimal
    weight_per_m2: Decimal


@dataclass(frozen=True)
class Motor:
    id: str
    name: str
    max_weight: Decimal
    price: Decimal


@dataclass(frozen=True)
class Axle:
    id: str
    name: str
    max_width: Decimal
    price: Decimal


@dataclass(frozen=True)
class FixedPrice:
    """Charged once per gate."""
    price: Decimal
    unit_type: ClassVar[OptionalUnitType] = OptionalUnitType.FIXED

    def contribution(self, quantity: int, total_area: Decimal) -> Decimal:
        return self.price * quantity


@dataclass(frozen=True)
class PerAreaPrice:
    """Charged per square metre of the whole order."""
    price: Decimal
    unit_type: ClassVar[OptionalUnitType] = OptionalUnitType.PER_M2

    def contribution(self, quantity: int, total_area: Decimal) -> Decimal:
        return self.price * total_area


OptionalPricing = Union[FixedPrice, PerAreaPrice]


def pricing_for(unit_type: OptionalUnitType | str, price) -> OptionalPricing:
    """Build the pricing variant for a stored ``unit_type`` discriminator."""
    unit_type = OptionalUnitType(unit_type)
    if unit_type == OptionalUnitType.PER_M2:
        return PerAreaPrice(to_decimal(price))
    return FixedPrice(to_decimal(price))


@dataclass(frozen=True)
class OptionalItem:
    id: str
    name: str
    pricing: OptionalPricing

    @property
    def price(self) -> Decimal:
        return self.pricing.price

    @property
    def unit_type(self) -> OptionalUnitType:
        return self.pricing.unit_type


@dataclass(frozen=True)
class CatalogSnapshot:
    """Catalog state for one calculation session."""
    profiles: tuple[Profile, ...] = ()
    motors: tuple[Motor, ...] = ()
    axles: tuple[Axle, ...] = ()
    optionals: tuple[OptionalItem, ...] = ()

    def find_profile(self, profile_id: str) -> Profile | None:
        return next((p for p in self.profiles if p.id == profile_id), None)


class CatalogKind(str, Enum):
    """Catalog collections, named as exposed over the API."""
    PROFILES = "profiles"
    MOTORS = "motors"
    AXLES = "axles"
    OPTIONALS = "optionals"


CatalogEntry = Union[Profile, Motor, Axle, OptionalItem]


class CatalogRepository(ABC):
    """Supplies the current catalog. Each list call returns the full set."""

    @abstractmethod
    async def list_profiles(self) -> list[Profile]:
        pass

    @abstractmethod
    async def list_motors(self) -> list[Motor]:
        pass

    @abstractmethod
    async def list_axles(self) -> list[Axle]:
        pass

    @abstractmethod
    async def list_optionals(self) -> list[OptionalItem]:
        pass

    @abstractmethod
    async def add_entry(self, kind: CatalogKind, entry: CatalogEntry) -> CatalogEntry:
        pass

    @abstractmethod
    async def remove_entry(self, kind: CatalogKind, entry_id: str) -> bool:
        pass

    async def list_entries(self, kind: CatalogKind) -> list[CatalogEntry]:
        listers = {
            CatalogKind.PROFILES: self.list_profiles,
            CatalogKind.MOTORS: self.list_motors,
            CatalogKind.AXLES: self.list_axles,
            CatalogKind.OPTIONALS: self.list_optionals,
        }
        return await listers[kind]()

    async def snapshot(self) -> CatalogSnapshot:
        """Read all four collections into one immutable snapshot."""
        profiles = await self.list_profiles()
        motors = await self.list_motors()
        axles = await self.list_axles()
        optionals = await self.list_optionals()
        return CatalogSnapshot(
            profiles=tuple(profiles),
            motors=tuple(motors),
            axles=tuple(axles),
            optionals=tuple(optionals),
        )


@dataclass
class InMemoryCatalogRepository(CatalogRepository):
    """
    Catalog held in process memory.

    Each instance owns its own lists; build one per demo session or test.
    """
    profiles: list[Profile] = field(default_factory=list)
    motors: list[Motor] = field(default_factory=list)
    axles: list[Axle] = field(default_factory=list)
    optionals: list[OptionalItem] = field(default_factory=list)

    def _collection(self, kind: CatalogKind) -> list:
        return {
            CatalogKind.PROFILES: self.profiles,
            CatalogKind.MOTORS: self.motors,
            CatalogKind.AXLES: self.axles,
            CatalogKind.OPTIONALS: self.optionals,
        }[kind]

    async def _read(self, kind: CatalogKind) -> list:
        return list(self._collection(kind))

    async def list_profiles(self) -> list[Profile]:
        return await self._read(CatalogKind.PROFILES)

    async def list_motors(self) -> list[Motor]:
        return await self._read(CatalogKind.MOTORS)

    async def list_axles(self) -> list[Axle]:
        return await self._read(CatalogKind.AXLES)

    async def list_optionals(self) -> list[OptionalItem]:
        return await self._read(CatalogKind.OPTIONALS)

    async def add_entry(self, kind: CatalogKind, entry: CatalogEntry) -> CatalogEntry:
        self._collection(kind).append(entry)
        return entry

    async def remove_entry(self, kind: CatalogKind, entry_id: str) -> bool:
        items = self._collection(kind)
        for idx, item in enumerate(items):
            if item.id == entry_id:
                del items[idx]
                return True
        return False

    @classmethod
    def demo(cls) -> "InMemoryCatalogRepository":
        """Fresh repository seeded with the offline demo catalog."""
        d = Decimal
        return cls(
            profiles=[
                Profile("1", "Perfil Meia Cana Fechada", d("250"), d("10")),
                Profile("2", "Perfil Transvision", d("300"), d("8")),
                Profile("3", "Perfil Lâmina Vazada", d("280"), d("9")),
            ],
            motors=[
                Motor("1", "Motor AC 200kg", d("200"), d("1200")),
                Motor("2", "Motor AC 400kg", d("400"), d("1800")),
                Motor("3", "Motor DC 600kg (Alto Fluxo)", d("600"), d("2500")),
                Motor("4", "Motor Industrial 1000kg", d("1000"), d("4000")),
            ],
            axles=[
                Axle("1", 'Eixo 4.5" (até 4m)', d("4"), d("400")),
                Axle("2", 'Eixo 6" (até 8m)', d("8"), d("800")),
                Axle("3", 'Eixo 8" Industrial (até 12m)', d("12"), d("1500")),
            ],
            optionals=[
                OptionalItem("1", "Pintura Eletrostática", PerAreaPrice(d("50"))),
                OptionalItem("2", "Controle Remoto Extra", FixedPrice(d("80"))),
                OptionalItem("3", "Nobreak", FixedPrice(d("600"))),
                OptionalItem("4", "Sensor de Barreira", FixedPrice(d("150"))),
            ],
        )


class SQLCatalogRepository(CatalogRepository):
    """Catalog backed by the SQLAlchemy catalog tables."""

    MODELS = {
        CatalogKind.PROFILES: CatalogProfile,
        CatalogKind.MOTORS: CatalogMotor,
        CatalogKind.AXLES: CatalogAxle,
        CatalogKind.OPTIONALS: CatalogOptional,
    }

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _rows(self, kind: CatalogKind) -> list:
        model = self.MODELS[kind]
        result = await self.session.execute(
            select(model).order_by(model.created_at, model.id)
        )
        return list(result.scalars().all())

    async def list_profiles(self) -> list[Profile]:
        return [
            Profile(r.id, r.name, to_decimal(r.price_per_m2), to_decimal(r.weight_per_m2))
            for r in await self._rows(CatalogKind.PROFILES)
        ]

    async def list_motors(self) -> list[Motor]:
        return [
            Motor(r.id, r.name, to_decimal(r.max_weight), to_decimal(r.price))
            for r in await self._rows(CatalogKind.MOTORS)
        ]

    async def list_axles(self) -> list[Axle]:
        return [
            Axle(r.id, r.name, to_decimal(r.max_width), to_decimal(r.price))
            for r in await self._rows(CatalogKind.AXLES)
        ]

    async def list_optionals(self) -> list[OptionalItem]:
        return [
            OptionalItem(r.id, r.name, pricing_for(r.unit_type, r.price))
            for r in await self._rows(CatalogKind.OPTIONALS)
        ]

    async def add_entry(self, kind: CatalogKind, entry: CatalogEntry) -> CatalogEntry:
        if isinstance(entry, OptionalItem):
            row = CatalogOptional(
                id=entry.id, name=entry.name, price=entry.price, unit_type=entry.unit_type,
            )
        else:
            row = self.MODELS[kind](**vars(entry))
        self.session.add(row)
        await self.session.flush()
        return entry

    async def remove_entry(self, kind: CatalogKind, entry_id: str) -> bool:
        model = self.MODELS[kind]
        result = await self.session.execute(delete(model).where(model.id == entry_id))
        return result.rowcount > 0


def new_entry_id() -> str:
    return str(uuid4())
