"""
Catalog management service.

Adds and removes profiles, motors, axles and optional accessories.
Calculations already in progress keep their snapshot; changes show up on
the next catalog load.
"""

from decimal import Decimal

from rollup_quotes.exceptions import InvalidInputError
from rollup_quotes.models.catalog import OptionalUnitType
from rollup_quotes.services.quoting.catalog import (
    Axle, CatalogEntry, CatalogKind, CatalogRepository, Motor, OptionalItem,
    Profile, new_entry_id, pricing_for, to_decimal,
)
from rollup_quotes.utils.logging import ServiceLogger, audit_logger


def _non_negative(name: str, value) -> Decimal:
    amount = to_decimal(value)
    if amount < 0:
        raise InvalidInputError(f"{name} cannot be negative", field=name)
    return amount


class CatalogService:
    """Administrative catalog maintenance."""

    def __init__(self, repository: CatalogRepository):
        self.repository = repository
        self.logger = ServiceLogger("catalog")

    async def list_entries(self, kind: CatalogKind) -> list[CatalogEntry]:
        return await self.repository.list_entries(kind)

    async def add_profile(self, name: str, price_per_m2, weight_per_m2) -> Profile:
        profile = Profile(
            id=new_entry_id(),
            name=name,
            price_per_m2=_non_negative("price_per_m2", price_per_m2),
            weight_per_m2=_non_negative("weight_per_m2", weight_per_m2),
        )
        return await self._add(CatalogKind.PROFILES, profile)

    async def add_motor(self, name: str, max_weight, price) -> Motor:
        motor = Motor(
            id=new_entry_id(),
            name=name,
            max_weight=_non_negative("max_weight", max_weight),
            price=_non_negative("price", price),
        )
        return await self._add(CatalogKind.MOTORS, motor)

    async def add_axle(self, name: str, max_width, price) -> Axle:
        axle = Axle(
            id=new_entry_id(),
            name=name,
            max_width=_non_negative("max_width", max_width),
            price=_non_negative("price", price),
        )
        return await self._add(CatalogKind.AXLES, axle)

    async def add_optional(
        self,
        name: str,
        price,
        unit_type: OptionalUnitType = OptionalUnitType.FIXED,
    ) -> OptionalItem:
        optional = OptionalItem(
            id=new_entry_id(),
            name=name,
            pricing=pricing_for(unit_type, _non_negative("price", price)),
        )
        return await self._add(CatalogKind.OPTIONALS, optional)

    async def remove(self, kind: CatalogKind, entry_id: str, actor: str | None = None) -> bool:
        removed = await self.repository.remove_entry(kind, entry_id)
        if removed:
            audit_logger.log_action("delete", kind.value, resource_id=entry_id, actor=actor)
        return removed

    async def _add(self, kind: CatalogKind, entry):
        if not entry.name.strip():
            raise InvalidInputError("Name is required", field="name")
        await self.repository.add_entry(kind, entry)
        audit_logger.log_action(
            "create", kind.value, resource_id=entry.id, new_values={"name": entry.name},
        )
        self.logger.log_operation_complete("add_entry", kind=kind.value, entry_id=entry.id)
        return entry
