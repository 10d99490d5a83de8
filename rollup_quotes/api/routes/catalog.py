"""
Catalog administration API routes.
"""

from fastapi import APIRouter, Depends, HTTPException, status

from rollup_quotes.api.dependencies import (
    CatalogServiceDep, CurrentSubjectDep, get_current_subject,
)
from rollup_quotes.schemas import (
    AxleCreate,
    MotorCreate,
    OptionalCreate,
    ProfileCreate,
    catalog_entry_to_dict,
)
from rollup_quotes.services.quoting.catalog import CatalogKind

router = APIRouter(dependencies=[Depends(get_current_subject)])


@router.get("/{kind}")
async def list_catalog(kind: CatalogKind, service: CatalogServiceDep):
    """List all entries of one catalog collection."""
    entries = await service.list_entries(kind)
    return {"items": [catalog_entry_to_dict(e) for e in entries]}


@router.post("/profiles", status_code=status.HTTP_201_CREATED)
async def create_profile(body: ProfileCreate, service: CatalogServiceDep):
    profile = await service.add_profile(body.name, body.price_per_m2, body.weight_per_m2)
    return catalog_entry_to_dict(profile)


@router.post("/motors", status_code=status.HTTP_201_CREATED)
async def create_motor(body: MotorCreate, service: CatalogServiceDep):
    motor = await service.add_motor(body.name, body.max_weight, body.price)
    return catalog_entry_to_dict(motor)


@router.post("/axles", status_code=status.HTTP_201_CREATED)
async def create_axle(body: AxleCreate, service: CatalogServiceDep):
    axle = await service.add_axle(body.name, body.max_width, body.price)
    return catalog_entry_to_dict(axle)


@router.post("/optionals", status_code=status.HTTP_201_CREATED)
async def create_optional(body: OptionalCreate, service: CatalogServiceDep):
    optional = await service.add_optional(body.name, body.price, body.unit_type)
    return catalog_entry_to_dict(optional)


@router.delete("/{kind}/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_catalog_entry(
    kind: CatalogKind,
    entry_id: str,
    service: CatalogServiceDep,
    subject: CurrentSubjectDep,
):
    """Remove a catalog entry. Saved quotes keep their stored ids and totals."""
    if not await service.remove(kind, entry_id, actor=subject):
        raise HTTPException(status_code=404, detail="Catalog entry not found")
