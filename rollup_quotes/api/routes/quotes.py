"""
Quote calculation and lifecycle API routes.
"""

from fastapi import APIRouter, Depends, status

from rollup_quotes.api.dependencies import (
    CurrentSubjectDep, QuotingServiceDep, get_current_subject,
)
from rollup_quotes.schemas import (
    CalculationResponse,
    QuoteCalculationRequest,
    QuoteResponse,
    QuoteSavedResponse,
    QuoteSaveRequest,
)

router = APIRouter(dependencies=[Depends(get_current_subject)])


@router.post("/calculate", response_model=CalculationResponse)
async def calculate_quote(
    body: QuoteCalculationRequest,
    service: QuotingServiceDep,
):
    """
    Price a gate configuration without saving it.

    Unresolved motor or axle selection is reported in `issues` with
    `is_valid=false`; partial figures are still returned.
    """
    result = await service.compute_quote(body.to_input())
    return CalculationResponse.from_result(result)


@router.post("/", response_model=QuoteSavedResponse, status_code=status.HTTP_201_CREATED)
async def save_quote(
    body: QuoteSaveRequest,
    service: QuotingServiceDep,
):
    """
    Recalculate and save a quote with its client.

    Send the same `idempotency_key` when retrying a failed save. Reusing a
    key for a different gate configuration is rejected with 409.
    """
    result = await service.compute_quote(body.quote.to_input())
    quote_id = await service.confirm_and_save(
        body.client.to_data(),
        result,
        idempotency_key=body.idempotency_key,
    )
    return QuoteSavedResponse(id=quote_id, calculation=CalculationResponse.from_result(result))


@router.get("/", response_model=list[QuoteResponse])
async def list_quotes(service: QuotingServiceDep):
    """List quotes with their clients, newest first."""
    quotes = await service.list_quotes()
    return [QuoteResponse.from_record(q) for q in quotes]


@router.post("/{quote_id}/approve", response_model=QuoteResponse)
async def approve_quote(
    quote_id: str,
    service: QuotingServiceDep,
    subject: CurrentSubjectDep,
):
    """Approve a quote. Approving twice is harmless."""
    quote = await service.approve_quote(quote_id, actor=subject)
    return QuoteResponse.from_record(quote)


@router.delete("/{quote_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_quote(
    quote_id: str,
    service: QuotingServiceDep,
    subject: CurrentSubjectDep,
):
    """Delete a quote and its optional selections."""
    await service.delete_quote(quote_id, actor=subject)
