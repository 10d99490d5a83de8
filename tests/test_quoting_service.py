"""
Tests for the quoting facade.
"""

from decimal import Decimal

import pytest

from rollup_quotes.exceptions import CatalogUnavailableError, InvalidInputError
from rollup_quotes.models.quotes import QuoteStatus
from rollup_quotes.services.quoting import (
    ClientData,
    InMemoryCatalogRepository,
    InMemoryQuoteStore,
    QuoteInput,
    QuotingService,
    SelectionMode,
)


class BrokenCatalog(InMemoryCatalogRepository):
    async def list_motors(self):
        raise ConnectionError("catalog offline")


def gate(**overrides) -> QuoteInput:
    values = dict(width=2, height=2, roll="0.4", quantity=1, profile_id="p1")
    values.update(overrides)
    return QuoteInput(**values)


class TestComputeQuote:
    async def test_fetches_catalog_when_not_given(self, quoting_service):
        result = await quoting_service.compute_quote(gate())
        assert result.is_valid
        assert result.total_price == Decimal("2800")

    async def test_reuses_snapshot(self, quoting_service, catalog_repo):
        snapshot = await quoting_service.load_catalog()
        catalog_repo.motors.clear()

        result = await quoting_service.compute_quote(gate(), snapshot)

        assert result.motor.id == "m1"

    async def test_catalog_failure(self):
        service = QuotingService(BrokenCatalog(), InMemoryQuoteStore())
        with pytest.raises(CatalogUnavailableError):
            await service.compute_quote(gate())

    async def test_invalid_input_propagates(self, quoting_service):
        with pytest.raises(InvalidInputError):
            await quoting_service.compute_quote(gate(width=0))


class TestConfirmAndSave:
    async def test_saves_valid_result(self, quoting_service, quote_store):
        result = await quoting_service.compute_quote(
            gate(quantity=3, selected_optional_ids={"o1", "o2", "unknown"})
        )

        quote_id = await quoting_service.confirm_and_save(ClientData(name="Bruno"), result)

        record = await quote_store.get_quote(quote_id)
        assert record.status == QuoteStatus.PENDING
        assert record.fields.total_price == Decimal("9360.00")
        assert record.fields.motor_id == "m1"
        assert record.fields.axle_id == "a1"
        assert set(record.optional_ids) == {"o1", "o2"}

    async def test_records_manual_hardware(self, quoting_service, quote_store):
        result = await quoting_service.compute_quote(
            gate(motor_mode=SelectionMode.MANUAL, manual_motor_id="m2")
        )
        quote_id = await quoting_service.confirm_and_save(ClientData(name="Carla"), result)

        record = await quote_store.get_quote(quote_id)
        assert record.fields.motor_id == "m2"
        assert record.fields.auto_motor is False
        assert record.fields.auto_axle is True

    async def test_rejects_unresolved_hardware(self, quoting_service, quote_store, catalog_repo):
        catalog_repo.axles.clear()
        result = await quoting_service.compute_quote(gate())

        with pytest.raises(InvalidInputError, match="No axle covers this width"):
            await quoting_service.confirm_and_save(ClientData(name="Davi"), result)
        assert quote_store.state.quotes == {}

    async def test_rejects_blank_client_name(self, quoting_service):
        result = await quoting_service.compute_quote(gate())
        with pytest.raises(InvalidInputError) as exc_info:
            await quoting_service.confirm_and_save(ClientData(name="  "), result)
        assert exc_info.value.field == "client.name"

    async def test_approve_and_delete(self, quoting_service):
        result = await quoting_service.compute_quote(gate())
        quote_id = await quoting_service.confirm_and_save(ClientData(name="Eva"), result)

        approved = await quoting_service.approve_quote(quote_id)
        assert approved.status == QuoteStatus.APPROVED

        await quoting_service.delete_quote(quote_id)
        assert await quoting_service.list_quotes() == []
