"""
Quoting facade.

Entry point for the API and CLI: loads a catalog snapshot, prices the gate,
and hands confirmed results to QuotePersistence.
"""

import time

from rollup_quotes.config.settings import settings
from rollup_quotes.exceptions import CatalogUnavailableError, InvalidInputError
from rollup_quotes.services.quoting.catalog import CatalogRepository, CatalogSnapshot
from rollup_quotes.services.quoting.persistence import QuotePersistence
from rollup_quotes.services.quoting.pricing import (
    CalculationResult, PricingEngine, QuoteInput,
)
from rollup_quotes.services.quoting.store import (
    ClientData, QuoteFields, QuoteRecord, QuoteStore,
)
from rollup_quotes.utils.logging import ServiceLogger


class QuotingService:
    """
    Service for calculating and storing roll-up gate quotes.

    Provides:
    - Quote calculation against a per-session catalog snapshot
    - Confirm-and-save of valid calculations
    - Approval and deletion of stored quotes
    - Quote listing, newest first
    """

    def __init__(
        self,
        catalog: CatalogRepository,
        store: QuoteStore,
        persistence: QuotePersistence | None = None,
    ):
        self.catalog = catalog
        self.engine = PricingEngine()
        self.persistence = persistence or QuotePersistence(store)
        self.logger = ServiceLogger("quoting")

    async def load_catalog(self) -> CatalogSnapshot:
        """Read the catalog once; reuse the snapshot for a whole session."""
        try:
            return await self.catalog.snapshot()
        except Exception as e:
            self.logger.log_operation_failed("load_catalog", e)
            raise CatalogUnavailableError(f"Catalog could not be loaded: {e}") from e

    async def compute_quote(
        self,
        quote_input: QuoteInput,
        catalog: CatalogSnapshot | None = None,
    ) -> CalculationResult:
        """
        Price a gate configuration.

        Args:
            quote_input: Dimensions, profile, hardware modes and optionals
            catalog: Snapshot to reuse; fetched when omitted

        Returns:
            CalculationResult, possibly invalid for saving

        Raises:
            InvalidInputError: bad dimensions, quantity or profile
            CatalogUnavailableError: the catalog could not be read
        """
        start = time.perf_counter()
        if catalog is None:
            catalog = await self.load_catalog()

        try:
            result = self.engine.calculate(quote_input, catalog)
        except InvalidInputError as e:
            self.logger.log_operation_failed("compute_quote", e, field=e.field)
            raise

        self.logger.log_operation_complete(
            "compute_quote",
            duration_ms=(time.perf_counter() - start) * 1000,
            profile_id=result.profile.id,
            motor_id=result.motor.id if result.motor else None,
            axle_id=result.axle.id if result.axle else None,
            total_price=str(result.total_price),
            is_valid=result.is_valid,
        )
        return result

    async def confirm_and_save(
        self,
        client: ClientData,
        result: CalculationResult,
        idempotency_key: str | None = None,
    ) -> str:
        """
        Persist a valid calculation with its client.

        Raises:
            InvalidInputError: the calculation is not valid for saving
            PersistenceFailureError: the unit of work failed and was rolled back
        """
        if not result.is_valid:
            raise InvalidInputError(
                "Quote cannot be saved: " + "; ".join(result.issues or ("invalid input",))
            )
        if not client.name.strip():
            raise InvalidInputError("Client name is required", field="client.name")

        fields = QuoteFields.from_result(result, places=settings.quoting.money_places)
        optional_ids = [line.optional_id for line in result.optional_lines]
        return await self.persistence.save(
            client,
            fields,
            optional_ids,
            idempotency_key=idempotency_key,
        )

    async def approve_quote(self, quote_id: str, actor: str | None = None) -> QuoteRecord:
        return await self.persistence.approve(quote_id, actor=actor)

    async def delete_quote(self, quote_id: str, actor: str | None = None) -> None:
        await self.persistence.delete(quote_id, actor=actor)

    async def list_quotes(self) -> list[QuoteRecord]:
        return await self.persistence.list()
