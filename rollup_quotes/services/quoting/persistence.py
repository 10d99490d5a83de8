"""
Quote persistence.

Saves a computed quote with its client as one unit of work and manages the
approve/delete lifecycle.
"""

from datetime import datetime, timezone
from typing import Callable, Iterable

from rollup_quotes.exceptions import (
    IdempotencyConflictError, PersistenceFailureError, QuoteNotFoundError,
)
from rollup_quotes.models.quotes import QuoteStatus
from rollup_quotes.services.quoting.store import (
    ClientData, QuoteFields, QuoteRecord, QuoteStore,
)
from rollup_quotes.utils.logging import ServiceLogger, audit_logger


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class QuotePersistence:
    """
    Lifecycle operations for stored quotes.

    Quotes are created pending, may move to approved, and may be deleted.
    No other mutation exists.
    """

    def __init__(
        self,
        store: QuoteStore,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.store = store
        self.clock = clock
        self.logger = ServiceLogger("quote_persistence")

    async def save(
        self,
        client: ClientData,
        fields: QuoteFields,
        optional_ids: Iterable[str],
        idempotency_key: str | None = None,
    ) -> str:
        """
        Create client, quote and optional links together.

        Args:
            client: Client contact, always stored as a new record
            fields: Quote columns including the total price snapshot
            optional_ids: Selected optional ids; duplicates are collapsed
            idempotency_key: Caller-chosen key making retries safe

        Returns:
            Id of the created (or previously created) quote

        Raises:
            PersistenceFailureError: nothing was written
            IdempotencyConflictError: the key already saved a different quote
        """
        # Keep first-seen order while dropping duplicates.
        unique_ids = list(dict.fromkeys(optional_ids))

        self.logger.log_operation_start(
            "save_quote",
            client_name=client.name,
            optional_count=len(unique_ids),
            idempotency_key=idempotency_key,
        )

        if idempotency_key:
            existing = await self._find_by_key(idempotency_key)
            if existing is not None:
                if existing.fields != fields or set(existing.optional_ids) != set(unique_ids):
                    error = IdempotencyConflictError(idempotency_key, existing.id)
                    self.logger.log_operation_failed("save_quote", error, quote_id=existing.id)
                    raise error
                self.logger.log_operation_complete(
                    "save_quote", quote_id=existing.id, replayed=True,
                )
                return existing.id

        try:
            now = self.clock()
            async with self.store.unit_of_work() as writer:
                client_record = await writer.insert_client(client, now)
                quote_id = await writer.insert_quote(
                    client_record.id,
                    fields,
                    QuoteStatus.PENDING,
                    now,
                    idempotency_key=idempotency_key,
                )
                if unique_ids:
                    await writer.insert_optional_links(quote_id, unique_ids)
        except Exception as e:
            self.logger.log_operation_failed("save_quote", e, client_name=client.name)
            raise PersistenceFailureError(f"Quote could not be saved: {e}") from e

        self.logger.log_operation_complete(
            "save_quote",
            quote_id=quote_id,
            total_price=str(fields.total_price),
        )
        return quote_id

    async def _find_by_key(self, idempotency_key: str) -> QuoteRecord | None:
        try:
            quote_id = await self.store.find_quote_id_by_key(idempotency_key)
            return await self.store.get_quote(quote_id) if quote_id else None
        except Exception as e:
            self.logger.log_operation_failed("save_quote", e, idempotency_key=idempotency_key)
            raise PersistenceFailureError(f"Quote could not be saved: {e}") from e

    async def approve(self, quote_id: str, actor: str | None = None) -> QuoteRecord:
        """Move a quote to approved. Approving an approved quote is a no-op."""
        quote = await self.store.get_quote(quote_id)
        if quote is None:
            raise QuoteNotFoundError(quote_id)

        target = quote.status.transition(QuoteStatus.APPROVED)
        if target == quote.status:
            return quote

        # The quote may have been deleted since it was read.
        if not await self.store.update_quote_status(quote_id, target):
            raise QuoteNotFoundError(quote_id)
        audit_logger.log_action(
            "approve",
            "quote",
            resource_id=quote_id,
            actor=actor,
            old_values={"status": quote.status.value},
            new_values={"status": target.value},
        )
        approved = await self.store.get_quote(quote_id)
        if approved is None:
            raise QuoteNotFoundError(quote_id)
        return approved

    async def delete(self, quote_id: str, actor: str | None = None) -> None:
        """Hard-delete a quote and its optional links; the client stays."""
        if not await self.store.delete_quote(quote_id):
            raise QuoteNotFoundError(quote_id)
        audit_logger.log_action("delete", "quote", resource_id=quote_id, actor=actor)

    async def list(self) -> list[QuoteRecord]:
        return await self.store.list_quotes()
