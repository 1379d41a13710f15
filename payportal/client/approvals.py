"""
Approval Queue — the admin's view over pending payments.

The per-id in-flight set only stops the same admin from double-clicking.
Two admins racing is settled by the server, which answers Conflict to the
loser; the queue then refetches so it shows what actually happened.
"""

import logging

from payportal.errors import ActionInFlight, Conflict, PortalError

logger = logging.getLogger(__name__)


class ApprovalQueue:
    def __init__(self, client):
        self.client = client
        self.pending = []
        self.refresh_error = None
        self._in_flight = set()

    def is_busy(self, transaction_id) -> bool:
        return transaction_id in self._in_flight

    def list_pending(self) -> list:
        self.client.session.require_role("admin")
        self.pending = self.client.list_pending()
        self.refresh_error = None
        return self.pending

    def approve(self, transaction_id) -> dict:
        return self._resolve(transaction_id, self.client.approve_payment)

    def reject(self, transaction_id) -> dict:
        return self._resolve(transaction_id, self.client.reject_payment)

    def _refresh_after(self, transaction_id):
        # The decision already happened server-side; a failed refetch is only
        # reported through refresh_error and never replaces its outcome
        try:
            self.list_pending()
        except PortalError as e:
            logger.warning("Refreshing pending queue after %s failed: %s", transaction_id, e)
            self.refresh_error = e

    def _resolve(self, transaction_id, action) -> dict:
        self.client.session.require_role("admin")
        if transaction_id in self._in_flight:
            raise ActionInFlight(f"Payment {transaction_id} is already being processed")

        self._in_flight.add(transaction_id)
        try:
            result = action(transaction_id)
        except Conflict:
            logger.info("Payment %s was already resolved, refreshing queue", transaction_id)
            self._refresh_after(transaction_id)
            raise
        finally:
            self._in_flight.discard(transaction_id)

        self._refresh_after(transaction_id)
        return result
