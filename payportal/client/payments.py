"""
Payment Request Builder.

Submitting is two-phase: build_draft() validates and converts, the user
sees the preview, Draft.confirm() marks it accepted, and only then does
submit() talk to the server.
"""

import logging
from dataclasses import dataclass, replace
from decimal import Decimal
from typing import Callable, Optional

from payportal import currency as fx
from payportal.errors import ActionInFlight, PortalError, SubmissionFailed, Unauthorized, ValidationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Draft:
    recipient_email: str
    swift_code: str
    currency: str
    original_amount: Decimal
    amount: Decimal
    confirmed: bool = False

    @property
    def preview(self) -> str:
        return f"You are trying to send R{self.amount:.2f} to {self.recipient_email}."

    def confirm(self) -> "Draft":
        return replace(self, confirmed=True)


def build_draft(recipient_email, swift_code, raw_amount, currency) -> Draft:
    """Validate user input and compute the ZAR amount. No network traffic."""
    fields = {
        "recipientEmail": (recipient_email or "").strip(),
        "swiftCode": (swift_code or "").strip(),
        "amount": str(raw_amount).strip() if raw_amount is not None else "",
        "currency": (currency or "").strip(),
    }
    missing = [name for name, value in fields.items() if not value]
    if missing:
        raise ValidationError(f"Missing fields: {', '.join(missing)}", fields=missing)

    # Convert the cent-rounded figure so the server can check the pair
    original_amount = fx.parse_amount(raw_amount, cents=True)
    amount = fx.convert(fields["currency"], original_amount)
    return Draft(
        recipient_email=fields["recipientEmail"],
        swift_code=fields["swiftCode"],
        currency=fields["currency"],
        original_amount=original_amount,
        amount=amount,
    )


class PaymentRequestBuilder:
    def __init__(self, client, on_submitted: Optional[Callable[[], None]] = None):
        self.client = client
        self.on_submitted = on_submitted
        self._in_flight = False

    build_draft = staticmethod(build_draft)

    @property
    def is_busy(self) -> bool:
        return self._in_flight

    def submit(self, draft: Draft) -> str:
        """
        Create the pending payment for a confirmed draft and return its id.
        Any failure other than an expired session surfaces as SubmissionFailed.
        """
        if not draft.confirmed:
            raise ValidationError("Draft must be confirmed before it is submitted")
        if self._in_flight:
            raise ActionInFlight("A payment is already being submitted")

        self._in_flight = True
        try:
            created = self.client.submit_payment(
                draft.recipient_email,
                draft.swift_code,
                draft.amount,
                draft.currency,
                original_amount=draft.original_amount,
            )
        except Unauthorized:
            raise
        except PortalError as e:
            logger.warning("Payment submission failed: %s", e)
            raise SubmissionFailed(f"Failed to create payment: {e.message}") from e
        finally:
            self._in_flight = False

        logger.info("Payment %s sent to admin for approval", created["id"])
        if self.on_submitted:
            # The payment exists now; a failed refresh must not hide its id
            try:
                self.on_submitted()
            except PortalError as e:
                logger.warning("Ledger refresh after payment %s failed: %s", created["id"], e)
        return created["id"]
