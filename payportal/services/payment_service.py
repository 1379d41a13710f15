"""
Payment Service — payment lifecycle
Handles creation of pending payments, the admin approve/reject transition
and per-user history.
"""

import logging
from datetime import datetime, timezone
from sqlalchemy import or_
from payportal.extensions import db
from payportal.models.transaction import Transaction
from payportal.services import ledger

logger = logging.getLogger(__name__)

VALID_TRANSITIONS = {
    "pending": {"approved", "rejected"},
    "approved": set(),
    "rejected": set(),
}


def create_payment(sender, recipient, amount, original_currency, original_amount, swift_code):
    """
    Persists a new payment request. Always starts as pending; the amount is
    already in the settlement currency and is never converted again.
    """
    payment = Transaction(
        sender_id=sender.user_id,
        recipient_id=recipient.user_id,
        amount=amount,
        original_currency=original_currency,
        original_amount=original_amount,
        swift_code=swift_code,
        status="pending",
    )
    db.session.add(payment)
    db.session.commit()
    logger.info("Payment %s created by %s (%s ZAR)", payment.transaction_id, sender.email, amount)
    return payment


def get_payment_by_id(transaction_id):
    return db.session.get(Transaction, transaction_id)


def list_pending():
    return (
        Transaction.query.filter_by(status="pending")
        .order_by(Transaction.created_at.asc(), Transaction.transaction_id.asc())
        .all()
    )


def get_payments_for_user(user_id):
    return (
        Transaction.query.filter(
            or_(Transaction.sender_id == user_id, Transaction.recipient_id == user_id)
        )
        .order_by(Transaction.created_at.desc())
        .all()
    )


def ledger_for_user(user_id):
    """Returns (balance, transactions) with transactions rendered for the viewer."""
    transactions = [tx.to_dict(viewer_id=user_id) for tx in get_payments_for_user(user_id)]
    return ledger.balance(transactions), ledger.history(transactions)


def resolve_payment(transaction_id, new_status, admin_id):
    """
    Moves a pending payment to approved or rejected.

    The UPDATE is conditioned on status = 'pending', so when two admins race
    on the same id the database lets exactly one row change through and the
    other sees a row count of zero.
    Returns (payment, error) where error is "not found" or a conflict message.
    """
    if new_status not in VALID_TRANSITIONS["pending"]:
        return None, f"Cannot transition to {new_status}"

    updated = (
        Transaction.query.filter_by(transaction_id=transaction_id, status="pending")
        .update(
            {
                "status": new_status,
                "resolved_at": datetime.now(timezone.utc),
                "resolved_by": admin_id,
            },
            synchronize_session=False,
        )
    )
    db.session.commit()

    payment = get_payment_by_id(transaction_id)
    if payment is not None:
        # The identity map may still hold the pre-update row
        db.session.refresh(payment)

    if updated == 0:
        if payment is None:
            return None, "Payment not found"
        logger.warning(
            "Conflict resolving payment %s to %s: already %s",
            transaction_id, new_status, payment.status,
        )
        return None, f"Cannot transition from {payment.status} to {new_status}"

    logger.info("Payment %s %s by admin %s", transaction_id, new_status, admin_id)
    return payment, None
