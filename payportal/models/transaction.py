"""
Transaction Model — a cross-border payment request
Status: pending | approved | rejected
Amounts are stored in the settlement currency; the entered amount and
currency are kept alongside for audit.
"""

import uuid
from datetime import datetime, timezone
from payportal.currency import format_amount
from payportal.extensions import db

STATUSES = ("pending", "approved", "rejected")


def _iso(value):
    if value is None:
        return None
    # SQLite hands back naive datetimes; everything is stored as UTC
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat()


class Transaction(db.Model):
    __tablename__ = "transactions"

    transaction_id = db.Column(
        db.UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4
    )
    sender_id = db.Column(db.UUID(as_uuid=True), db.ForeignKey("users.user_id"), nullable=False)
    recipient_id = db.Column(db.UUID(as_uuid=True), db.ForeignKey("users.user_id"), nullable=False)
    amount = db.Column(db.Numeric(14, 2), nullable=False)
    original_currency = db.Column(db.String(3), nullable=False)
    original_amount = db.Column(db.Numeric(14, 2), nullable=True)
    swift_code = db.Column(db.String(34), nullable=False)
    status = db.Column(
        db.Enum(*STATUSES, name="transaction_status"),
        nullable=False,
        default="pending"
    )
    created_at = db.Column(
        db.DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc)
    )
    resolved_at = db.Column(db.DateTime(timezone=True), nullable=True)
    resolved_by = db.Column(db.UUID(as_uuid=True), db.ForeignKey("users.user_id"), nullable=True)

    sender = db.relationship("User", foreign_keys=[sender_id])
    recipient = db.relationship("User", foreign_keys=[recipient_id])

    def transaction_type(self, viewer_id):
        return "incoming" if self.recipient_id == viewer_id else "outgoing"

    def to_dict(self, viewer_id=None):
        data = {
            "id":               str(self.transaction_id),
            "sender":           self.sender.to_summary() if self.sender else None,
            "recipient":        self.recipient.to_summary() if self.recipient else None,
            "amount":           format_amount(self.amount),
            "originalCurrency": self.original_currency,
            "originalAmount":   format_amount(self.original_amount),
            "swiftCode":        self.swift_code,
            "status":           self.status,
            "createdAt":        _iso(self.created_at),
            "resolvedAt":       _iso(self.resolved_at),
        }
        if viewer_id is not None:
            data["transactionType"] = self.transaction_type(viewer_id)
        return data
