"""
Client core for the payments portal: session store, REST client and the
payment, approval and ledger workflows built on them.
"""

from payportal.client.api import PortalClient
from payportal.client.approvals import ApprovalQueue
from payportal.client.config import ClientConfig
from payportal.client.ledger import LedgerView
from payportal.client.payments import Draft, PaymentRequestBuilder, build_draft
from payportal.client.session import SessionStore

__all__ = [
    "ApprovalQueue",
    "ClientConfig",
    "Draft",
    "LedgerView",
    "PaymentRequestBuilder",
    "PortalClient",
    "SessionStore",
    "build_draft",
]
