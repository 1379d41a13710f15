"""
Ledger View — the user's balance, statement and money in/out summary.
"""

from decimal import Decimal

from payportal.services import ledger


class LedgerView:
    def __init__(self, client):
        self.client = client
        self.balance = Decimal("0.00")
        self.transactions = []

    def refresh(self):
        data = self.client.get_balance()
        self.transactions = data.get("transactions", [])
        # The server's figure and the local fold use the same rules
        self.balance = Decimal(str(data.get("balance", ledger.balance(self.transactions)))).quantize(Decimal("0.01"))
        return self

    def history(self):
        return ledger.history(self.transactions)

    def summary(self):
        return ledger.summary(self.transactions)
