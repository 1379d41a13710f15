from payportal.models.user import User
from payportal.models.transaction import Transaction

__all__ = ["User", "Transaction"]
