"""
Payments portal: cross-border transfer requests held pending until an
administrator approves or rejects them.
"""

__version__ = "1.0.0"
