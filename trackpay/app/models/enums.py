"""
Ledger enumerations.

Defines transaction types and the categories used by ledger sync.
"""

import enum


class TransactionType(str, enum.Enum):
    """
    Dashboard transaction type.

    Types:
        INCOME: Money received (salary, customer payments, ...)
        EXPENSE: Money spent
    """
    INCOME = "income"
    EXPENSE = "expense"


class SyncCategory:
    """Categories of income transactions posted by ledger sync."""
    CUSTOMER_PAYMENT = "Customer Payment"
    DEBT_RECOVERY = "Debt Recovery"

