"""
Derived ledger figures.

Pure functions over purchase collections; nothing here touches the database.
"""

from typing import Iterable, NamedTuple


class PurchaseTotals(NamedTuple):
    total_amount: float
    total_paid: float
    pending: float


def purchase_pending(purchase) -> float:
    """Outstanding balance of a single purchase."""
    return round(purchase.amount - purchase.paid, 2)


def summarize_purchases(purchases: Iterable) -> PurchaseTotals:
    """Total owed, total received and pending balance across purchases."""
    total_amount = 0.0
    total_paid = 0.0
    for purchase in purchases:
        total_amount += purchase.amount
        total_paid += purchase.paid

    return PurchaseTotals(
        total_amount=round(total_amount, 2),
        total_paid=round(total_paid, 2),
        pending=round(total_amount - total_paid, 2),
    )


def summarize_customers(customers: Iterable) -> PurchaseTotals:
    """Aggregate ``summarize_purchases`` over every customer's purchases."""
    return summarize_purchases(
        purchase for customer in customers for purchase in customer.purchases
    )
