"""
API Router.

Aggregates all endpoints served under the ``/api`` prefix.
"""

from fastapi import APIRouter
from trackpay.app.api.endpoints import auth, customers, transactions, health

router = APIRouter()

router.include_router(auth.router)
router.include_router(customers.router)
router.include_router(transactions.router)

# Unauthenticated service endpoints
router.include_router(health.router)
