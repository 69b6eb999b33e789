"""API routes, mounted at the application root."""

from fastapi import APIRouter

from budgetsync.api.routes import accounts, budgets, categories, link, sync, transactions

router = APIRouter()

router.include_router(link.router)
router.include_router(sync.router)
router.include_router(accounts.router)
router.include_router(budgets.router)
router.include_router(categories.router)
router.include_router(transactions.router)
