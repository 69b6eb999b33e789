"""Database models."""
from budgetsync.models.access_credential import AccessCredential
from budgetsync.models.account import Account
from budgetsync.models.budget import Budget
from budgetsync.models.category import Category
from budgetsync.models.transaction import Transaction

__all__ = ["AccessCredential", "Account", "Budget", "Category", "Transaction"]
