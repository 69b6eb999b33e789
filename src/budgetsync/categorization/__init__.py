"""Transaction categorization utilities.

Keyword and provider-category matching against a user's own categories.
Everything here is pure: no database or network access.
"""

from .rules import categorize, suggested_keywords

__all__ = ["categorize", "suggested_keywords"]
