"""Sync and reconciliation result schemas."""

from pydantic import Field

from budgetsync.schemas.common import ApiModel


class SyncResult(ApiModel):
    """Counts from one sync call."""

    added: int = Field(description="Transactions added upstream since the last cursor")
    modified: int = Field(description="Transactions modified upstream")
    removed: int = Field(description="Transaction ids removed upstream")
    recategorized: int = Field(description="Transactions whose category changed afterwards")


class ReconcileResult(ApiModel):
    """Counts from a full reconciliation."""

    updated: int = Field(description="Transactions whose category assignment changed")
    total: int = Field(description="Transactions examined")


class RecategorizeResult(ReconcileResult):
    ok: bool = True
    message: str
