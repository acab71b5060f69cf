"""Pydantic schemas for API request/response validation"""

from decimal import Decimal
from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Dict, List, Optional


class LoanIn(BaseModel):
    """Loan as uploaded by a device; unknown fields are stored verbatim"""

    model_config = ConfigDict(extra="allow")

    loanId: str = Field(..., min_length=1, description="Device-side loan identifier")
    partialRepayments: List[Dict[str, Any]] = Field(default_factory=list)


class DepositIn(BaseModel):
    """Deposit account as uploaded by a device; unknown fields are stored verbatim"""

    model_config = ConfigDict(extra="allow")

    depositId: str = Field(..., min_length=1, description="Device-side deposit identifier")
    transactions: List[Dict[str, Any]] = Field(default_factory=list)


class LoanSyncRequest(BaseModel):
    """Request body for POST /v1/loans/sync"""

    user_id: str = Field(..., min_length=1, description="User identifier")
    device_id: Optional[str] = None
    loans: List[LoanIn]


class DepositSyncRequest(BaseModel):
    """Request body for POST /v1/deposits/sync"""

    user_id: str = Field(..., min_length=1, description="User identifier")
    device_id: Optional[str] = None
    deposits: List[DepositIn]


class SyncResponse(BaseModel):
    """Response for sync endpoints"""

    created: int
    updated: int
    total: int


class LoansResponse(BaseModel):
    """Response for GET /v1/loans"""

    loans: List[Dict[str, Any]]
    count: int
    server_time: str


class DepositsResponse(BaseModel):
    """Response for GET /v1/deposits"""

    deposits: List[Dict[str, Any]]
    count: int
    server_time: str


class BackupResponse(BaseModel):
    """Response for GET /v1/backup/full"""

    loans: List[Dict[str, Any]]
    deposits: List[Dict[str, Any]]
    backup_date: str
    loans_count: int
    deposits_count: int


class RestoreRequest(BaseModel):
    """Request body for POST /v1/backup/restore"""

    user_id: str = Field(..., min_length=1, description="User identifier")
    loans: List[LoanIn] = Field(default_factory=list)
    deposits: List[DepositIn] = Field(default_factory=list)
    clear_existing: bool = False


class RestoreResponse(BaseModel):
    """Response for POST /v1/backup/restore"""

    loans_restored: int
    deposits_restored: int


class SyncLogItem(BaseModel):
    """Single sync in history"""

    device_id: Optional[str] = None
    sync_type: str
    loans_count: int
    deposits_count: int
    timestamp: str


class StatsResponse(BaseModel):
    """Response for GET /v1/stats"""

    user_id: str
    loans_count: int
    deposits_count: int
    last_sync: Optional[str] = None
    recent_syncs: List[SyncLogItem]


def json_numbers(record: Dict[str, Any]) -> Dict[str, Any]:
    """Render Decimal fields as JSON numbers (pydantic would emit strings)"""
    return {k: float(v) if isinstance(v, Decimal) else v for k, v in record.items()}
