"""
app/models/user.py

Purpose: User document model

- Identity (email, name, phone)
- OTP verification state
- Financial ledger fields (balance, plans, deposit/withdraw history)
- Validates every document read from or written to the users collection
"""

from pydantic import BaseModel, ConfigDict, Field, AliasChoices, field_validator
from typing import Optional, List, Dict, Any
from datetime import datetime


class LedgerModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class PurchasedPlan(LedgerModel):
    plan_name: Optional[str] = Field(default=None, alias="planName")
    amount: Optional[float] = None
    profit_per_day: Optional[float] = Field(default=None, alias="profitPerDay")
    purchase_date: datetime = Field(default_factory=datetime.utcnow, alias="purchaseDate")


class WithdrawalEntry(LedgerModel):
    amount: Optional[float] = None
    date: datetime = Field(default_factory=datetime.utcnow)
    status: Optional[str] = None


class DepositEntry(LedgerModel):
    amount: Optional[float] = None
    date: datetime = Field(default_factory=datetime.utcnow)
    method: Optional[str] = None


class User(LedgerModel):
    """
    A user record as stored in MongoDB.

    Stored field names are camelCase; `id` is the stringified `_id` and is
    never written back.
    """

    id: Optional[str] = Field(default=None, validation_alias=AliasChoices("_id", "id"))

    email: str
    name: str
    phone: Optional[str] = None

    otp: Optional[str] = None
    verified: bool = False

    balance: float = 0
    total_income: float = Field(default=0, alias="totalIncome")
    referred_users: List[str] = Field(default_factory=list, alias="referredUsers")
    purchased_plans: List[PurchasedPlan] = Field(default_factory=list, alias="purchasedPlans")
    withdraw_history: List[WithdrawalEntry] = Field(default_factory=list, alias="withdrawHistory")
    deposit_history: List[DepositEntry] = Field(default_factory=list, alias="depositHistory")

    created_at: Optional[datetime] = Field(default=None, alias="createdAt")
    updated_at: Optional[datetime] = Field(default=None, alias="updatedAt")

    @field_validator("id", mode="before")
    @classmethod
    def stringify_object_id(cls, v):
        return str(v) if v is not None else None

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "User":
        return cls.model_validate(document)

    def to_document(self) -> Dict[str, Any]:
        """Document ready for insert_one (no `_id`, camelCase keys)."""
        return self.model_dump(by_alias=True, exclude={"id"})

    def to_public(self, include_otp: bool = True) -> Dict[str, Any]:
        """JSON-safe representation returned by the API."""
        exclude = None if include_otp else {"otp"}
        return self.model_dump(by_alias=True, mode="json", exclude=exclude)
