"""Account domain schemas - Pydantic models for validation"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ...shared.validators import validate_country_code, validate_email, validate_full_name
from ..events.schemas import PublishResult

MIN_PASSWORD_LENGTH = 8


class InvestmentGoal(str, Enum):
    GROWTH = "Growth"
    INCOME = "Income"
    BALANCED = "Balanced"
    CONSERVATIVE = "Conservative"


class RiskTolerance(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class PreferredIndustry(str, Enum):
    TECHNOLOGY = "Technology"
    HEALTHCARE = "Healthcare"
    FINANCE = "Finance"
    ENERGY = "Energy"
    CONSUMER_GOODS = "Consumer Goods"


class UserProfile(BaseModel):
    """Identity plus self-reported investment preferences. Immutable once created."""

    model_config = ConfigDict(frozen=True)

    email: str
    full_name: str
    country: str
    investment_goals: InvestmentGoal
    risk_tolerance: RiskTolerance
    preferred_industry: PreferredIndustry

    def event_payload(self) -> dict[str, str]:
        """Payload of the user-created event"""
        return {
            "email": self.email,
            "name": self.full_name,
            "country": self.country,
            "investmentGoals": self.investment_goals.value,
            "riskTolerance": self.risk_tolerance.value,
            "preferredIndustry": self.preferred_industry.value,
        }


class SignUpRequest(BaseModel):
    """Schema for email/password sign up with profile preferences"""

    fullName: str
    email: str
    password: str = Field(min_length=MIN_PASSWORD_LENGTH)
    country: str = "US"
    investmentGoals: InvestmentGoal = InvestmentGoal.GROWTH
    riskTolerance: RiskTolerance = RiskTolerance.MEDIUM
    preferredIndustry: PreferredIndustry = PreferredIndustry.TECHNOLOGY

    @field_validator("fullName")
    @classmethod
    def check_full_name(cls, v: str) -> str:
        return validate_full_name(v)

    @field_validator("email")
    @classmethod
    def check_email(cls, v: str) -> str:
        if not v:
            raise ValueError("Email is required")
        return validate_email(v)

    @field_validator("country")
    @classmethod
    def check_country(cls, v: str) -> str:
        return validate_country_code(v)

    def to_profile(self) -> UserProfile:
        return UserProfile(
            email=self.email,
            full_name=self.fullName,
            country=self.country,
            investment_goals=self.investmentGoals,
            risk_tolerance=self.riskTolerance,
            preferred_industry=self.preferredIndustry,
        )


class SignInRequest(BaseModel):
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def check_email(cls, v: str) -> str:
        return validate_email(v)


class AccountActionResult(BaseModel):
    """Uniform result of every account operation. Callers branch on success."""

    success: bool
    data: Optional[Any] = None
    error: Optional[str] = None


class SignUpResult(AccountActionResult):
    """Sign-up result with the independent outcome of the user-created event"""

    event: Optional[PublishResult] = None
