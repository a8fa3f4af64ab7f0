"""
AI Advice Schemas - DTOs for redemption advice over explore results.

The advisor only ever sees engine-computed facts (balances, opportunities,
affordability); the LLM phrases them, it never computes them.
"""

from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from app.schemas.explore_schemas import BalanceInput


class AdviceRequest(BaseModel):
    """
    API request schema for redemption advice.

    Example:
        POST /api/v1/explore/advice
        {
            "balances": [{"program_id": "amex-mr", "balance": 90000}],
            "destination": "Japan"
        }
    """
    balances: List[BalanceInput] = Field(default_factory=list, description="Point balances to advise on")
    destination: Optional[str] = Field(None, max_length=128, description="Desired region or country")
    home_airport: Optional[str] = Field(None, max_length=8, description="IATA code of the home airport")


class BalanceLine(BaseModel):
    program_id: str
    program_name: str
    balance: int = Field(..., ge=0)


class OpportunityLine(BaseModel):
    title: str
    points_required: int = Field(..., ge=0)
    value_cpp: float = Field(..., ge=0)
    can_afford: bool
    points_shortfall: int = Field(0, ge=0)

    @field_validator("title")
    @classmethod
    def validate_non_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Opportunity title must be non-empty")
        return v.strip()


class AdviceContext(BaseModel):
    """Ground truth handed to the prompt builder and the template fallback."""
    balances: List[BalanceLine] = Field(..., description="Balances with display names")
    destination: Optional[str] = Field(None, description="Normalised destination filter")
    opportunities: List[OpportunityLine] = Field(default_factory=list, description="Ranked opportunities")

    @property
    def total_points(self) -> int:
        return sum(b.balance for b in self.balances)

    @property
    def affordable_count(self) -> int:
        return sum(1 for o in self.opportunities if o.can_afford)


class Recommendation(BaseModel):
    title: str
    description: str


class AdviceResponse(BaseModel):
    """
    API response containing the advice and generation metadata.

    Example:
        {
            "summary": "Great news! With your 90,000 total points ...",
            "recommendations": [{"title": "Best Option for Japan", "description": "..."}],
            "model_used": "template",
            "is_fallback": true
        }
    """
    summary: str = Field(..., description="Natural language summary for end users")
    recommendations: List[Recommendation] = Field(default_factory=list, max_length=3)

    # Metadata for debugging/analytics
    model_used: str = Field(default="template", description="LLM model or 'template' for fallback")
    is_fallback: bool = Field(default=False, description="Whether fallback logic was used")
    generation_time_ms: Optional[int] = Field(None, description="Time taken to generate")


class AuditLogEntry(BaseModel):
    """Structured audit record for each advice generation."""
    timestamp: str = Field(..., description="ISO 8601 timestamp")
    event_type: str = Field(default="advice_generated", description="Event type")
    user_id: Optional[str] = Field(None, description="User ID if supplied")
    destination: Optional[str] = Field(None, description="Destination filter")
    opportunity_count: int = Field(..., ge=0, description="Opportunities given to the model")
    model_used: str = Field(..., description="LLM model identifier")
    prompt_hash: Optional[str] = Field(None, description="Hash of prompt for deduplication")
    response_length: int = Field(..., description="Character count of the summary")
