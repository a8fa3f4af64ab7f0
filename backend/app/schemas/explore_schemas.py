"""
Explore API schemas.

Response models mirror the engine dataclasses field for field so results
can be validated straight from dataclasses.asdict().
"""

from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


class BalanceInput(BaseModel):
    program_id: str = Field(..., min_length=1, description="Loyalty program id, e.g. 'chase-ur'")
    balance: int = Field(..., ge=0, description="Point count")


class ExploreRequest(BaseModel):
    """
    Stateless explore request.

    Example:
        POST /api/v1/explore/evaluate
        {
            "balances": [{"program_id": "chase-ur", "balance": 80000}],
            "destination": "Japan",
            "home_airport": "BOS"
        }
    """
    balances: List[BalanceInput] = Field(default_factory=list)
    destination: Optional[str] = Field(None, max_length=128, description="Region or country, free text")
    home_airport: Optional[str] = Field(None, max_length=8, description="IATA code of the home airport")

    @field_validator("home_airport")
    @classmethod
    def validate_home_airport(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip().upper()
        if v and not v.isalpha():
            raise ValueError("home_airport must be an IATA airport code")
        return v


class LoyaltyProgramOut(BaseModel):
    id: str
    name: str
    type: str
    base_value_cpp: float
    transfer_partners: List[str] = []
    alliance: Optional[str] = None
    award_booking_url: Optional[str] = None


class SweetSpotOut(BaseModel):
    id: str
    title: str
    program_id: str
    origin_region: str
    destination_region: str
    cabin_class: str
    points_required: int
    typical_cash_price: float
    value_cpp: float
    description: str = ""
    booking_tips: Optional[str] = None


class TransferSourceOut(BaseModel):
    program_id: str
    program_name: str
    balance: int


class AwardOpportunityOut(BaseModel):
    id: str
    sweet_spot: SweetSpotOut
    program: LoyaltyProgramOut
    user_balance: int
    points_required: int
    can_afford: bool
    points_shortfall: int
    percentage_owned: int = Field(..., ge=0, le=100)
    estimated_value: float
    transfer_source: Optional[TransferSourceOut] = None


class PositioningOptionOut(BaseModel):
    id: str
    alternate_origin: str
    alternate_origin_city: str
    award_opportunity: AwardOpportunityOut
    estimated_positioning_cost: float
    total_value: float
    reasoning: str = ""


class OpportunitySummaryOut(BaseModel):
    total: int
    affordable: int
    almost_affordable: int
    total_potential_value: float
    best_value: Optional[AwardOpportunityOut] = None
    closest_to_affording: Optional[AwardOpportunityOut] = None


class ExploreResponse(BaseModel):
    opportunities: List[AwardOpportunityOut]
    positioning_options: List[PositioningOptionOut]
    summary: OpportunitySummaryOut
    destination: str = ""
    home_airport: str = ""
    available_destinations: List[str] = []
    fingerprint: str = Field(..., description="Hash of the inputs that produced this result")


class BookingLink(BaseModel):
    label: str
    url: Optional[str] = None
    is_primary: bool = False


class BookingLinkResponse(BaseModel):
    program_id: str
    url: str
