"""
Data models for the Award Opportunity Engine.
All models are dataclasses for simplicity and type safety.
Reference data is frozen; derived records are rebuilt on every evaluation.
"""

from dataclasses import dataclass, field
from typing import Optional


AIRLINE = "airline"
CREDIT_CARD = "credit_card"

SOURCE_DIRECT = "direct"
SOURCE_TRANSFER = "transfer"

WILDCARD_REGION = "Various"


@dataclass(frozen=True)
class LoyaltyProgram:
    """
    A loyalty currency points can be held in or redeemed through.

    Fields:
    - id: unique key (e.g. 'chase-ur', 'aeroplan')
    - name: display name
    - type: 'airline' | 'credit_card'
    - base_value_cpp: reference valuation in cents per point
    - transfer_partners: ordered program ids reachable by a 1:1 transfer
    - alliance: 'oneworld' | 'skyteam' | 'star_alliance' | None
    - award_booking_url: landing page for award bookings, if any
    """
    id: str
    name: str
    type: str  # 'airline' | 'credit_card'
    base_value_cpp: float
    transfer_partners: tuple[str, ...] = ()
    alliance: Optional[str] = None
    award_booking_url: Optional[str] = None


@dataclass(frozen=True)
class PointBalance:
    """
    A user's balance in one program.

    Fields:
    - program_id: foreign key into the loyalty program table
    - balance: non-negative integer point count
    - last_updated: ISO-8601 timestamp string
    """
    program_id: str
    balance: int
    last_updated: str = ""


@dataclass(frozen=True)
class SweetSpot:
    """
    A curated, fixed-cost award redemption.

    value_cpp is derived from the cash price and the points cost, rounded
    for display; exact_cpp is the unrounded ratio used for ranking.
    """
    id: str
    title: str
    program_id: str
    origin_region: str
    destination_region: str
    cabin_class: str  # 'economy' | 'premium_economy' | 'business' | 'first'
    points_required: int
    typical_cash_price: float
    description: str = ""
    booking_tips: Optional[str] = None
    value_cpp: float = field(init=False)

    def __post_init__(self):
        object.__setattr__(self, "value_cpp", round(self.exact_cpp, 2))

    @property
    def exact_cpp(self) -> float:
        if self.points_required <= 0:
            return 0.0
        return self.typical_cash_price / self.points_required * 100


@dataclass(frozen=True)
class DestinationRegion:
    id: str
    name: str
    countries: tuple[str, ...]
    airports: tuple[str, ...]


@dataclass(frozen=True)
class HubAirport:
    code: str
    city: str
    area: str  # 'Northeast' | 'West Coast' | ...


@dataclass(frozen=True)
class TransferSource:
    """The credit-card balance an accessible program is reached through."""
    program_id: str
    program_name: str
    balance: int


@dataclass
class AccessibleProgram:
    """
    A program the user can redeem through, directly or via one transfer hop.

    Fields:
    - program_id / program: the redeemable program
    - balance: best balance reachable in this program
    - source: 'direct' | 'transfer'
    - transfer_from: the card the points come from when source is 'transfer'
    """
    program_id: str
    program: LoyaltyProgram
    balance: int
    source: str  # 'direct' | 'transfer'
    transfer_from: Optional[TransferSource] = None


@dataclass
class AwardOpportunity:
    """
    A sweet spot joined with the accessible program that can book it.

    Invariants: 0 <= percentage_owned <= 100; can_afford implies
    points_shortfall == 0.
    """
    id: str
    sweet_spot: SweetSpot
    program: LoyaltyProgram
    user_balance: int
    points_required: int
    can_afford: bool
    points_shortfall: int
    percentage_owned: int
    estimated_value: float
    transfer_source: Optional[TransferSource] = None


@dataclass
class PositioningOption:
    """
    A cheap repositioning flight to a better departure hub for an opportunity.

    total_value = award_opportunity.estimated_value - estimated_positioning_cost
    """
    id: str
    alternate_origin: str
    alternate_origin_city: str
    award_opportunity: AwardOpportunity
    estimated_positioning_cost: float
    total_value: float
    reasoning: str = ""


@dataclass
class OpportunitySummary:
    total: int
    affordable: int
    almost_affordable: int
    total_potential_value: float
    best_value: Optional[AwardOpportunity] = None
    closest_to_affording: Optional[AwardOpportunity] = None


@dataclass
class DestinationOption:
    value: str
    label: str
    type: str  # 'region' | 'country'


@dataclass
class ExploreResult:
    """
    The complete explore output for one balance snapshot.

    Fields:
    - opportunities: sorted AwardOpportunity list
    - positioning_options: at most 4 PositioningOption objects
    - summary: OpportunitySummary over the opportunities
    - destination / home_airport: the normalised inputs that produced it
    """
    opportunities: list[AwardOpportunity]
    positioning_options: list[PositioningOption]
    summary: OpportunitySummary
    destination: str = ""
    home_airport: str = ""
