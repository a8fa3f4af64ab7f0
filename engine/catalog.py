"""
Reference catalog for the award engine.

Loyalty programs, sweet-spot redemptions, destination regions and the hub
positioning tables are loaded once into an immutable Catalog and passed to
the engine functions explicitly. Tests build their own Catalog fixtures.
"""

import logging
from dataclasses import dataclass
from functools import lru_cache
from types import MappingProxyType
from typing import Iterable, Mapping, Optional

from engine.models import (
    AIRLINE,
    CREDIT_CARD,
    DestinationRegion,
    HubAirport,
    LoyaltyProgram,
    SweetSpot,
)

logger = logging.getLogger(__name__)


# Default configuration values
DEFAULT_CONFIG = {
    # Matcher / summary
    "almost_affordable_percent": 75,

    # Positioning recommender
    "positioning_top_opportunities": 3,
    "positioning_hubs_per_opportunity": 2,
    "positioning_max_options": 4,
    "default_positioning_cost": 250,

    # Resolver: a strictly larger card balance may replace a direct balance
    "transfer_overrides_direct": True,
}

DEFAULT_BEST_HUBS = ("JFK", "LAX", "ORD")


@dataclass(frozen=True)
class Catalog:
    """
    Immutable reference tables.

    Fields:
    - programs: program id -> LoyaltyProgram (insertion ordered)
    - sweet_spots: curated redemptions in tie-break order
    - regions: destination regions in match order
    - hubs: hub code -> HubAirport
    - positioning_costs: origin -> destination -> USD estimate
    - best_hubs: region id -> ordered hub codes
    - version: identifies the table set (part of cache keys)
    """
    programs: Mapping[str, LoyaltyProgram]
    sweet_spots: tuple[SweetSpot, ...]
    regions: tuple[DestinationRegion, ...]
    hubs: Mapping[str, HubAirport]
    positioning_costs: Mapping[str, Mapping[str, float]]
    best_hubs: Mapping[str, tuple[str, ...]]
    version: str = "custom"
    default_positioning_cost: float = 250

    @classmethod
    def build(
        cls,
        programs: Iterable[LoyaltyProgram],
        sweet_spots: Iterable[SweetSpot],
        regions: Iterable[DestinationRegion] = (),
        hubs: Iterable[HubAirport] = (),
        positioning_costs: Optional[dict] = None,
        best_hubs: Optional[dict] = None,
        version: str = "custom",
        default_positioning_cost: float = 250,
    ) -> "Catalog":
        """Freeze plain tables into a Catalog."""
        costs = {
            origin: MappingProxyType(dict(row))
            for origin, row in (positioning_costs or {}).items()
        }
        return cls(
            programs=MappingProxyType({p.id: p for p in programs}),
            sweet_spots=tuple(sweet_spots),
            regions=tuple(regions),
            hubs=MappingProxyType({h.code: h for h in hubs}),
            positioning_costs=MappingProxyType(costs),
            best_hubs=MappingProxyType(
                {region_id: tuple(codes) for region_id, codes in (best_hubs or {}).items()}
            ),
            version=version,
            default_positioning_cost=default_positioning_cost,
        )

    # -- programs ---------------------------------------------------------

    def get_program(self, program_id: str) -> Optional[LoyaltyProgram]:
        return self.programs.get(program_id)

    def airline_programs(self) -> list[LoyaltyProgram]:
        return [p for p in self.programs.values() if p.type == AIRLINE]

    def credit_card_programs(self) -> list[LoyaltyProgram]:
        return [p for p in self.programs.values() if p.type == CREDIT_CARD]

    def transfer_partners(self, program_id: str) -> list[LoyaltyProgram]:
        """Partner programs of program_id; ids missing from the table are dropped."""
        program = self.get_program(program_id)
        if program is None:
            return []
        partners = []
        for partner_id in program.transfer_partners:
            partner = self.get_program(partner_id)
            if partner is None:
                logger.debug("Transfer partner %s of %s not in catalog", partner_id, program_id)
                continue
            partners.append(partner)
        return partners

    # -- regions ----------------------------------------------------------

    def region_by_id(self, region_id: str) -> Optional[DestinationRegion]:
        return next((r for r in self.regions if r.id == region_id), None)

    def region_by_name(self, name: str) -> Optional[DestinationRegion]:
        lowered = name.lower()
        return next((r for r in self.regions if r.name.lower() == lowered), None)

    def search_destinations(self, query: str) -> list[tuple[str, str, DestinationRegion]]:
        """
        Case-insensitive substring search over region names and countries.

        Returns:
            List of (type, value, region) where type is 'region' or 'country',
            in region order with the region match before its countries.
        """
        lowered = query.strip().lower()
        if not lowered:
            return []
        results = []
        for region in self.regions:
            if lowered in region.name.lower():
                results.append(("region", region.name, region))
            for country in region.countries:
                if lowered in country.lower():
                    results.append(("country", country, region))
        return results

    # -- hubs -------------------------------------------------------------

    def hub(self, code: str) -> Optional[HubAirport]:
        return self.hubs.get(code)

    def best_hubs_for_region(self, region_id: str) -> tuple[str, ...]:
        return self.best_hubs.get(region_id, DEFAULT_BEST_HUBS)

    def positioning_cost(self, origin: str, destination: str, default: Optional[float] = None) -> float:
        """
        Estimated one-way positioning fare in USD.

        Costs are symmetric: a missing origin->destination entry falls back to
        destination->origin, then to default (or the catalog's flat estimate).
        """
        direct = self.positioning_costs.get(origin, {}).get(destination)
        if direct:
            return direct
        reverse = self.positioning_costs.get(destination, {}).get(origin)
        if reverse:
            return reverse
        return self.default_positioning_cost if default is None else default


# =============================================================================
# Default tables
# =============================================================================

_ALL_CARDS = ("chase-ur", "amex-mr", "citi-typ", "capital-one", "bilt")

LOYALTY_PROGRAMS = [
    # Airlines
    LoyaltyProgram("united-mileageplus", "United MileagePlus", AIRLINE, 1.2,
                   ("chase-ur", "bilt"), "star_alliance",
                   "https://www.united.com/en/us/book-flight/mileageplus-awards"),
    LoyaltyProgram("american-aadvantage", "American AAdvantage", AIRLINE, 1.4,
                   ("citi-typ", "bilt"), "oneworld",
                   "https://www.aa.com/booking/find-flights"),
    LoyaltyProgram("delta-skymiles", "Delta SkyMiles", AIRLINE, 1.1,
                   ("amex-mr",), "skyteam",
                   "https://www.delta.com/flight-search/book-a-flight"),
    LoyaltyProgram("southwest-rr", "Southwest Rapid Rewards", AIRLINE, 1.4,
                   ("chase-ur",), None,
                   "https://www.southwest.com/air/booking/"),
    LoyaltyProgram("alaska-mileageplan", "Alaska Mileage Plan", AIRLINE, 1.8,
                   ("bilt",), "oneworld",
                   "https://www.alaskaair.com/planbook"),
    LoyaltyProgram("jetblue-trueblue", "JetBlue TrueBlue", AIRLINE, 1.3,
                   ("chase-ur", "citi-typ", "bilt"), None,
                   "https://www.jetblue.com/booking/flights"),
    LoyaltyProgram("aeroplan", "Air Canada Aeroplan", AIRLINE, 1.5,
                   ("chase-ur", "amex-mr", "capital-one", "bilt"), "star_alliance",
                   "https://www.aircanada.com/aeroplan/redeem/availability/outbound"),
    LoyaltyProgram("avios", "British Airways Avios", AIRLINE, 1.5,
                   ("chase-ur", "amex-mr", "capital-one", "bilt"), "oneworld",
                   "https://www.britishairways.com/travel/redeem/execclub/_gf/en_us"),
    LoyaltyProgram("flying-blue", "Air France/KLM Flying Blue", AIRLINE, 1.4,
                   _ALL_CARDS, "skyteam",
                   "https://www.flyingblue.com/en/spend/flights/reward-tickets"),
    LoyaltyProgram("krisflyer", "Singapore KrisFlyer", AIRLINE, 1.6,
                   _ALL_CARDS, "star_alliance",
                   "https://www.singaporeair.com/en_UK/ppsclub-krisflyer/use-miles/redeem-flights/"),
    LoyaltyProgram("virginatlantic", "Virgin Atlantic Flying Club", AIRLINE, 1.5,
                   _ALL_CARDS, None,
                   "https://www.virginatlantic.com/flight-search/reward-flights"),
    LoyaltyProgram("emirates-skywards", "Emirates Skywards", AIRLINE, 1.0,
                   ("amex-mr", "capital-one", "citi-typ", "bilt"), None,
                   "https://www.emirates.com/us/english/book/"),
    LoyaltyProgram("lifemiles", "Avianca LifeMiles", AIRLINE, 1.4,
                   ("amex-mr", "capital-one", "citi-typ", "bilt"), "star_alliance",
                   "https://www.lifemiles.com/flight/search"),
    LoyaltyProgram("smiles", "GOL Smiles", AIRLINE, 1.2,
                   ("amex-mr",), None,
                   "https://www.smiles.com.br/emissao-com-milhas"),
    LoyaltyProgram("velocity", "Velocity Frequent Flyer", AIRLINE, 1.3,
                   ("amex-mr",), None,
                   "https://experience.velocity.virginaustralia.com/member/booking/search"),
    LoyaltyProgram("eurobonus", "SAS EuroBonus", AIRLINE, 1.2,
                   ("amex-mr", "chase-ur"), "star_alliance",
                   "https://www.sas.se/eurobonus/use-points/travel/"),
    LoyaltyProgram("qantas", "Qantas Frequent Flyer", AIRLINE, 1.4,
                   (), "oneworld",
                   "https://www.qantas.com/au/en/book-a-trip/flights/classic-flight-rewards.html"),
    LoyaltyProgram("aerlingus", "Aer Lingus AerClub", AIRLINE, 1.5,
                   ("chase-ur", "amex-mr"), None,
                   "https://www.aerlingus.com/booking/avios-booking/"),
    LoyaltyProgram("etihad", "Etihad Guest", AIRLINE, 1.2,
                   ("amex-mr", "citi-typ"), None,
                   "https://www.etihad.com/en-us/guest/redeem-miles"),

    # Credit card programs
    LoyaltyProgram("chase-ur", "Chase Ultimate Rewards", CREDIT_CARD, 1.5,
                   ("united-mileageplus", "southwest-rr", "jetblue-trueblue",
                    "aeroplan", "avios", "flying-blue", "krisflyer", "virginatlantic")),
    LoyaltyProgram("amex-mr", "Amex Membership Rewards", CREDIT_CARD, 1.6,
                   ("delta-skymiles", "aeroplan", "avios", "flying-blue",
                    "krisflyer", "virginatlantic", "emirates-skywards")),
    LoyaltyProgram("citi-typ", "Citi ThankYou Points", CREDIT_CARD, 1.4,
                   ("american-aadvantage", "jetblue-trueblue", "flying-blue",
                    "krisflyer", "virginatlantic", "emirates-skywards")),
    LoyaltyProgram("capital-one", "Capital One Miles", CREDIT_CARD, 1.4,
                   ("aeroplan", "avios", "flying-blue", "krisflyer",
                    "virginatlantic", "emirates-skywards")),
    LoyaltyProgram("bilt", "Bilt Rewards", CREDIT_CARD, 1.6,
                   ("united-mileageplus", "american-aadvantage", "alaska-mileageplan",
                    "jetblue-trueblue", "aeroplan", "avios", "flying-blue",
                    "krisflyer", "virginatlantic", "emirates-skywards")),
]

SWEET_SPOTS = [
    SweetSpot("ana-first-virgin", "ANA First Class to Japan", "virginatlantic",
              "North America", "Asia", "first", 72500, 18000,
              description="Round-trip ANA First between the US and Tokyo booked with Virgin Atlantic points.",
              booking_tips="Search ANA availability first, then call Virgin Atlantic to book."),
    SweetSpot("ana-business-virgin", "ANA Business Class to Japan", "virginatlantic",
              "North America", "Asia", "business", 52500, 6500,
              description="One-way ANA business class from the West Coast to Tokyo.",
              booking_tips="West Coast departures price lower than East Coast."),
    SweetSpot("cathay-first-alaska", "Cathay Pacific First via Alaska", "alaska-mileageplan",
              "North America", "Asia", "first", 70000, 15000,
              description="One-way Cathay Pacific First Class to Hong Kong and beyond.",
              booking_tips="A free stopover is allowed on one-way awards."),
    SweetSpot("jal-business-alaska", "Japan Airlines Business via Alaska", "alaska-mileageplan",
              "North America", "Asia", "business", 60000, 7000,
              description="One-way JAL business class to Tokyo on Alaska's partner chart."),
    SweetSpot("singapore-suites", "Singapore Suites", "krisflyer",
              "North America", "Asia", "first", 127000, 16000,
              description="Singapore Airlines Suites from New York to Singapore via Frankfurt.",
              booking_tips="Saver space opens close to departure."),
    SweetSpot("aeroplan-lufthansa-business", "Lufthansa Business via Aeroplan", "aeroplan",
              "North America", "Europe", "business", 70000, 5500,
              description="Star Alliance business class to Europe with no fuel surcharges.",
              booking_tips="Aeroplan allows a stopover for 5,000 points."),
    SweetSpot("iberia-business-avios", "Iberia Business to Madrid", "avios",
              "North America", "Europe", "business", 34000, 3500,
              description="Off-peak Iberia business from the East Coast to Madrid booked with Avios.",
              booking_tips="Transfer to Iberia Plus via British Airways to book off-peak dates."),
    SweetSpot("virgin-upper-class", "Virgin Upper Class to London", "virginatlantic",
              "North America", "Europe", "business", 47500, 4000,
              description="Virgin Atlantic Upper Class to London Heathrow.",
              booking_tips="Surcharges apply; saver dates keep them lower."),
    SweetSpot("flying-blue-promo", "Flying Blue Promo Rewards", "flying-blue",
              "North America", "Europe", "economy", 25000, 900,
              description="Monthly Promo Rewards cut Europe award prices by up to 50%."),
    SweetSpot("delta-one-europe", "Delta One Flash Sale", "delta-skymiles",
              "North America", "Europe", "business", 50000, 4500,
              description="Delta One suites to Europe during SkyMiles flash sales."),
    SweetSpot("lifemiles-lufthansa-first", "Lufthansa First via LifeMiles", "lifemiles",
              "North America", "Europe", "first", 87000, 12000,
              description="Lufthansa First Class booked with LifeMiles, no surcharges."),
    SweetSpot("aerlingus-offpeak", "Aer Lingus Off-Peak Business", "aerlingus",
              "North America", "Europe", "business", 50000, 3500,
              description="Off-peak Aer Lingus business class from Boston or New York to Dublin."),
    SweetSpot("qsuites-aadvantage", "Qatar Qsuites via AAdvantage", "american-aadvantage",
              "North America", "Middle East", "business", 70000, 7000,
              description="Qatar Airways Qsuites to Doha and onward."),
    SweetSpot("emirates-first", "Emirates First Class", "emirates-skywards",
              "North America", "Middle East", "first", 136250, 20000,
              description="Emirates First Class to Dubai with onboard shower and lounge."),
    SweetSpot("etihad-business", "Etihad Business to Abu Dhabi", "etihad",
              "North America", "Middle East", "business", 88000, 5500,
              description="Etihad business studio from the US to Abu Dhabi."),
    SweetSpot("united-polaris-oceania", "United Polaris to Australia", "united-mileageplus",
              "North America", "Oceania", "business", 88000, 8000,
              description="United Polaris business class to Sydney or Melbourne."),
    SweetSpot("velocity-singapore-business", "Singapore Business via Velocity", "velocity",
              "North America", "Oceania", "business", 95000, 7500,
              description="Singapore Airlines business class to Australia booked with Velocity."),
    SweetSpot("qantas-classic-domestic", "Qantas Classic Reward in Australia", "qantas",
              "Oceania", "Oceania", "economy", 8000, 250,
              description="Short-haul Classic Flight Rewards within Australia."),
    SweetSpot("lifemiles-south-america", "Star Alliance Business to South America", "lifemiles",
              "North America", "South America", "business", 63000, 4200,
              description="Avianca or Copa business class to South America via LifeMiles."),
    SweetSpot("smiles-south-america", "GOL Smiles Economy to Brazil", "smiles",
              "North America", "South America", "economy", 20000, 850,
              description="Economy awards to Brazil during Smiles promotions."),
    SweetSpot("southwest-caribbean", "Southwest to the Caribbean", "southwest-rr",
              "North America", "Central America & Caribbean", "economy", 12000, 350,
              description="Wanna Get Away awards to Cancun, Aruba and the Bahamas."),
    SweetSpot("jetblue-caribbean", "JetBlue to the Caribbean", "jetblue-trueblue",
              "North America", "Central America & Caribbean", "economy", 10000, 300,
              description="TrueBlue fixed-value awards to Caribbean islands."),
    SweetSpot("aeroplan-africa", "Star Alliance Business to Africa", "aeroplan",
              "North America", "Africa", "business", 75000, 6000,
              description="Ethiopian or United business class to Africa via Aeroplan."),
    SweetSpot("aeroplan-canada-shorthaul", "Aeroplan Short-Haul in Canada", "aeroplan",
              "North America", "Canada", "economy", 6000, 350,
              description="Short flights within Canada and to the northern US."),
    SweetSpot("united-domestic-saver", "United Domestic Saver", "united-mileageplus",
              "North America", "North America", "economy", 12500, 300,
              description="Saver awards on United domestic routes."),
    SweetSpot("avios-short-haul", "Avios Short-Haul Partner Awards", "avios",
              "Various", "Various", "economy", 7500, 150,
              description="Distance-based Avios awards on short partner flights worldwide.",
              booking_tips="Best on nonstop routes under 650 miles."),
]

DESTINATION_REGIONS = [
    DestinationRegion("asia", "Asia",
                      ("Japan", "South Korea", "China", "Thailand", "Singapore", "Hong Kong",
                       "Taiwan", "India", "Vietnam", "Indonesia", "Malaysia", "Philippines"),
                      ("NRT", "HND", "ICN", "PVG", "PEK", "BKK", "SIN", "HKG", "TPE", "DEL",
                       "BOM", "SGN", "CGK", "KUL", "MNL")),
    DestinationRegion("europe", "Europe",
                      ("United Kingdom", "France", "Germany", "Italy", "Spain", "Netherlands",
                       "Switzerland", "Portugal", "Greece", "Ireland", "Austria", "Belgium"),
                      ("LHR", "LGW", "CDG", "FRA", "MUC", "FCO", "MXP", "MAD", "BCN", "AMS",
                       "ZRH", "LIS", "ATH", "DUB", "VIE", "BRU")),
    DestinationRegion("middle-east", "Middle East",
                      ("UAE", "Qatar", "Israel", "Jordan", "Saudi Arabia", "Oman", "Bahrain", "Kuwait"),
                      ("DXB", "AUH", "DOH", "TLV", "AMM", "RUH", "JED", "MCT", "BAH", "KWI")),
    DestinationRegion("oceania", "Oceania",
                      ("Australia", "New Zealand", "Fiji", "French Polynesia"),
                      ("SYD", "MEL", "BNE", "PER", "AKL", "CHC", "NAN", "PPT")),
    DestinationRegion("south-america", "South America",
                      ("Brazil", "Argentina", "Chile", "Peru", "Colombia", "Ecuador"),
                      ("GRU", "GIG", "EZE", "SCL", "LIM", "BOG", "UIO")),
    DestinationRegion("central-america-caribbean", "Central America & Caribbean",
                      ("Mexico", "Costa Rica", "Panama", "Jamaica", "Dominican Republic",
                       "Bahamas", "Cuba", "Puerto Rico"),
                      ("MEX", "CUN", "SJO", "PTY", "MBJ", "PUJ", "NAS", "HAV", "SJU")),
    DestinationRegion("africa", "Africa",
                      ("South Africa", "Morocco", "Egypt", "Kenya", "Tanzania", "Ethiopia"),
                      ("JNB", "CPT", "CMN", "CAI", "NBO", "DAR", "ADD")),
    DestinationRegion("canada", "Canada",
                      ("Canada",),
                      ("YYZ", "YVR", "YUL", "YYC", "YOW")),
    DestinationRegion("north-america", "North America",
                      ("United States", "Canada", "Mexico"),
                      ("JFK", "LAX", "ORD", "DFW", "DEN", "SFO", "SEA", "ATL", "BOS", "MIA",
                       "IAD", "IAH", "PHX", "LAS", "MSP", "DTW", "PHL", "CLT", "YYZ", "YVR",
                       "YUL", "MEX", "CUN")),
]

HUB_AIRPORTS = [
    HubAirport("JFK", "New York", "Northeast"),
    HubAirport("EWR", "Newark", "Northeast"),
    HubAirport("LAX", "Los Angeles", "West Coast"),
    HubAirport("SFO", "San Francisco", "West Coast"),
    HubAirport("ORD", "Chicago", "Midwest"),
    HubAirport("DFW", "Dallas", "South"),
    HubAirport("MIA", "Miami", "Southeast"),
    HubAirport("ATL", "Atlanta", "Southeast"),
    HubAirport("IAD", "Washington DC", "Northeast"),
    HubAirport("SEA", "Seattle", "West Coast"),
    HubAirport("BOS", "Boston", "Northeast"),
    HubAirport("IAH", "Houston", "South"),
]

# One-way economy estimates in USD
POSITIONING_COSTS = {
    "JFK": {"LAX": 300, "SFO": 350, "ORD": 200, "MIA": 200, "DFW": 250, "SEA": 350},
    "BOS": {"LAX": 350, "SFO": 350, "ORD": 200, "MIA": 200, "JFK": 100, "DFW": 250},
    "IAD": {"LAX": 300, "SFO": 350, "ORD": 180, "MIA": 180, "JFK": 150, "DFW": 220},
    "LAX": {"JFK": 300, "SFO": 100, "ORD": 250, "MIA": 300, "DFW": 200, "SEA": 150},
    "SFO": {"JFK": 350, "LAX": 100, "ORD": 280, "MIA": 350, "DFW": 250, "SEA": 150},
    "SEA": {"JFK": 350, "LAX": 150, "SFO": 150, "ORD": 280, "DFW": 280},
    "ORD": {"JFK": 200, "LAX": 250, "SFO": 280, "MIA": 200, "DFW": 180},
    "DFW": {"JFK": 250, "LAX": 200, "SFO": 250, "ORD": 180, "MIA": 200},
    "MIA": {"JFK": 200, "LAX": 300, "ORD": 200, "DFW": 200},
    "ATL": {"JFK": 200, "LAX": 280, "ORD": 180, "MIA": 150, "DFW": 180},
    "IAH": {"JFK": 280, "LAX": 220, "ORD": 200, "MIA": 200, "DFW": 150},
}

BEST_HUBS_BY_REGION = {
    "asia": ("LAX", "SFO", "SEA", "JFK"),
    "europe": ("JFK", "BOS", "IAD", "ORD"),
    "middle-east": ("JFK", "IAD", "ORD"),
    "oceania": ("LAX", "SFO", "DFW"),
    "south-america": ("MIA", "IAH", "DFW", "ATL"),
    "central-america-caribbean": ("MIA", "IAH", "DFW", "ATL"),
    "africa": ("JFK", "IAD", "ATL"),
    "canada": ("SEA", "ORD", "BOS", "JFK"),
    "north-america": ("ORD", "DFW", "ATL", "DEN"),
}


@lru_cache(maxsize=1)
def load_default_catalog() -> Catalog:
    """Build the default Catalog once per process."""
    catalog = Catalog.build(
        programs=LOYALTY_PROGRAMS,
        sweet_spots=SWEET_SPOTS,
        regions=DESTINATION_REGIONS,
        hubs=HUB_AIRPORTS,
        positioning_costs=POSITIONING_COSTS,
        best_hubs=BEST_HUBS_BY_REGION,
        version="default-1",
        default_positioning_cost=DEFAULT_CONFIG["default_positioning_cost"],
    )
    logger.debug(
        "Loaded catalog %s: %d programs, %d sweet spots, %d regions",
        catalog.version, len(catalog.programs), len(catalog.sweet_spots), len(catalog.regions),
    )
    return catalog
