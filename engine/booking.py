"""
Award search deep links.
Builds a pre-filled award search URL on the booking program's own site.
"""

from datetime import date, timedelta
from typing import Callable, Dict, List, Optional

from engine.catalog import Catalog, load_default_catalog
from engine.models import AwardOpportunity

DEFAULT_DAYS_AHEAD = 30


def _avios(origin: str, destination: str, depart: date, cabin: str) -> str:
    cabin_code = {"economy": "M", "premium_economy": "W", "business": "C", "first": "F"}.get(cabin, "C")
    return (
        "https://www.britishairways.com/travel/redeem/execclub/_gf/en_us"
        f"?eId=111049&tab_selected=redeem&redemption_origin={origin}"
        f"&redemption_destination={destination}&redemption_departureDate={depart:%Y-%m-%d}"
        f"&CabinCode={cabin_code}&NumberOfAdults=1"
    )


def _virgin_atlantic(origin: str, destination: str, depart: date, cabin: str) -> str:
    return (
        "https://www.virginatlantic.com/flight-search/book-a-flight?bookingType=REDEEM"
        f"&origin={origin}&destination={destination}&departureDate={depart:%Y-%m-%d}&adults=1"
    )


def _alaska(origin: str, destination: str, depart: date, cabin: str) -> str:
    return (
        "https://www.alaskaair.com/search/results"
        f"?A=1&O={origin}&D={destination}&OD={depart:%Y-%m-%d}&RT=false&UL=true"
    )


def _american(origin: str, destination: str, depart: date, cabin: str) -> str:
    return (
        "https://www.aa.com/booking/find-flights?locale=en_US&pax=1&type=OneWay&searchType=Award"
        f"&origin={origin}&destination={destination}&departDate={depart:%Y-%m-%d}"
    )


def _united(origin: str, destination: str, depart: date, cabin: str) -> str:
    return (
        "https://www.united.com/en/us/fsr/choose-flights"
        f"?f={origin}&t={destination}&d={depart:%Y-%m-%d}&tt=1&at=1&sc=7&px=1&taxng=1&clm=7"
    )


def _aeroplan(origin: str, destination: str, depart: date, cabin: str) -> str:
    cabin_code = {"premium_economy": "premiumEconomy"}.get(cabin, cabin or "business")
    return (
        "https://www.aircanada.com/aeroplan/redeem/availability/outbound"
        f"?org0={origin}&dest0={destination}&departureDate0={depart:%Y-%m-%d}"
        f"&ADT=1&YTH=0&CHD=0&INF=0&INS=0&lang=en-CA&tripType=O&marketCode=INT&cabin={cabin_code}"
    )


def _krisflyer(origin: str, destination: str, depart: date, cabin: str) -> str:
    cabin_code = {"first": "J", "business": "C"}.get(cabin, "Y")
    return (
        "https://www.singaporeair.com/en_UK/ppsclub-krisflyer/redeem/flights/"
        f"?selectedDest={destination}&selectedOrg={origin}"
        f"&departureMonth={depart:%Y-%m}&cabinClass={cabin_code}"
    )


def _delta(origin: str, destination: str, depart: date, cabin: str) -> str:
    return (
        "https://www.delta.com/flight-search/book-a-flight?tripType=ONE_WAY&shopWithMiles=on"
        f"&fromCity={origin}&toCity={destination}&departureDate={depart:%Y-%m-%d}&paxCount=1"
    )


def _flying_blue(origin: str, destination: str, depart: date, cabin: str) -> str:
    cabin_code = {"premium_economy": "PREMIUM", "business": "BUSINESS", "first": "FIRST"}.get(cabin, "ECONOMY")
    return (
        "https://wwws.airfrance.us/search/offers?pax=1:0:0:0:0:0:0:0&bookingFlow=REWARD"
        f"&cabinClass={cabin_code}&connections={origin}:A-{destination}:A&date={depart:%Y%m%d}"
    )


URL_BUILDERS: Dict[str, Callable[[str, str, date, str], str]] = {
    "avios": _avios,
    "virginatlantic": _virgin_atlantic,
    "alaska-mileageplan": _alaska,
    "american-aadvantage": _american,
    "united-mileageplus": _united,
    "aeroplan": _aeroplan,
    "krisflyer": _krisflyer,
    "delta-skymiles": _delta,
    "flying-blue": _flying_blue,
}


def build_award_search_url(
    program_id: str,
    origin: str = "",
    destination: str = "",
    depart_date: Optional[date] = None,
    cabin: str = "business",
    catalog: Optional[Catalog] = None,
) -> Optional[str]:
    """
    Award search URL for a program.

    Programs without a search template fall back to their award booking page.
    Unknown programs return None.

    Example:
        >>> build_award_search_url("alaska-mileageplan", "SEA", "HND", date(2025, 3, 1))
        'https://www.alaskaair.com/search/results?A=1&O=SEA&D=HND&OD=2025-03-01&RT=false&UL=true'
    """
    if catalog is None:
        catalog = load_default_catalog()

    program = catalog.get_program(program_id)
    if program is None:
        return None

    builder = URL_BUILDERS.get(program_id)
    if builder is None:
        return program.award_booking_url

    depart = depart_date or (date.today() + timedelta(days=DEFAULT_DAYS_AHEAD))
    return builder(origin.strip().upper(), destination.strip().upper(), depart, cabin)


def booking_links_for_opportunity(
    opportunity: AwardOpportunity,
    origin: str = "",
    destination: str = "",
    depart_date: Optional[date] = None,
    catalog: Optional[Catalog] = None,
) -> List[dict]:
    """
    Links a user needs to act on an opportunity.

    The booking program's search page is the primary link; when the points
    come from a card transfer, a second entry names the transfer step.
    """
    links = []
    url = build_award_search_url(
        opportunity.program.id,
        origin,
        destination,
        depart_date,
        opportunity.sweet_spot.cabin_class,
        catalog,
    )
    if url:
        links.append({"label": f"Search {opportunity.program.name}", "url": url, "is_primary": True})

    if opportunity.transfer_source is not None:
        links.append({
            "label": (
                f"Transfer {opportunity.points_required:,} points from "
                f"{opportunity.transfer_source.program_name} to {opportunity.program.name}"
            ),
            "url": None,
            "is_primary": False,
        })
    return links
