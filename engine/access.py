"""
Accessible-program resolution from point balances.
Deterministic and unit-testable.
"""

import logging
from typing import List, Optional

from engine.catalog import DEFAULT_CONFIG, Catalog, load_default_catalog
from engine.models import (
    AIRLINE,
    CREDIT_CARD,
    SOURCE_DIRECT,
    SOURCE_TRANSFER,
    AccessibleProgram,
    PointBalance,
    TransferSource,
)

logger = logging.getLogger(__name__)


def resolve_accessible_programs(
    balances: List[PointBalance],
    catalog: Optional[Catalog] = None,
    config: dict = None,
) -> List[AccessibleProgram]:
    """
    Compute every program the user can redeem through.

    Rules:
    - Airline balances give direct access (first balance per program wins).
    - Credit-card balances reach each of the card's transfer partners.
    - When several cards reach the same partner, the largest single card
      balance is kept (first seen wins a tie). Balances are never summed.
    - Direct entries are resolved before transfer entries; a strictly larger
      card balance replaces a direct entry unless
      config["transfer_overrides_direct"] is False.
    - Unknown program ids are skipped.

    Args:
        balances: List of PointBalance objects
        catalog: Reference catalog (default catalog if not provided)
        config: Optional config dict (uses defaults if not provided)

    Returns:
        List of AccessibleProgram in resolution order

    Example:
        >>> progs = resolve_accessible_programs([PointBalance("chase-ur", 80000)])
        >>> [p.program_id for p in progs][:3]
        ['united-mileageplus', 'southwest-rr', 'jetblue-trueblue']
    """
    if catalog is None:
        catalog = load_default_catalog()
    if config is None:
        config = DEFAULT_CONFIG
    transfer_overrides_direct = config.get("transfer_overrides_direct", True)

    accessible: List[AccessibleProgram] = []
    index_by_program: dict[str, int] = {}

    # Pass 1: direct airline balances
    for balance in balances:
        program = catalog.get_program(balance.program_id)
        if program is None:
            logger.debug("Skipping balance for unknown program %s", balance.program_id)
            continue
        if program.type != AIRLINE or program.id in index_by_program:
            continue
        index_by_program[program.id] = len(accessible)
        accessible.append(
            AccessibleProgram(
                program_id=program.id,
                program=program,
                balance=balance.balance,
                source=SOURCE_DIRECT,
            )
        )

    # Pass 2: one-hop transfers from credit cards
    for balance in balances:
        card = catalog.get_program(balance.program_id)
        if card is None or card.type != CREDIT_CARD:
            continue

        for partner in catalog.transfer_partners(card.id):
            candidate = AccessibleProgram(
                program_id=partner.id,
                program=partner,
                balance=balance.balance,
                source=SOURCE_TRANSFER,
                transfer_from=TransferSource(
                    program_id=card.id,
                    program_name=card.name,
                    balance=balance.balance,
                ),
            )

            existing_index = index_by_program.get(partner.id)
            if existing_index is None:
                index_by_program[partner.id] = len(accessible)
                accessible.append(candidate)
                continue

            existing = accessible[existing_index]
            if existing.source == SOURCE_DIRECT and not transfer_overrides_direct:
                continue
            if existing.balance < balance.balance:
                accessible[existing_index] = candidate

    return accessible
