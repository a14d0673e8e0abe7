"""
support_desk.py: tiered support-ticket routing on top of HandlerChain.

Each support tier owns exactly one difficulty level. A ticket is passed from
the lowest tier upward until a tier of matching level picks it up. Tickets
above every tier stay unhandled; what to do about that is decided by the
caller (`resolve_ticket` logs and raises).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence, Tuple

from handler_chain.dispatch import ChainError, FunctionHandler, HandlerChain

__all__ = [
    "Ticket",
    "Resolution",
    "SupportTier",
    "DEFAULT_TIERS",
    "UnresolvedTicketError",
    "build_support_chain",
    "resolve_ticket",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Ticket:
    """
    Immutable support request.

    :param tier: Difficulty level of the issue (1 = easiest).
    :param description: Short description of the problem.
    """
    tier: int
    description: str


@dataclass(frozen=True, slots=True)
class Resolution:
    """
    :param tier_name: Name of the tier that resolved the ticket.
    :param description: Description of the resolved ticket.
    """
    tier_name: str
    description: str


@dataclass(frozen=True, slots=True)
class SupportTier:
    """
    Configuration for one support tier.

    :param name: Tier name, also used as the handler name.
    :param level: The single ticket tier this support level resolves.
    """
    name: str
    level: int


DEFAULT_TIERS: Tuple[SupportTier, ...] = (
    SupportTier("Basic", 1),
    SupportTier("Intermediate", 2),
    SupportTier("Advanced", 3),
)


class UnresolvedTicketError(ChainError):
    """
    Raised by `resolve_ticket` when no tier can take the ticket.

    :param ticket: The ticket that was not resolved.
    """

    def __init__(self, ticket: Ticket) -> None:
        super().__init__(f"Ticket could not be resolved: {ticket.description} (tier {ticket.tier})")
        self.ticket = ticket


def _tier_handler(tier: SupportTier) -> FunctionHandler:
    def resolve(ticket: Ticket) -> Resolution:
        logger.info("%s support resolved ticket: %s", tier.name, ticket.description)
        return Resolution(tier.name, ticket.description)

    return FunctionHandler(tier.name, lambda ticket: ticket.tier == tier.level, resolve)


def build_support_chain(tiers: Sequence[SupportTier] = DEFAULT_TIERS) -> HandlerChain:
    """
    Builds the escalation chain, one handler per tier, in the given order.

    :param tiers: Tier configuration, lowest first.
    :return: The support chain.
    """
    return HandlerChain((_tier_handler(t) for t in tiers), name="support")


def resolve_ticket(chain: HandlerChain, ticket: Ticket) -> Resolution:
    """
    Dispatches a ticket and treats "nobody could take it" as an error.

    :param chain: Chain from `build_support_chain`.
    :param ticket: Ticket to route.
    :return: Resolution from the tier that took the ticket.
    :raises UnresolvedTicketError: If the ticket was not handled.
    """
    outcome = chain.dispatch(ticket)
    if not outcome.handled:
        logger.warning("Ticket could not be resolved: %s (tier %d)", ticket.description, ticket.tier)
        raise UnresolvedTicketError(ticket)
    return outcome.result
