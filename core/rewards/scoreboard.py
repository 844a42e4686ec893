"""
Module 03 - Scoreboard & Allocation
Accumulates praise events per address and splits a fixed reward pool.

Owner: Rewards Engineer
Module ID: M03

Allocation Rules:
1. Entries iterate in first-seen order of their address
2. Every entry but the last gets max(1, score * pool // total_score)
3. The last entry gets whatever the pool has left, so the claims sum to
   exactly the pool; its payout is therefore off-proportion by a few units
4. A remainder below 1 means the pool cannot honor the one-token minimum
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Iterator, Optional

from core.config.runtime import RewardsConfig
from core.crypto.address import canonical_address, normalize_address
from core.merkle.leaf import check_amount
from core.schemas.errors import InsufficientRewardPoolException
from core.schemas.rewards import (
    Claim,
    LabelEvent,
    PraiseEvent,
    PraiseInput,
    parse_event,
)


logger = logging.getLogger(__name__)


Clock = Callable[[], datetime]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class ScoreEntry:
    """Accumulated state for one address."""
    score: int = 0
    events: list[PraiseEvent] = field(default_factory=list)


class Scoreboard:
    """
    Mapping of address to ScoreEntry.

    Not thread-safe on its own; PraiseService serializes access.

    Example:
        >>> board = Scoreboard(RewardsConfig(default_reward_pool=100))
        >>> _ = board.collect({"address": a, "amount": 30})
        >>> _ = board.collect({"address": b, "amount": 70})
        >>> [c.amount for c in board.compute_claims()]
        [30, 70]
    """

    def __init__(
        self,
        config: RewardsConfig,
        *,
        clock: Optional[Clock] = None,
    ) -> None:
        self.config = config
        self._clock = clock or _utc_now
        self._entries: dict[str, ScoreEntry] = {}
        # Validate the fallback claimant up front
        normalize_address(config.default_address)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, address: object) -> bool:
        return address in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    @property
    def total_score(self) -> int:
        return sum(entry.score for entry in self._entries.values())

    def get(self, address: str) -> Optional[ScoreEntry]:
        return self._entries.get(address)

    def entries(self) -> list[tuple[str, ScoreEntry]]:
        """Snapshot of (address, entry) pairs in iteration order."""
        return list(self._entries.items())

    def normalize(self, raw: PraiseInput) -> PraiseEvent:
        """
        Resolve a raw event to its canonical form without recording it.

        Raises:
            InvalidAddressException: If the address cannot be decoded
            AmountOutOfRangeException: If the amount is negative or above u64
        """
        event = parse_event(raw)

        if isinstance(event, LabelEvent):
            address = self.config.default_address
            amount = self.config.event_amount
            metadata = {"event": event.label}
        else:
            address = event.address or self.config.default_address
            amount = event.amount if event.amount else self.config.event_amount
            metadata = dict(event.metadata)

        check_amount(amount)
        address = canonical_address(address)

        return PraiseEvent(
            address=address,
            amount=amount,
            metadata=metadata,
            timestamp=self._clock(),
        )

    def collect(self, raw: PraiseInput) -> PraiseEvent:
        """
        Record one event and credit its amount to the address.

        Args:
            raw: Bare label, dict record, LabelEvent or StructuredEvent

        Returns:
            The normalized, timestamped event
        """
        event = self.normalize(raw)
        entry = self._entries.get(event.address)
        if entry is None:
            entry = ScoreEntry()
            self._entries[event.address] = entry
            logger.debug(f"New scoreboard entry for {event.address}")
        entry.events.append(event)
        entry.score += event.amount
        return event

    def compute_claims(self, reward_pool: Optional[int] = None) -> list[Claim]:
        """
        Split the reward pool across entries in iteration order.

        Args:
            reward_pool: Pool to split; config.default_reward_pool when None

        Returns:
            One Claim per entry with a nonzero score, summing to the pool

        Raises:
            InsufficientRewardPoolException: If the pool cannot give every
                claimant at least one token
        """
        pool = self.config.default_reward_pool if reward_pool is None else reward_pool
        scored = [(address, entry.score) for address, entry in self._entries.items() if entry.score > 0]
        if not scored:
            return []

        check_amount(pool)
        total_score = sum(score for _, score in scored)

        claims: list[Claim] = []
        allocated = 0
        for address, score in scored[:-1]:
            share = max(1, score * pool // total_score)
            claims.append(Claim(address=address, amount=share))
            allocated += share

        remainder = pool - allocated
        if remainder < 1:
            raise InsufficientRewardPoolException(
                f"Reward pool {pool} cannot cover the one-token minimum "
                f"for {len(scored)} claimants",
                reward_pool=pool,
                claimants=len(scored),
            )
        last_address, _ = scored[-1]
        claims.append(Claim(address=last_address, amount=remainder))
        return claims


__all__ = [
    "ScoreEntry",
    "Scoreboard",
]
