"""
Module 03 - Praise Service
Orchestrates scoreboard -> claims -> Merkle tree -> root/proofs.

Owner: Rewards Engineer
Module ID: M03

Guarantees:
- collect, batch generation and proof lookup are serialized by one lock
- A new batch replaces the previous (batch, layers) pair in one step, so
  proof lookups never observe a half-built batch
- Proofs are only ever served for the current batch
- Subscribers are notified outside the lock; a failing subscriber never
  affects scoring
"""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Optional

from core.config.runtime import RewardsConfig, get_default_config
from core.crypto.address import canonical_address
from core.crypto.hashing import to_hex
from core.merkle.leaf import encode_leaf
from core.merkle.merkle_tree import Layer, build_layers, build_proof, get_root
from core.rewards.scoreboard import Scoreboard
from core.schemas.errors import BatchMissingException, ClaimNotFoundException
from core.schemas.rewards import ClaimProof, PraiseEvent, PraiseInput, RewardBatch


logger = logging.getLogger(__name__)


PraiseCallback = Callable[[PraiseEvent], None]


@dataclass(frozen=True)
class _PublishedBatch:
    """A batch together with the layers needed to answer proof requests."""
    batch: RewardBatch
    layers: list[Layer]
    index_by_address: dict[str, int]


def log_praise(event: PraiseEvent) -> None:
    """Default subscriber: log every received event."""
    logger.info(
        f"praise received: address={event.address} amount={event.amount} "
        f"metadata={event.metadata}"
    )


class PraiseService:
    """
    Batch service owning one scoreboard and the current reward batch.

    Usage:
        service = PraiseService(RewardsConfig(default_reward_pool=100))
        service.collect({"address": addr_a, "amount": 30})
        service.collect({"address": addr_b, "amount": 70})

        batch = service.generate_reward_batch()
        claim_proof = service.proof_for(addr_a)
    """

    def __init__(
        self,
        config: Optional[RewardsConfig] = None,
        *,
        on_praise: Optional[PraiseCallback] = None,
    ) -> None:
        """
        Initialize the service.

        Args:
            config: Reward defaults; the process default config when None
            on_praise: Optional subscriber for collected events
        """
        self.config = config or get_default_config().rewards
        self.scoreboard = Scoreboard(self.config)
        self._lock = threading.RLock()
        self._subscribers: list[PraiseCallback] = []
        self._current: Optional[_PublishedBatch] = None
        if on_praise is not None:
            self.subscribe(on_praise)

    # ------------------------------------------------------------------
    # Subscriptions
    # ------------------------------------------------------------------

    def subscribe(self, callback: PraiseCallback) -> None:
        """Register a callback for every collected event."""
        with self._lock:
            if callback not in self._subscribers:
                self._subscribers.append(callback)

    def unsubscribe(self, callback: PraiseCallback) -> None:
        """Remove a previously registered callback."""
        with self._lock:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

    def _notify(self, event: PraiseEvent) -> None:
        with self._lock:
            subscribers = list(self._subscribers)
        for callback in subscribers:
            try:
                callback(event)
            except Exception as e:
                logger.warning(f"Praise subscriber {callback!r} failed: {e}")

    # ------------------------------------------------------------------
    # Scoring
    # ------------------------------------------------------------------

    def collect(self, raw: PraiseInput) -> PraiseEvent:
        """
        Record a praise event.

        Args:
            raw: Bare label, dict record, LabelEvent or StructuredEvent

        Returns:
            The normalized event

        Raises:
            InvalidAddressException: If the address cannot be decoded
            AmountOutOfRangeException: If the amount is negative or above u64
        """
        with self._lock:
            event = self.scoreboard.collect(raw)
        self._notify(event)
        return event

    # ------------------------------------------------------------------
    # Batches
    # ------------------------------------------------------------------

    @property
    def current_batch(self) -> Optional[RewardBatch]:
        """The most recently generated batch, if any."""
        with self._lock:
            return self._current.batch if self._current else None

    @property
    def current_layers(self) -> Optional[list[Layer]]:
        """Layer stack of the current batch, if any."""
        with self._lock:
            return self._current.layers if self._current else None

    def generate_reward_batch(self, reward_pool: Optional[int] = None) -> RewardBatch:
        """
        Snapshot the scoreboard into a new batch and make it current.

        Args:
            reward_pool: Pool to split; config default when None

        Returns:
            RewardBatch whose total_tokens is the sum of its claim amounts

        Raises:
            InsufficientRewardPoolException: If the pool is too small
        """
        with self._lock:
            claims = self.scoreboard.compute_claims(reward_pool)
            leaves = [encode_leaf(claim.address, claim.amount) for claim in claims]
            layers = build_layers(leaves)

            batch = RewardBatch(
                merkle_root=to_hex(get_root(layers)),
                total_tokens=sum(claim.amount for claim in claims),
                snapshot_date=datetime.now(timezone.utc),
                claims=claims,
            )
            self._current = _PublishedBatch(
                batch=batch,
                layers=layers,
                index_by_address={claim.address: i for i, claim in enumerate(claims)},
            )

        logger.info(
            f"Generated reward batch: root={batch.merkle_root} "
            f"claims={len(batch.claims)} total_tokens={batch.total_tokens}"
        )
        return batch

    def proof_for(self, address: str) -> ClaimProof:
        """
        Return the amount and inclusion proof for an address.

        Raises:
            BatchMissingException: If no batch has been generated yet
            ClaimNotFoundException: If the address has no claim in the batch
            InvalidAddressException: If the address cannot be decoded
        """
        with self._lock:
            current = self._current
        if current is None:
            raise BatchMissingException()

        key = canonical_address(address)
        index = current.index_by_address.get(key)
        if index is None:
            raise ClaimNotFoundException(
                f"No claim for {address} in batch {current.batch.merkle_root}",
                address=address,
            )

        claim = current.batch.claims[index]
        return ClaimProof(
            address=claim.address,
            amount=claim.amount,
            proof=build_proof(current.layers, index),
        )


def start_praise_service(
    config: Optional[RewardsConfig] = None,
    *,
    silent: bool = False,
) -> PraiseService:
    """
    Create a praise service, logging every event unless silent.
    """
    return PraiseService(config, on_praise=None if silent else log_praise)


__all__ = [
    "PraiseCallback",
    "PraiseService",
    "log_praise",
    "start_praise_service",
]
