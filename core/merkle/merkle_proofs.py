"""
Module 02 - Merkle Proofs Convenience Wrappers
Class-based interfaces over the layered tree functions.

Owner: Protocol/Crypto Engineer
Module ID: M02

This module provides:
- MerkleProof: Dataclass bundling a leaf, its index, its siblings and the root
- MerkleProver: Builds the layer stack once and serves proofs from it
- MerkleVerifier: Verifies proofs and raw claims
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from core.merkle.leaf import encode_leaf
from core.merkle.merkle_tree import (
    Layer,
    build_layers,
    build_proof,
    get_root,
    verify_claim,
    verify_proof,
)


@dataclass(frozen=True)
class MerkleProof:
    """
    A Merkle inclusion proof for a single leaf.

    Attributes:
        leaf: The leaf hash being proven
        index: The 0-based index of the leaf in layer 0
        siblings: Sibling hashes from bottom to top of tree
        root: The Merkle root this proof is against
    """
    leaf: bytes
    index: int
    siblings: list[bytes]
    root: bytes

    def __post_init__(self) -> None:
        if self.index < 0:
            raise ValueError(f"Leaf index must be non-negative, got {self.index}")


class MerkleProver:
    """
    Holds one layer stack and generates proofs against it.

    Example:
        >>> prover = MerkleProver.from_claims([("A...", 30), ("B...", 70)])
        >>> proof = prover.prove(0)
        >>> MerkleVerifier.verify(proof)
        True
    """

    def __init__(self, leaves: Sequence[bytes]) -> None:
        self._layers: list[Layer] = build_layers(leaves)

    @classmethod
    def from_claims(cls, claims: Sequence[tuple[str | bytes, int]]) -> "MerkleProver":
        """Build a prover from (address, amount) pairs, preserving order."""
        return cls([encode_leaf(address, amount) for address, amount in claims])

    @property
    def layers(self) -> list[Layer]:
        return self._layers

    @property
    def root(self) -> bytes:
        return get_root(self._layers)

    @property
    def leaf_count(self) -> int:
        return len(self._layers[0])

    def prove(self, index: int) -> MerkleProof:
        """
        Generate a proof for the leaf at the given index.

        Raises:
            IndexOutOfRangeException: If index is out of range
        """
        siblings = build_proof(self._layers, index)
        return MerkleProof(
            leaf=self._layers[0][index],
            index=index,
            siblings=siblings,
            root=self.root,
        )


class MerkleVerifier:
    """Static helpers for proof verification."""

    @staticmethod
    def verify(proof: MerkleProof) -> bool:
        """Verify a MerkleProof against its own root."""
        return verify_proof(proof.leaf, proof.siblings, proof.root)

    @staticmethod
    def verify_leaf_in_root(
        leaf: bytes,
        siblings: Sequence[bytes],
        root: bytes,
    ) -> bool:
        """Verify a leaf is included in a Merkle root using raw components."""
        return verify_proof(leaf, siblings, root)

    @staticmethod
    def verify_claim_in_root(
        address: str | bytes,
        amount: int,
        siblings: Sequence[bytes | str],
        root: bytes | str,
    ) -> bool:
        """
        Verify an (address, amount) claim against a root.

        Siblings and root may be hex strings, as found in payload files.
        """
        return verify_claim(address, amount, siblings, root)


__all__ = [
    "MerkleProof",
    "MerkleProver",
    "MerkleVerifier",
]
