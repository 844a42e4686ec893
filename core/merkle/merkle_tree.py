"""
Module 02 - Merkle Tree Implementation
Layered Merkle tree construction, proof generation, and proof folding.

Owner: Protocol/Crypto Engineer
Module ID: M02

This module provides:
- Full layer stack construction (layer 0 = leaves, last layer = [root])
- Proof generation for any leaf index from a stored layer stack
- Proof verification by folding the sorted pair hash over the proof

Canonical Commitment Rules (Hard Contracts, shared with the reward program):
1. Leaf hashing: see core.merkle.leaf.encode_leaf
2. Parent hashing: parent = sha256(min(a, b) + max(a, b))
3. Padding rule: a lone trailing node is paired with itself
4. Empty leaves: a single synthetic all-zero leaf; root = 32 zero bytes
5. Single leaf: root = leaf, proof = []

Determinism Notes:
- No randomness or non-deterministic ordering
- Leaf ordering is defined upstream (the claims list order)
- This module never sorts leaves - it trusts input order
"""
from __future__ import annotations

from typing import Sequence

from core.crypto.hashing import HASH_SIZE, from_hex, hash_pair
from core.merkle.leaf import encode_leaf
from core.schemas.errors import IndexOutOfRangeException


# Synthetic leaf standing in for an empty claims list
ZERO_LEAF: bytes = b"\x00" * HASH_SIZE

# Root of a tree built from no leaves
EMPTY_TREE_ROOT: bytes = ZERO_LEAF


Layer = list[bytes]


def merkle_parent(left: bytes, right: bytes) -> bytes:
    """
    Compute the parent hash of two child nodes.

    Children are ordered byte-wise before hashing, so the result does not
    depend on which side each child sits on.

    Args:
        left: Left child hash
        right: Right child hash

    Returns:
        Parent hash (32 bytes)
    """
    return hash_pair(left, right)


def build_layers(leaves: Sequence[bytes]) -> list[Layer]:
    """
    Build every layer of the Merkle tree.

    Algorithm:
    1. If empty: layer 0 is [ZERO_LEAF]
    2. While the top layer has more than one node:
       - Pair nodes (2i, 2i+1)
       - A lone trailing node is paired with itself
    3. The final layer holds exactly the root

    Example: [a, b, c] -> [[a, b, c], [p(a,b), p(c,c)], [root]]

    Args:
        leaves: Sequence of 32-byte leaf hashes. Order matters and is preserved.

    Returns:
        List of layers, leaves first, root layer last
    """
    current: Layer = list(leaves) if leaves else [ZERO_LEAF]
    layers: list[Layer] = [current]

    while len(current) > 1:
        next_layer: Layer = []
        for i in range(0, len(current), 2):
            left = current[i]
            right = current[i + 1] if i + 1 < len(current) else left
            next_layer.append(merkle_parent(left, right))
        layers.append(next_layer)
        current = next_layer

    return layers


def get_root(layers: Sequence[Layer]) -> bytes:
    """Return the root of a layer stack produced by build_layers."""
    return layers[-1][0]


def build_merkle_root(leaves: Sequence[bytes]) -> bytes:
    """
    Build the Merkle root for a sequence of leaf hashes.

    Args:
        leaves: Sequence of 32-byte leaf hashes

    Returns:
        32-byte Merkle root (ZERO_LEAF for an empty sequence)
    """
    return get_root(build_layers(leaves))


def build_proof(layers: Sequence[Layer], index: int) -> list[bytes]:
    """
    Generate the sibling path for the leaf at the given index.

    Algorithm:
    1. Start at the target leaf index
    2. At every level below the root:
       - Sibling index is index XOR 1
       - If the sibling is past the end, the node itself is the sibling
       - Move up: index = index // 2

    Args:
        layers: Layer stack from build_layers
        index: 0-based index into layer 0

    Returns:
        Sibling hashes, bottom-up; length equals the tree depth

    Raises:
        IndexOutOfRangeException: If index is not a valid leaf index
    """
    leaf_count = len(layers[0]) if layers else 0
    if index < 0 or index >= leaf_count:
        raise IndexOutOfRangeException(
            f"Leaf index {index} out of range for {leaf_count} leaves",
            leaf_index=index,
            leaf_count=leaf_count,
        )

    proof: list[bytes] = []
    current_index = index

    for layer in layers[:-1]:
        sibling_index = current_index ^ 1
        if sibling_index < len(layer):
            proof.append(layer[sibling_index])
        else:
            proof.append(layer[current_index])
        current_index //= 2

    return proof


def compute_root_from_proof(leaf: bytes, proof: Sequence[bytes]) -> bytes:
    """
    Fold a proof over a leaf to recompute the root.

    This is the exact computation the reward program performs.
    """
    computed = leaf
    for sibling in proof:
        computed = merkle_parent(computed, sibling)
    return computed


def verify_proof(leaf: bytes, proof: Sequence[bytes], root: bytes) -> bool:
    """
    Verify an inclusion proof.

    Args:
        leaf: Leaf hash being proven
        proof: Sibling hashes, bottom-up
        root: Claimed Merkle root

    Returns:
        True if folding the proof over the leaf reproduces the root
    """
    return compute_root_from_proof(leaf, proof) == root


def verify_claim(
    address: str | bytes,
    amount: int,
    proof: Sequence[bytes | str],
    root: bytes | str,
) -> bool:
    """
    Verify a claim the way an external verifier would.

    Proof elements and the root may be given as raw bytes or hex strings.

    Raises:
        InvalidAddressException: If the address cannot be normalized
        AmountOutOfRangeException: If the amount does not fit in u64
        ValueError: If a hex value is malformed or not 32 bytes
    """
    leaf = encode_leaf(address, amount)
    nodes = [_as_node(node) for node in proof]
    return verify_proof(leaf, nodes, _as_node(root))


def compute_tree_depth(num_leaves: int) -> int:
    """
    Compute the number of levels below the root (the proof length).

    A tree of zero or one leaves has depth 0; two leaves have depth 1;
    three or four leaves have depth 2.
    """
    depth = 0
    n = max(num_leaves, 1)
    while n > 1:
        n = (n + 1) // 2
        depth += 1
    return depth


def _as_node(value: bytes | str) -> bytes:
    if isinstance(value, str):
        return from_hex(value, expected_length=HASH_SIZE)
    return bytes(value)


__all__ = [
    "ZERO_LEAF",
    "EMPTY_TREE_ROOT",
    "Layer",
    "merkle_parent",
    "build_layers",
    "get_root",
    "build_merkle_root",
    "build_proof",
    "compute_root_from_proof",
    "verify_proof",
    "verify_claim",
    "compute_tree_depth",
]
