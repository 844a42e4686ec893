"""
Module 02 - Merkle Tree and Commitments
Claim leaf encoding, layered Merkle tree construction and inclusion proofs
compatible with the on-chain reward program.

Owner: Protocol/Crypto Engineer
Module ID: M02

This module provides:
- encode_leaf: sha256(address_32 || amount_u64_le)
- build_layers: Full layer stack, leaves first, root last
- build_proof: Sibling path for a leaf index
- verify_proof / verify_claim: Fold a proof and compare with the root
- MerkleProver / MerkleVerifier: Convenience classes

Canonical Commitment Rules:
1. Leaf hashing: sha256(address_32 || amount.to_bytes(8, "little"))
2. Parent hashing: sha256(min(a, b) + max(a, b))
3. Padding: A lone trailing node is paired with itself
4. Empty tree: one all-zero synthetic leaf, root = 32 zero bytes
5. Single leaf: root = leaf

Usage:
    from core.merkle import encode_leaf, build_layers, build_proof, verify_proof

    leaves = [encode_leaf(address, amount) for address, amount in claims]
    layers = build_layers(leaves)
    root = layers[-1][0]

    proof = build_proof(layers, index=2)
    assert verify_proof(leaves[2], proof, root)
"""
from .leaf import (
    AMOUNT_SIZE,
    MAX_AMOUNT,
    check_amount,
    encode_amount,
    encode_leaf,
)

from .merkle_tree import (
    ZERO_LEAF,
    EMPTY_TREE_ROOT,
    Layer,
    merkle_parent,
    build_layers,
    get_root,
    build_merkle_root,
    build_proof,
    compute_root_from_proof,
    verify_proof,
    verify_claim,
    compute_tree_depth,
)

from .merkle_proofs import (
    MerkleProof,
    MerkleProver,
    MerkleVerifier,
)


__all__ = [
    # Leaf encoding
    "AMOUNT_SIZE",
    "MAX_AMOUNT",
    "check_amount",
    "encode_amount",
    "encode_leaf",
    # Core types
    "ZERO_LEAF",
    "EMPTY_TREE_ROOT",
    "Layer",
    "MerkleProof",
    # Core functions
    "merkle_parent",
    "build_layers",
    "get_root",
    "build_merkle_root",
    "build_proof",
    "compute_root_from_proof",
    "verify_proof",
    "verify_claim",
    "compute_tree_depth",
    # Convenience classes
    "MerkleProver",
    "MerkleVerifier",
]
