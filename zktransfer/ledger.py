"""Fixed-depth Merkle accumulator over account commitments.

Leaf ``i`` sits at the bottom level; its proof is the list of siblings met on
the way to the root together with the position bits of the path, bit ``j``
being ``(i >> j) & 1`` (0 = left child, 1 = right child).  With the default
depth of 1 the tree has two leaves and every proof has exactly one entry.

An accumulator is never modified: ``update`` returns the roots and a new
accumulator, so chained updates (debit, then credit) expose the intermediate
root in between.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from .errors import OutOfDomain
from .field import check_field_element
from .mimc import Mimc7

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MerkleProof:
    siblings: Tuple[int, ...]
    positions: Tuple[int, ...]

    @property
    def depth(self) -> int:
        return len(self.siblings)


def hash_pair(hasher: Mimc7, leaf: int, sibling: int, position: int) -> int:
    if position == 0:
        return hasher.hash([leaf, sibling])
    return hasher.hash([sibling, leaf])


def compute_root(hasher: Mimc7, leaf: int, proof: MerkleProof) -> int:
    node = leaf
    for sibling, position in zip(proof.siblings, proof.positions):
        node = hash_pair(hasher, node, sibling, position)
    return node


def verify_proof(hasher: Mimc7, leaf: int, proof: MerkleProof, root: int) -> bool:
    if len(proof.siblings) != len(proof.positions):
        return False
    if any(pos not in (0, 1) for pos in proof.positions):
        return False
    return compute_root(hasher, leaf, proof) == root


class LedgerAccumulator:
    def __init__(self, hasher: Mimc7, leaves: Sequence[int], depth: Optional[int] = None):
        self.hasher = hasher
        self.depth = hasher.ctx.tree_depth if depth is None else depth
        size = 2 ** self.depth
        if len(leaves) > size:
            raise OutOfDomain(f"{len(leaves)} leaves do not fit a depth {self.depth} tree")
        leaves = [check_field_element(leaf, "leaf") for leaf in leaves]
        # empty slots hold the zero leaf
        self.leaves: Tuple[int, ...] = tuple(leaves + [0] * (size - len(leaves)))
        self.levels = self._build_levels()

    def _build_levels(self) -> List[Tuple[int, ...]]:
        levels = [self.leaves]
        for _ in range(self.depth):
            below = levels[-1]
            levels.append(tuple(
                self.hasher.hash([below[i], below[i + 1]])
                for i in range(0, len(below), 2)
            ))
        return levels

    @property
    def root(self) -> int:
        return self.levels[-1][0]

    def _check_position(self, position: int) -> None:
        if not 0 <= position < len(self.leaves):
            raise OutOfDomain(f"leaf position {position} outside the tree")

    def proof_for(self, position: int) -> MerkleProof:
        self._check_position(position)
        siblings = []
        positions = []
        index = position
        for level in self.levels[:-1]:
            siblings.append(level[index ^ 1])
            positions.append(index & 1)
            index >>= 1
        return MerkleProof(tuple(siblings), tuple(positions))

    def update(self, position: int, new_leaf: int) -> Tuple[int, int, "LedgerAccumulator"]:
        """Replace one leaf; returns ``(old_root, new_root, new_accumulator)``."""
        self._check_position(position)
        leaves = list(self.leaves)
        leaves[position] = new_leaf
        updated = LedgerAccumulator(self.hasher, leaves, self.depth)
        logger.debug("leaf %d updated, root %d -> %d", position, self.root, updated.root)
        return self.root, updated.root, updated
