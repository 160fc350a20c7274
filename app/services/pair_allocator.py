"""
Unordered guest pair selection for relationship generation
"""

import logging
from typing import List, Optional, Sequence, Tuple

from app.services.random_pool import RandomSource, default_random_source

logger = logging.getLogger(__name__)

Pair = Tuple[str, str]

PAIR_KEY_SEPARATOR = "|"
ATTEMPTS_PER_PAIR = 3


def pair_key(guest_id, related_guest_id) -> str:
    """Order-independent key for a guest pair"""
    return PAIR_KEY_SEPARATOR.join(sorted((str(guest_id), str(related_guest_id))))


def max_possible_pairs(guest_count: int) -> int:
    return guest_count * (guest_count - 1) // 2


class RelationshipPairAllocator:
    """Rejection-sampling selector of distinct unordered guest pairs.

    Draws two distinct random guests per attempt and discards pairs whose
    canonical key was already taken. The number of attempts is bounded by
    ``target * 3`` so the search always terminates; when it runs out the
    pairs collected so far are returned.
    """

    def __init__(self, rng: Optional[RandomSource] = None):
        self.rng = rng or default_random_source()

    def allocate(self, guest_ids: Sequence, target_count: int) -> List[Pair]:
        # Duplicate ids would otherwise allow a guest to be paired with itself
        ids = list(dict.fromkeys(guest_ids))
        if len(ids) < 2:
            return []

        target = min(max(target_count, 0), max_possible_pairs(len(ids)))
        max_attempts = target * ATTEMPTS_PER_PAIR

        pairs: List[Pair] = []
        seen = set()
        attempts = 0
        while len(pairs) < target and attempts < max_attempts:
            attempts += 1

            first = self.rng.randrange(len(ids))
            second = self.rng.randrange(len(ids))
            while second == first:
                second = self.rng.randrange(len(ids))

            key = pair_key(ids[first], ids[second])
            if key in seen:
                continue
            seen.add(key)
            pairs.append((ids[first], ids[second]))

        if len(pairs) < target:
            logger.info(f"Allocated {len(pairs)}/{target} guest pairs after {attempts} attempts")
        return pairs
