"""
Synthetic guest, table and relationship generation
"""

import math
from typing import Dict, Iterator, List, Optional, Sequence

from app.core.config import settings
from app.core.exceptions import InsufficientGuestsError
from app.services.pair_allocator import RelationshipPairAllocator
from app.services.random_pool import RandomDataPool, RandomSource, default_random_source

Row = Dict[str, object]


def batch_sizes(count: int, batch_size: int) -> List[int]:
    """Split ``count`` into ``ceil(count / batch_size)`` batch lengths"""
    if batch_size < 1:
        raise ValueError("batch_size must be at least 1")
    count = max(count, 0)
    return [min(batch_size, count - start) for start in range(0, count, batch_size)]


def grid_position(index: int, count: int, spacing: int = settings.TABLE_GRID_SPACING) -> tuple:
    """(x, y) of table ``index`` in a square grid sized for ``count`` tables"""
    grid_size = max(1, math.ceil(math.sqrt(count)))
    row, col = divmod(index, grid_size)
    return col * spacing, row * spacing


class EntityGenerator:
    """Builds store-ready rows for synthetic wedding data.

    Every sampled attribute is drawn independently and uniformly from the
    pool. Passing a seeded ``rng`` makes output reproducible.
    """

    def __init__(
        self,
        pool: Optional[RandomDataPool] = None,
        rng: Optional[RandomSource] = None,
        spacing: int = settings.TABLE_GRID_SPACING,
    ):
        self.pool = pool or RandomDataPool()
        self.rng = rng or default_random_source()
        self.spacing = spacing
        self.allocator = RelationshipPairAllocator(self.rng)

    def _phone(self) -> str:
        return f"+1{math.floor(1_000_000_000 + self.rng.random() * 9_000_000_000)}"

    def guest(self, user_id: str) -> Row:
        first_name = self.rng.choice(self.pool.first_names)
        last_name = self.rng.choice(self.pool.last_names)
        return {
            "name": f"{first_name} {last_name}",
            "email": f"{first_name.lower()}.{last_name.lower()}@example.com",
            "phone": self._phone(),
            "rsvp_status": self.rng.choice(self.pool.rsvp_statuses),
            "dietary_restrictions": self.rng.choice(self.pool.dietary_options),
            "user_id": user_id,
        }

    def generate_guests(self, count: int, batch_size: int, user_id: str) -> Iterator[List[Row]]:
        """Yield guest batches lazily so callers can report progress"""
        for size in batch_sizes(count, batch_size):
            yield [self.guest(user_id) for _ in range(size)]

    def generate_tables(self, count: int, user_id: str) -> List[Row]:
        tables = []
        for i in range(max(count, 0)):
            shape = self.rng.choice(self.pool.table_shapes)
            capacity = self.rng.choice(self.pool.table_sizes)
            x, y = grid_position(i, count, self.spacing)
            tables.append({
                "name": f"{self.rng.choice(self.pool.table_names)} {i + 1}",
                "shape": shape,
                "capacity": capacity,
                "position_x": x,
                "position_y": y,
                "user_id": user_id,
            })
        return tables

    def generate_relationships(self, count: int, user_id: str, guest_ids: Sequence) -> List[Row]:
        """May return fewer rows than ``count`` when guests run out of unique pairs"""
        if len(set(guest_ids)) < 2:
            raise InsufficientGuestsError()

        return [
            {
                "guest_id": guest_id,
                "related_guest_id": related_guest_id,
                "relationship_type": self.rng.choice(self.pool.relationship_types),
                "user_id": user_id,
            }
            for guest_id, related_guest_id in self.allocator.allocate(guest_ids, count)
        ]
