"""
Reference data and random source used by the test data generator
"""

import random
from dataclasses import dataclass
from typing import Optional, Protocol, Sequence, Tuple, TypeVar

T = TypeVar("T")


class RandomSource(Protocol):
    """The subset of ``random.Random`` the generators rely on"""

    def random(self) -> float: ...

    def choice(self, seq: Sequence[T]) -> T: ...

    def randrange(self, stop: int) -> int: ...


def default_random_source(seed: Optional[int] = None) -> RandomSource:
    """Unseeded unless a seed is given"""
    return random.Random(seed)


FIRST_NAMES = (
    "Emma", "Noah", "Olivia", "Liam", "Ava", "William", "Sophia", "Mason",
    "Isabella", "James", "Mia", "Benjamin", "Charlotte", "Jacob", "Amelia",
    "Michael", "Harper", "Ethan", "Evelyn", "Alexander", "Abigail", "Daniel",
    "Emily", "Matthew", "Elizabeth", "Henry", "Sofia", "Joseph", "Madison",
    "David",
)

LAST_NAMES = (
    "Smith", "Johnson", "Williams", "Jones", "Brown", "Davis", "Miller",
    "Wilson", "Moore", "Taylor", "Anderson", "Thomas", "Jackson", "White",
    "Harris", "Martin", "Thompson", "Garcia", "Martinez", "Robinson", "Clark",
    "Rodriguez", "Lewis", "Lee", "Walker", "Hall", "Allen", "Young",
    "Hernandez", "King",
)

RSVP_STATUSES = ("confirmed", "pending", "declined")

# None is the "no restriction" option and is sampled like any other
DIETARY_OPTIONS = (
    None,
    "Vegetarian",
    "Vegan",
    "Gluten-Free",
    "Nut Allergy",
    "Lactose Intolerant",
    "Shellfish Allergy",
    "Kosher",
    "Halal",
)

TABLE_NAMES = (
    "Table",
    "Round Table",
    "Rectangle Table",
    "Oval Table",
    "Family",
    "Friends",
    "Colleagues",
    "VIP",
    "Bridal Party",
)

TABLE_SHAPES = ("round", "rectangle", "oval")
TABLE_SIZES = (4, 6, 8, 10, 12)
RELATIONSHIP_TYPES = ("preference", "conflict")


@dataclass(frozen=True)
class RandomDataPool:
    """Sampling sources for synthetic guests, tables and relationships"""

    first_names: Tuple[str, ...] = FIRST_NAMES
    last_names: Tuple[str, ...] = LAST_NAMES
    rsvp_statuses: Tuple[str, ...] = RSVP_STATUSES
    dietary_options: Tuple[Optional[str], ...] = DIETARY_OPTIONS
    table_names: Tuple[str, ...] = TABLE_NAMES
    table_shapes: Tuple[str, ...] = TABLE_SHAPES
    table_sizes: Tuple[int, ...] = TABLE_SIZES
    relationship_types: Tuple[str, ...] = RELATIONSHIP_TYPES
