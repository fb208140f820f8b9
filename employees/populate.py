"""
Generators of synthetic employees used to fill the Employees table.
"""

import random
from datetime import date
from typing import Iterator, Optional

from .models import Employee, Gender

FIRST_NAMES = ("John", "Michael", "David", "Paul", "Mark")
LAST_NAMES = ("Smith", "Johnson", "Williams", "Brown", "Jones")

BIRTH_YEARS = (1950, 2004)


def random_birth_date(rng: random.Random) -> date:
    # Day capped at 28 so every month is valid
    return date(rng.randint(*BIRTH_YEARS), rng.randint(1, 12), rng.randint(1, 28))


def generate_random_employees(count: int, rng: Optional[random.Random] = None) -> Iterator[Employee]:
    """Yield `count` employees with random names, birth dates and genders."""
    rng = rng or random.Random()
    genders = list(Gender)
    for _ in range(count):
        full_name = f"{rng.choice(LAST_NAMES)} {rng.choice(FIRST_NAMES)}"
        yield Employee(full_name, random_birth_date(rng), rng.choice(genders))


def generate_prefixed_employees(count: int,
                                prefix: str,
                                rng: Optional[random.Random] = None,
                                gender: Gender = Gender.MALE) -> Iterator[Employee]:
    """Yield `count` employees whose names start with `prefix`, all of one gender."""
    rng = rng or random.Random()
    for _ in range(count):
        full_name = f"{prefix}{rng.randint(1000, 9999)} John"
        yield Employee(full_name, random_birth_date(rng), gender)
