"""
Employee record and the age arithmetic derived from it.
"""

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any, Optional, Sequence, Tuple

from .database import DatabaseService

INSERT_EMPLOYEE_SQL = """
    INSERT INTO "Employees" ("FullName", "BirthDate", "Gender")
    VALUES (%s, %s, %s);
"""

# Accepted birth date spellings, tried in order
BIRTH_DATE_FORMATS = ("%Y-%m-%d", "%d.%m.%Y", "%m/%d/%Y")


class Gender(str, Enum):
    """Gender values as stored in the Employees table."""

    MALE = "Male"
    FEMALE = "Female"


def calculate_age(birth_date: date, today: date) -> int:
    """Full years between birth_date and today.

    The year difference is reduced by one when the birthday has not yet
    come around in today's year.
    """
    age = today.year - birth_date.year
    if (today.month, today.day) < (birth_date.month, birth_date.day):
        age -= 1
    return age


def parse_birth_date(value: str) -> date:
    """Parse a calendar date given on the command line."""
    text = value.strip()
    for fmt in BIRTH_DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    raise ValueError(f"Unrecognized date: {value!r} (expected YYYY-MM-DD)")


@dataclass
class Employee:
    full_name: str
    birth_date: date
    gender: Gender

    def __post_init__(self):
        if isinstance(self.birth_date, datetime):
            self.birth_date = self.birth_date.date()
        if not isinstance(self.birth_date, date):
            raise ValueError(f"Birth date must be a date; got {self.birth_date!r}")
        try:
            self.gender = Gender(self.gender)
        except ValueError:
            allowed = ", ".join(g.value for g in Gender)
            raise ValueError(f"Gender must be one of: {allowed}; got {self.gender!r}") from None

    @classmethod
    def from_row(cls, row: Sequence[Any]) -> "Employee":
        """Build an employee from a (FullName, BirthDate, Gender) row."""
        full_name, birth_date, gender = row
        return cls(full_name, birth_date, gender)

    def calculate_age(self, today: Optional[date] = None) -> int:
        return calculate_age(self.birth_date, today or date.today())

    def insert_statement(self) -> Tuple[str, Tuple[str, date, str]]:
        """Parameterized INSERT for this record."""
        return INSERT_EMPLOYEE_SQL, (self.full_name, self.birth_date, self.gender.value)

    def save(self, service: DatabaseService):
        query, params = self.insert_statement()
        service.execute(query, params)
