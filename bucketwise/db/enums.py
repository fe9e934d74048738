# db/enums.py

import enum
from sqlalchemy import TypeDecorator, String


class TransactionType(enum.Enum):
    """Kind of balance-affecting event recorded in the transaction log."""
    INCOME = "income"      # Raw gross income event (no bucket)
    SWEEP = "sweep"        # Money moved into a bucket by the allocation engine
    EXPENSE = "expense"    # Purchase or expense deduction (negative amount)
    RESERVE = "reserve"


class DisciplineMode(enum.Enum):
    """Selects which limiter coefficient the affordability check applies."""
    LIGHT = "light"
    INTERMEDIATE = "intermediate"
    STRICT = "strict"
    DESPERATE = "desperate"

    @classmethod
    def parse(cls, value, default: "DisciplineMode" = None) -> "DisciplineMode":
        """Lenient lookup: unknown or empty values fall back to ``default`` (intermediate)."""
        if isinstance(value, cls):
            return value
        if value is None:
            return default or cls.INTERMEDIATE
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return default or cls.INTERMEDIATE


class Priority(enum.IntEnum):
    HIGH = 1
    MEDIUM = 2
    LOW = 3


# Enums are stored as plain strings (Supabase tables use TEXT columns for them)
class EnumString(TypeDecorator):
    """Ensures Enum values are stored as strings."""
    impl = String
    cache_ok = True

    def __init__(self, enum_type, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.enum_type = enum_type

    def process_bind_param(self, value, dialect):
        if value is None:
            return value
        if isinstance(value, self.enum_type):
            return value.value
        # Accept raw strings, validating them against the enum
        return self.enum_type(value).value

    def process_result_value(self, value, dialect):
        if value is not None:
            return self.enum_type(value)
        return value
