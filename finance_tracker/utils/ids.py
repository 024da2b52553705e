"""
Record id generation.

Ids are an entity-type prefix plus a random suffix drawn from [0-9a-z].
Ten characters give 36**10 (~3.6e15) values per prefix.
Salary ids are deterministic: one per (user, year, month).
"""

import secrets
import string

ID_ALPHABET = string.digits + string.ascii_lowercase
ID_SUFFIX_LENGTH = 10

CATEGORY_PREFIX = "cat"
EXPENSE_PREFIX = "exp"
INCOME_PREFIX = "inc"
USER_PREFIX = "usr"
SALARY_PREFIX = "sal"


def new_id(prefix: str) -> str:
    """Generate a collision-resistant id, e.g. `cat_3k9x0a7q2m`."""
    suffix = "".join(secrets.choice(ID_ALPHABET) for _ in range(ID_SUFFIX_LENGTH))
    return f"{prefix}_{suffix}"


def salary_id(user_id: str, year: int, month: int) -> str:
    """Deterministic salary id, e.g. `sal-usr_abc-2025-10`."""
    return f"{SALARY_PREFIX}-{user_id}-{year}-{month:02d}"
