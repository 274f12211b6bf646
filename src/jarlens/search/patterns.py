"""Name pattern matching for searches."""

import re
from typing import Callable

WILDCARD = "*"

Matcher = Callable[[str], bool]


def is_glob(pattern: str) -> bool:
    return WILDCARD in pattern


def compile_pattern(pattern: str) -> Matcher:
    """Compile a search pattern into a predicate.

    Without ``*`` the pattern is a case-insensitive substring test. With
    ``*`` it is a case-insensitive glob that must match the whole name,
    so ``*Service`` matches ``OrderService`` but not ``OrderServiceImpl``.
    """
    if is_glob(pattern):
        regex = re.compile(re.escape(pattern).replace(r"\*", ".*"), re.IGNORECASE | re.DOTALL)
        return lambda name: regex.fullmatch(name) is not None

    needle = pattern.casefold()
    return lambda name: needle in name.casefold()
