"""Detection tables: pattern registry, category keywords, special phrases."""

from finsafe.patterns.registry import (
    CategoryGroup,
    Pattern,
    Registry,
    SpecialPhrase,
    load_extra_patterns,
    read_patterns_file,
)
from finsafe.patterns.builtin import CATEGORY_KEYWORDS, SCAM_PATTERNS, SPECIAL_PHRASES


def default_registry() -> Registry:
    """A fresh registry holding the built-in patterns."""
    return Registry(SCAM_PATTERNS)


__all__ = [
    "CategoryGroup",
    "Pattern",
    "Registry",
    "SpecialPhrase",
    "load_extra_patterns",
    "read_patterns_file",
    "default_registry",
    "CATEGORY_KEYWORDS",
    "SCAM_PATTERNS",
    "SPECIAL_PHRASES",
]
