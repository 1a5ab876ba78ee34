"""Unicode Collation Algorithm sort key pipeline package."""

from .errors import CollationError, ConfigurationError, InvalidCodePointError, TableUnavailableError
from .models import CollationConfig, CollationElement, Relation, SortKey, Strength, VariableWeighting
from .pipeline import Collator
from .table.repository import CollationElementTable, load_table

__all__ = [
    "CollationConfig",
    "CollationElement",
    "CollationElementTable",
    "CollationError",
    "Collator",
    "ConfigurationError",
    "InvalidCodePointError",
    "Relation",
    "SortKey",
    "Strength",
    "TableUnavailableError",
    "VariableWeighting",
    "load_table",
]
