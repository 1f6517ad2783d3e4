"""
Table directory: static lookup from table identifier to plane coordinates.
Loaded from the YAML config at startup, read-only afterwards.
"""

from typing import Dict, Mapping, Optional

from ..config import load_tables
from ..models.geometry import Point


class TableDirectory:
    """
    Maps free-form table identifiers to points on the floor plan.

    An unknown identifier is a normal outcome (None), not an error.
    """

    def __init__(self, tables: Optional[Mapping[str, Point]] = None):
        """
        Initialize directory.

        Args:
            tables: Identifier -> point mapping (insertion order is kept)
        """
        self._tables: Dict[str, Point] = {
            str(key).strip(): Point(*value) for key, value in (tables or {}).items()
        }

    def lookup(self, identifier: Optional[str]) -> Optional[Point]:
        """
        Find a table's coordinates.

        Args:
            identifier: Table identifier as typed by the user

        Returns:
            Point if known, None otherwise
        """
        if identifier is None:
            return None
        key = str(identifier).strip()
        if not key:
            return None
        return self._tables.get(key)

    def identifiers(self) -> list[str]:
        """Known identifiers in configuration order."""
        return list(self._tables.keys())

    def count(self) -> int:
        return len(self._tables)

    def __contains__(self, identifier: str) -> bool:
        return self.lookup(identifier) is not None


# Global singleton instance
_table_directory: Optional[TableDirectory] = None


def get_table_directory() -> TableDirectory:
    """Get the global table directory, loading it from config on first use."""
    global _table_directory
    if _table_directory is None:
        _table_directory = TableDirectory(load_tables())
    return _table_directory


def set_table_directory(directory: Optional[TableDirectory]) -> None:
    """Replace the global table directory (None forces a reload on next use)."""
    global _table_directory
    _table_directory = directory
