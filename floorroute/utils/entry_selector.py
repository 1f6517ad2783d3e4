"""
Entry point selection.

Each table is routed from one of the floor's fixed entry points, chosen by
the numeric value of the table identifier.
"""

import re
from typing import Optional, Tuple

from ..models.geometry import FloorPlan, Point

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


class EntrySelector:
    """
    Picks the start point for a table identifier:

    - first entry rule whose inclusive range holds the identifier's number
    - otherwise the floor's default entry (also for non-numeric identifiers)
    """

    def __init__(self, floor_plan: FloorPlan):
        self.floor_plan = floor_plan

    @staticmethod
    def parse_table_number(identifier: str) -> Optional[int]:
        """
        Leading integer of an identifier ("151" -> 151, "12B" -> 12, "B12" -> None).
        """
        match = _LEADING_INT.match(identifier or "")
        if not match:
            return None
        return int(match.group(1))

    def select(self, identifier: str) -> Tuple[str, Point]:
        """
        Choose the entry for a table identifier.

        Args:
            identifier: Free-form table identifier

        Returns:
            Tuple of (entry name, entry point)
        """
        number = self.parse_table_number(identifier)
        if number is not None:
            for rule in self.floor_plan.entry_rules:
                if rule.matches(number):
                    return rule.name, rule.point
        return self.floor_plan.default_entry_name, self.floor_plan.default_entry

    def select_start(self, identifier: str) -> Point:
        return self.select(identifier)[1]

    def validate_point(self, point: Point) -> Tuple[bool, str]:
        """
        Check that a point lies on the plane.

        Returns:
            Tuple of (is_valid, message)
        """
        if not self.floor_plan.corridors.in_bounds(point):
            return False, (
                f"Point ({point[0]}, {point[1]}) is outside the "
                f"{self.floor_plan.width}x{self.floor_plan.height} floor plan"
            )
        return True, "Point on floor plan"
