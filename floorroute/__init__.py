"""Find a table on a floor plan and route to it along the corridors."""

__version__ = "1.0.0"
