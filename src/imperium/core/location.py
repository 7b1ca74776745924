"""
Grid geometry for the Imperium Sandbox.

Locations are (row, col) cells on a rectangular field of ``depth`` rows
and ``width`` columns. Adjacency is the Chebyshev (king-move) neighbourhood
of a configurable radius; the cell itself is never its own neighbour.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, order=True)
class Location:
    """A single cell on the field."""

    row: int
    col: int

    def offset(self, drow: int, dcol: int) -> Location:
        return Location(self.row + drow, self.col + dcol)

    def __str__(self) -> str:
        return f"{self.row},{self.col}"


def in_bounds(location: Location | None, depth: int, width: int) -> bool:
    """Whether *location* lies inside a ``depth`` x ``width`` grid."""
    if location is None:
        return False
    return 0 <= location.row < depth and 0 <= location.col < width


def neighbourhood(
    location: Location | None, depth: int, width: int, radius: int = 1,
) -> list[Location]:
    """Return the in-bounds cells within *radius* of *location*, row-major.

    Yields at most ``(2r+1)^2 - 1`` cells. Out-of-bounds origins and
    non-positive radii produce an empty list.

    Args:
        location: Centre cell.
        depth: Number of rows in the grid.
        width: Number of columns in the grid.
        radius: Chebyshev radius of the neighbourhood.

    Returns:
        Neighbour locations in deterministic (unshuffled) order.
    """
    if radius < 1 or not in_bounds(location, depth, width):
        return []
    result: list[Location] = []
    for drow in range(-radius, radius + 1):
        row = location.row + drow
        if not 0 <= row < depth:
            continue
        for dcol in range(-radius, radius + 1):
            col = location.col + dcol
            if (drow or dcol) and 0 <= col < width:
                result.append(Location(row, col))
    return result


def chebyshev_distance(a: Location, b: Location) -> int:
    """Number of king moves between two cells."""
    return max(abs(a.row - b.row), abs(a.col - b.col))
