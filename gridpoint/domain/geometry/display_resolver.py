# gridpoint/domain/geometry/display_resolver.py
"""
Selection of the display the grid overlay is shown on.
"""
from typing import Optional, Sequence

from gridpoint.domain.common.errors import GeometryError
from gridpoint.domain.common.result import Result
from gridpoint.domain.models.click_config import DisplayPolicy
from gridpoint.domain.models.geometry import Display


def resolve_target_display(displays: Sequence[Display],
                           policy: DisplayPolicy = DisplayPolicy.LARGEST,
                           index: Optional[int] = None) -> Result[Display]:
    """
    Pick the target display from the enumerated displays.

    Args:
        displays: Displays in enumeration order
        policy: LARGEST picks the biggest width*height (first one wins ties),
            INDEX picks ``displays[index]``
        index: Display index for the INDEX policy

    Returns:
        Result containing the selected Display
    """
    if not displays:
        return Result.fail(GeometryError(
            message="No displays are attached",
            code="NoDisplays"
        ))

    if policy == DisplayPolicy.INDEX:
        position = 0 if index is None else index
        if position < 0 or position >= len(displays):
            return Result.fail(GeometryError(
                message=f"Display index {position} is out of range",
                code="IndexOutOfRange",
                details={"index": position, "display_count": len(displays)}
            ))
        return Result.ok(displays[position])

    largest = displays[0]
    for display in displays[1:]:
        # strict comparison keeps the first enumerated display on ties
        if display.area > largest.area:
            largest = display
    return Result.ok(largest)
