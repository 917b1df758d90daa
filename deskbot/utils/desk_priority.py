"""
Desk Priority Utilities

Orders available desks by the configured floor and amenity preferences.
"""

import math
from typing import List, Sequence, Tuple

from deskbot.interfaces.models import AmenityId, DeskRecord, FloorId

# Rank given to floors/amenities that are not in the preference list
UNRANKED = math.inf


def get_floor_rank(desk: DeskRecord, preferred_floors: Sequence[FloorId]) -> float:
    """
    Position of the desk's floor in the preference list.

    Returns:
        Index (0 = most preferred), or UNRANKED if the floor is not listed
    """
    try:
        return list(preferred_floors).index(desk.floor.id)
    except ValueError:
        return UNRANKED


def get_amenity_rank(desk: DeskRecord, preferred_amenities: Sequence[AmenityId]) -> float:
    """
    Amenity rank of a desk.

    The rank is the HIGHEST preference index among the desk's amenities,
    starting from -1 for amenities that are not listed. With a list ordered
    most-preferred first this rewards the matching amenity listed last,
    e.g. with [DOUBLE_MONITOR, SINGLE_MONITOR] a desk with both monitors
    ranks 1, not 0. A desk with no listed amenity (-1) is UNRANKED.

    Returns:
        Index of the highest matching amenity, or UNRANKED
    """
    preferred = list(preferred_amenities)
    max_index = -1
    for amenity_id in desk.amenity_ids:
        index = preferred.index(amenity_id) if amenity_id in preferred else -1
        max_index = max(max_index, index)

    if max_index == -1:
        return UNRANKED
    return max_index


def desk_rank_key(
    desk: DeskRecord,
    preferred_floors: Sequence[FloorId],
    preferred_amenities: Sequence[AmenityId]
) -> Tuple[float, float]:
    """(floor rank, amenity rank) sort key, lower is better"""
    return (
        get_floor_rank(desk, preferred_floors),
        get_amenity_rank(desk, preferred_amenities),
    )


def compare_desks(
    a: DeskRecord,
    b: DeskRecord,
    preferred_floors: Sequence[FloorId],
    preferred_amenities: Sequence[AmenityId]
) -> int:
    """
    Pairwise comparison: negative if a sorts first, positive if b does, 0 on a tie.

    Floors are compared first. Desks on the same floor (or on two unlisted
    floors) with identical amenity sets tie; otherwise the amenity rank decides.
    """
    a_floor = get_floor_rank(a, preferred_floors)
    b_floor = get_floor_rank(b, preferred_floors)
    if a_floor != b_floor:
        return -1 if a_floor < b_floor else 1

    if set(a.amenity_ids) == set(b.amenity_ids):
        return 0

    a_amenity = get_amenity_rank(a, preferred_amenities)
    b_amenity = get_amenity_rank(b, preferred_amenities)
    if a_amenity == b_amenity:
        return 0
    return -1 if a_amenity < b_amenity else 1


def sort_desks_by_preference(
    desks: Sequence[DeskRecord],
    preferred_floors: Sequence[FloorId],
    preferred_amenities: Sequence[AmenityId]
) -> List[DeskRecord]:
    """
    Sort desks by preference (most preferred first).

    Nothing is filtered out; callers pass only available desks. The sort is
    stable, so tied desks keep their input order.

    Args:
        desks: Desks returned by the booking service
        preferred_floors: Floor ids, most preferred first
        preferred_amenities: Amenity ids, most preferred first

    Returns:
        New list of desks, best candidate first

    Example:
        >>> sort_desks_by_preference(desks, [Floor.FLOOR_27, Floor.FLOOR_26], [])
        # desks on 27/F, then 26/F, then any other floor
    """
    return sorted(
        desks,
        key=lambda desk: desk_rank_key(desk, preferred_floors, preferred_amenities)
    )


def explain_desk_priorities(
    desks: Sequence[DeskRecord],
    preferred_floors: Sequence[FloorId],
    preferred_amenities: Sequence[AmenityId]
) -> str:
    """
    Generate a human-readable explanation of desk priorities.

    Args:
        desks: List of available desks
        preferred_floors: Floor preferences
        preferred_amenities: Amenity preferences

    Returns:
        Formatted string explaining the priority ordering
    """
    if not desks:
        return "No desks to rank."

    sorted_desks = sort_desks_by_preference(desks, preferred_floors, preferred_amenities)

    lines = ["Desk Priority Order (best to worst):"]

    current_key = None
    for desk in sorted_desks:
        key = desk_rank_key(desk, preferred_floors, preferred_amenities)

        # Group by (floor rank, amenity rank)
        if key != current_key:
            floor_rank, amenity_rank = key
            floor_label = "unlisted floor" if floor_rank == UNRANKED else f"floor #{floor_rank + 1}"
            amenity_label = "no listed amenity" if amenity_rank == UNRANKED else f"amenity #{amenity_rank + 1}"
            lines.append(f"\n  Priority: {floor_label}, {amenity_label}")
            current_key = key

        lines.append(f"    - {desk.name} ({desk.describe()})")

    return "\n".join(lines)
