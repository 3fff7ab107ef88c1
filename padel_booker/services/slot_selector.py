"""
Slot selection: which grid cell to try next.

Time priority always wins over court preference. Among slots at the first
priority time that has any candidate, the preferred court comes first and
otherwise grid order is kept.
"""

from padel_booker.models.schemas import BookingPreferences, Slot


def select_slot(slots: list[Slot], preferences: BookingPreferences) -> Slot | None:
    """
    Select the best untried, available slot.

    Args:
        slots: Slots in grid order, as returned by the availability reader
        preferences: Ordered priority times and the preferred court id

    Returns:
        The chosen Slot, or None if no priority time has a candidate
    """
    candidates = [slot for slot in slots if slot.available and not slot.attempted]
    if not candidates:
        return None

    slots_by_time: dict[str, list[Slot]] = {}
    for slot in candidates:
        slots_by_time.setdefault(slot.time_label, []).append(slot)

    for target_time in preferences.priority_times:
        at_time = slots_by_time.get(target_time)
        if not at_time:
            continue
        # sorted() is stable, so grid order breaks ties
        ranked = sorted(at_time, key=lambda s: s.court_id != preferences.preferred_court_id)
        return ranked[0]

    return None
