from __future__ import annotations

from collections.abc import Sequence

from pod_inspect.models.pod import EventWindow, EventWindowLabel, PodEvent


def window_events(events: Sequence[PodEvent], max_count: int) -> EventWindow:
    """Keep the most recent ``max_count`` events; ``max_count <= 0`` keeps all.

    Events are expected oldest first, as the event lister returns them.
    """
    total = len(events)
    selected = list(events)
    truncated = False
    if max_count > 0 and total > max_count:
        selected = selected[total - max_count :]
        truncated = True

    if truncated and len(selected) == 1:
        label = EventWindowLabel.SINGLE_MOST_RECENT
    elif truncated:
        label = EventWindowLabel.LAST_N
    else:
        label = EventWindowLabel.ALL

    return EventWindow(
        events=selected,
        truncated=truncated,
        total_available=total,
        label=label,
    )
