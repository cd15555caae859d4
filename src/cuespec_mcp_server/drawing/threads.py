"""Thread region resolution for tapped holes.

A tap threads the deepest hole drilled or bored before it. Any later cut
with a larger diameter removes those threads from the face down to its own
depth, so only the remainder is drawn.
"""

from typing import List, Optional, Sequence

from ..models.drawing import ThreadRegion
from ..models.machining import MachiningProcess, MachiningStep
from .profile import machined_cuts


def resolve_thread_region(
    steps: Sequence[MachiningStep],
    tap_step_index: int,
) -> Optional[ThreadRegion]:
    """Compute where a tap's threads remain visible.

    Args:
        steps: Machining steps in the order performed
        tap_step_index: Index of the Tap step within ``steps``

    Returns:
        ThreadRegion in inches, or None when the index is not a tap, no
        hole precedes it, or later cuts removed every thread
    """
    if not 0 <= tap_step_index < len(steps):
        return None
    tap = steps[tap_step_index]
    if tap.process != MachiningProcess.TAP:
        return None

    cuts = machined_cuts(steps)
    prior = [cut for cut in cuts if cut.index < tap_step_index]
    if not prior:
        return None

    # Deepest prior cut; on equal depth the most recent one
    target = max(prior, key=lambda cut: (cut.depth, cut.index))

    start = 0.0
    end = target.depth
    for cut in cuts:
        if cut.index > tap_step_index and cut.diameter > target.diameter:
            start = max(start, cut.depth)

    if start >= end:
        return None

    return ThreadRegion(
        tap_index=tap_step_index,
        thread_size=tap.thread_size,
        start=start,
        end=end,
        radius=target.radius,
    )


def resolve_thread_regions(steps: Sequence[MachiningStep]) -> List[ThreadRegion]:
    """Resolve every labelled tap independently, in step order."""
    regions = []
    for index, step in enumerate(steps):
        if step.process != MachiningProcess.TAP or not (step.thread_size or "").strip():
            continue
        region = resolve_thread_region(steps, index)
        if region is not None:
            regions.append(region)
    return regions
