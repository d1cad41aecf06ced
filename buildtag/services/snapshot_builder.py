"""
Snapshot builder: the resolved tag plus the tags before it.

Informational only. A snapshot never fails a resolution.
"""

from typing import Optional, Sequence
import logging

from ..domain import BuildSnapshot, ParsedTag

logger = logging.getLogger(__name__)


def build_snapshot(candidate: ParsedTag, tags: Sequence[ParsedTag]) -> BuildSnapshot:
    """
    Build the snapshot for a candidate.

    Args:
        candidate: The selected tag
        tags: All parsed tags of the candidate's variant, including
            build number 0

    Returns:
        Snapshot with previous_in_order (next lower build number) and
        previous_on_different_commit (next lower build number on another
        commit)
    """
    ordered = sorted(
        (t for t in tags if t.build_variant == candidate.build_variant),
        key=lambda t: (-t.build_number, t.name)
    )
    lower = [t for t in ordered if t.build_number < candidate.build_number]

    previous_in_order: Optional[ParsedTag] = lower[0] if lower else None
    previous_on_different_commit = next(
        (t for t in lower if t.commit_id != candidate.commit_id), None
    )

    snapshot = BuildSnapshot(
        current=candidate.to_tag_build(),
        previous_in_order=previous_in_order.to_tag_build() if previous_in_order else None,
        previous_on_different_commit=(
            previous_on_different_commit.to_tag_build()
            if previous_on_different_commit else None
        ),
    )
    logger.debug(
        f"Snapshot for {candidate.name}: previous in order "
        f"{previous_in_order.name if previous_in_order else None}, previous on different commit "
        f"{previous_on_different_commit.name if previous_on_different_commit else None}"
    )
    return snapshot
