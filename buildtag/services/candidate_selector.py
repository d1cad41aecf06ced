"""
Candidate selection: the authoritative tag for a variant.

The tag with the highest build number wins. Selection fails loudly
instead of guessing:
- two commits carrying the same highest build number is ambiguous
- a lower build number on a strictly later commit breaks chronology

Tags on the same commit never conflict. A commit tagged 207, 208 and 209
resolves to 209.
"""

from typing import List, Optional, Sequence
import logging

from packaging.version import Version

from ..domain import ParsedTag
from ..errors import AmbiguousBuildNumberError, ChronologyViolationError
from .chronology import ChronologyIndex

logger = logging.getLogger(__name__)


class CandidateSelector:
    """
    Picks the candidate tag and validates the variant's tag history.

    Example:
        selector = CandidateSelector(chronology)
        candidate = selector.select(parsed.for_variant("debug"), "debug")
    """

    def __init__(self, chronology: ChronologyIndex):
        self.chronology = chronology

    def select(self, tags: Sequence[ParsedTag], variant: str) -> Optional[ParsedTag]:
        """
        Select the candidate for a variant.

        Args:
            tags: Parsed tags; tags of other variants are ignored
            variant: Requested variant

        Returns:
            The candidate, or None if no tag has a build number above 0

        Raises:
            AmbiguousBuildNumberError: Highest build number on two commits
            ChronologyViolationError: Lower build number on a later commit
        """
        eligible = [t for t in tags if t.build_variant == variant and t.build_number > 0]
        if not eligible:
            logger.debug(f"No tag with a build number above 0 for '{variant}'")
            return None

        ordered = sorted(eligible, key=lambda t: (-t.build_number, t.name))
        logger.debug(f"Candidates for '{variant}': {[t.name for t in ordered]}")

        candidate = self._pick_highest(ordered, variant)
        self._check_chronology(candidate, eligible, variant)

        logger.info(f"Resolved '{variant}' to {candidate}")
        return candidate

    def _pick_highest(self, ordered: List[ParsedTag], variant: str) -> ParsedTag:
        top_number = ordered[0].build_number
        top = [t for t in ordered if t.build_number == top_number]

        first = top[0]
        for other in top[1:]:
            if other.commit_id != first.commit_id:
                raise AmbiguousBuildNumberError(
                    variant=variant,
                    build_number=top_number,
                    first_tag=first.name,
                    first_commit=first.commit_id,
                    second_tag=other.name,
                    second_commit=other.commit_id,
                )

        # Same commit, same number: highest build version, then first by name
        top.sort(key=lambda t: t.name)
        return max(top, key=lambda t: Version(t.build_version))

    def _check_chronology(self, candidate: ParsedTag, eligible: List[ParsedTag], variant: str) -> None:
        candidate_position = self.chronology.position(candidate.commit_id)

        violations = [
            (self.chronology.position(t.commit_id), t)
            for t in eligible
            if t.build_number < candidate.build_number
            and self.chronology.position(t.commit_id) > candidate_position
        ]
        if not violations:
            return

        # Report the latest offending tag
        later_position, later = max(violations, key=lambda v: (v[0], -v[1].build_number, v[1].name))
        raise ChronologyViolationError(
            variant=variant,
            candidate_tag=candidate.name,
            candidate_commit=candidate.commit_id,
            candidate_number=candidate.build_number,
            later_tag=later.name,
            later_commit=later.commit_id,
            later_number=later.build_number,
            candidate_position=candidate_position,
            later_position=later_position,
        )
