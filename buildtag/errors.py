"""
Error types raised by the buildtag resolution engine.

Every error carries an exit code so the CLI (or a build pipeline) can
surface it verbatim as a failed build. The message text is the primary
diagnostic, so each error spells out what was found and what to check.
"""

from typing import Optional

from .exit_codes import (
    GENERAL_ERROR,
    NO_CANDIDATE,
    REPOSITORY_ERROR,
    CONFIG_ERROR,
    AMBIGUOUS_TAGS,
    CHRONOLOGY_ERROR,
    DATA_ERROR,
)


class BuildTagError(Exception):
    """Base class for all resolution failures."""

    exit_code = GENERAL_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigurationError(BuildTagError):
    """Invalid tag pattern or configuration. Raised before any repository access."""

    exit_code = CONFIG_ERROR


class RepositoryReadError(BuildTagError):
    """The underlying VCS could not be read."""

    exit_code = REPOSITORY_ERROR


class DocumentError(BuildTagError):
    """A persisted tag document is missing fields or has the wrong shape."""

    exit_code = DATA_ERROR


class NoCandidateError(BuildTagError):
    """No tag matches the variant and the fallback chain is exhausted."""

    exit_code = NO_CANDIDATE

    def __init__(self, variant: str, pattern: str):
        self.variant = variant
        self.pattern = pattern
        super().__init__(
            f"There is no build tag for the '{variant}' build variant matching "
            f"the '{pattern}' pattern.\n"
            f"Check that a tag with a build number greater than 0 exists for "
            f"'{variant}' and that tags were fetched (git fetch --tags).\n"
            f"Enable stubs or default versions as a fallback if builds without "
            f"a tag are expected."
        )


class AmbiguousBuildNumberError(BuildTagError):
    """Two tags on different commits share the highest build number."""

    exit_code = AMBIGUOUS_TAGS

    def __init__(self, variant: str, build_number: int,
                 first_tag: str, first_commit: str,
                 second_tag: str, second_commit: str):
        self.variant = variant
        self.build_number = build_number
        self.first_tag = first_tag
        self.second_tag = second_tag
        self.first_commit = first_commit
        self.second_commit = second_commit
        super().__init__(
            f"Cannot choose a build tag for '{variant}': build number "
            f"{build_number} is used by more than one commit.\n"
            f"  - {first_tag} (commit {first_commit})\n"
            f"  - {second_tag} (commit {second_commit})\n"
            f"Each build number must map to exactly one build. Delete or "
            f"renumber one of these tags."
        )


class ChronologyViolationError(BuildTagError):
    """A lower build number sits on a commit later than the chosen maximum."""

    exit_code = CHRONOLOGY_ERROR

    def __init__(self, variant: str,
                 candidate_tag: str, candidate_commit: str, candidate_number: int,
                 later_tag: str, later_commit: str, later_number: int,
                 candidate_position: Optional[int] = None,
                 later_position: Optional[int] = None):
        self.variant = variant
        self.candidate_tag = candidate_tag
        self.candidate_commit = candidate_commit
        self.candidate_number = candidate_number
        self.later_tag = later_tag
        self.later_commit = later_commit
        self.later_number = later_number
        self.candidate_position = candidate_position
        self.later_position = later_position
        super().__init__(
            f"Incorrect tag order detected for '{variant}'.\n"
            f"  Highest build number: {candidate_tag}\n"
            f"    - commit {candidate_commit}\n"
            f"    - build number {candidate_number}\n"
            f"  Later commit with a lower build number: {later_tag}\n"
            f"    - commit {later_commit}\n"
            f"    - build number {later_number}\n"
            f"A lower build number was tagged after a higher one. The build "
            f"number was decreased or the git history is inconsistent."
        )
