"""Revision label resolution.

Artifacts carry a human-facing revision (e.g. "02") in their YAML
frontmatter. Labels are resolved per commit so a single unreadable commit
only blanks its own row in a history table.
"""

import logging
from typing import Any

import yaml

from ..constants import NO_REVISION
from ..errors import LabelParseError
from ..models import ArtifactKind
from ..services.artifact_store import ArtifactFileStore

logger = logging.getLogger(__name__)

FRONTMATTER_DELIMITER = "---"


def _split_frontmatter(content: str) -> tuple[list[str], int]:
    """Return content lines and the index of the closing delimiter."""
    lines = content.splitlines()
    if not lines or lines[0].strip() != FRONTMATTER_DELIMITER:
        raise LabelParseError("Content has no frontmatter")
    for index in range(1, len(lines)):
        if lines[index].strip() == FRONTMATTER_DELIMITER:
            return lines, index
    raise LabelParseError("Frontmatter is not closed")


def parse_frontmatter(content: str) -> dict[str, Any]:
    """Parse the YAML frontmatter block at the top of an artifact file.

    Raises:
        LabelParseError: If there is no frontmatter or it is not a YAML mapping
    """
    lines, end = _split_frontmatter(content)
    try:
        data = yaml.safe_load("\n".join(lines[1:end]))
    except yaml.YAMLError as e:
        raise LabelParseError(f"Invalid frontmatter: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise LabelParseError("Frontmatter is not a mapping")
    return data


def _revision_field(content: str, kind_label: str) -> str | None:
    frontmatter = parse_frontmatter(content)
    value = frontmatter.get("revision")
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, str | int | float):
        raise LabelParseError(f"{kind_label} revision has unexpected type {type(value).__name__}")
    revision = str(value).strip()
    return revision or None


def parse_requirement_revision(content: str) -> str | None:
    return _revision_field(content, "Requirement")


def parse_use_case_revision(content: str) -> str | None:
    return _revision_field(content, "Use case")


def parse_test_case_revision(content: str) -> str | None:
    return _revision_field(content, "Test case")


def parse_information_revision(content: str) -> str | None:
    return _revision_field(content, "Information")


def parse_risk_revision(content: str) -> str | None:
    return _revision_field(content, "Risk")


def parse_revision(kind: ArtifactKind, content: str) -> str | None:
    """Extract the revision field of an artifact of the given kind.

    Returns:
        Revision string, or None if the field is absent or empty

    Raises:
        LabelParseError: If the content cannot be parsed
        ValueError: If kind is not an ArtifactKind
    """
    match kind:
        case ArtifactKind.REQUIREMENT:
            return parse_requirement_revision(content)
        case ArtifactKind.USE_CASE:
            return parse_use_case_revision(content)
        case ArtifactKind.TEST_CASE:
            return parse_test_case_revision(content)
        case ArtifactKind.INFORMATION:
            return parse_information_revision(content)
        case ArtifactKind.RISK:
            return parse_risk_revision(content)
        case _:
            raise ValueError(f"Unknown artifact kind: {kind!r}")


def increment_revision(revision: str) -> str:
    """Return the next two-digit revision ("01" -> "02"); invalid input gives "01"."""
    try:
        current = int(revision)
    except (TypeError, ValueError):
        return "01"
    return f"{current + 1:02d}"


def set_revision(content: str, revision: str) -> str:
    """Rewrite (or add) the revision field in an artifact's frontmatter.

    Raises:
        LabelParseError: If the content has no frontmatter
    """
    lines, end = _split_frontmatter(content)
    new_line = f'revision: "{revision}"'
    for index in range(1, end):
        if lines[index].startswith("revision:"):
            lines[index] = new_line
            break
    else:
        lines.insert(end, new_line)
    trailing = "\n" if content.endswith("\n") else ""
    return "\n".join(lines) + trailing


class RevisionLabelResolver:
    """Resolves the revision label of an artifact file at a commit."""

    def __init__(self, store: ArtifactFileStore) -> None:
        self.store = store

    async def label_at_commit(self, kind: ArtifactKind, file_path: str, commit_hash: str) -> str:
        """Get the revision label of file_path at commit_hash.

        Never raises for read or parse failures: missing content, unparsable
        content and an absent revision all resolve to NO_REVISION.
        """
        try:
            content = await self.store.read_file_at_commit(file_path, commit_hash)
        except Exception as e:
            logger.warning("Could not read %s at %s: %s", file_path, commit_hash[:8], e)
            return NO_REVISION

        if content is None:
            logger.debug("No content for %s at %s", file_path, commit_hash[:8])
            return NO_REVISION

        try:
            revision = parse_revision(kind, content)
        except LabelParseError as e:
            logger.warning("Could not parse %s at %s: %s", file_path, commit_hash[:8], e)
            return NO_REVISION

        return revision or NO_REVISION
