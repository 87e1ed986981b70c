"""Tag and tag-list validation for registrations.

A tag is a label attached to a registration for targeted sends. Tags are
case-insensitive and serialized as one comma-joined string. At most one
``$InstallationId:{...}`` tag may appear in a list.
"""
import re
from typing import Iterable, Optional, Set


class TagValidator:
    """Validator for registration tags and tag lists.

    The tag-list grammar is kept as two alternatives: an
    ``$InstallationId`` tag first followed by literal tags, or literal tags
    optionally followed by one ``$InstallationId`` tag and more literal tags.
    """

    MAX_TAG_LENGTH = 120

    # Limits enforced by the service on send-time tag expressions
    OR_EXPRESSION_MAX_TAGS = 20
    MIXED_EXPRESSION_MAX_TAGS = 6

    TAG = r"[\w\-_@#.:]+"
    INSTALLATION_ID_TAG = r"\$InstallationId:\{[\w\-_@#.:=]+\}"

    SINGLE_TAG_PATTERN = re.compile(
        rf"(({INSTALLATION_ID_TAG})|({TAG}))", re.IGNORECASE)
    TAG_LIST_PATTERN = re.compile(
        rf"((({INSTALLATION_ID_TAG})+?(,{TAG})*)"
        rf"|(({TAG})(,{TAG})*((,{INSTALLATION_ID_TAG})?(,{TAG})*)))",
        re.IGNORECASE,
    )

    @classmethod
    def validate_tags(cls, tags: Optional[str]) -> bool:
        """Validate a comma-separated tag list.

        Args:
            tags: Serialized tag string, e.g. ``"a,b,$InstallationId:{x}"``

        Returns:
            True if the string is empty or matches the tag-list grammar
        """
        if not tags:
            return True
        return cls.TAG_LIST_PATTERN.fullmatch(tags) is not None

    @classmethod
    def is_valid_tag(cls, tag: Optional[str]) -> bool:
        """Validate a single tag, including the ``$InstallationId`` form."""
        if not tag or not isinstance(tag, str):
            return False
        return (cls.SINGLE_TAG_PATTERN.fullmatch(tag) is not None
                and len(tag) <= cls.MAX_TAG_LENGTH)

    @staticmethod
    def tag_count(tags: str) -> int:
        """Count comma-separated segments without validating them."""
        return len(tags.split(','))


def normalize_tags(tags: Optional[Iterable[str]]) -> Set[str]:
    """Build a tag set, dropping case-insensitive duplicates.

    The first spelling of each tag wins.
    """
    result: Set[str] = set()
    seen: Set[str] = set()
    for tag in tags or ():
        key = tag.lower()
        if key not in seen:
            seen.add(key)
            result.add(tag)
    return result


def join_tags(tags: Optional[Set[str]]) -> Optional[str]:
    """Serialize a tag set to its comma-joined form, or None when empty."""
    if not tags:
        return None
    return ",".join(sorted(tags, key=str.lower))
