"""
Filename naming conventions.

Only the stem of a filename is transformed; the extension is lowercased and
reattached as-is.
"""

import os
import re
import logging
from dataclasses import dataclass

logger = logging.getLogger(__name__)

KEBAB_CASE = "kebab-case"
SNAKE_CASE = "snake_case"
CAMEL_CASE = "camelCase"
PASCAL_CASE = "PascalCase"

CONVENTION_TYPES = (KEBAB_CASE, SNAKE_CASE, CAMEL_CASE, PASCAL_CASE)

_CASE_BOUNDARY = re.compile(r"([a-z])([A-Z])")
_SEPARATOR_RUN = re.compile(r"[-_\s]+(.)?")
_SEPARATOR = re.compile(r"[-_\s]")


@dataclass(frozen=True)
class NamingConvention:
    """A naming convention applied to file stems."""

    type: str = KEBAB_CASE
    lowercase: bool = False


def to_kebab_case(text: str) -> str:
    text = _CASE_BOUNDARY.sub(r"\1-\2", text)
    text = re.sub(r"[\s_]+", "-", text)
    text = re.sub(r"[^a-zA-Z0-9-]", "", text)
    return text.lower()


def to_snake_case(text: str) -> str:
    text = _CASE_BOUNDARY.sub(r"\1_\2", text)
    text = re.sub(r"[\s-]+", "_", text)
    text = re.sub(r"\W", "", text, flags=re.ASCII)
    return text.lower()


def _collapse_separators(text: str) -> str:
    """Drop separator runs, uppercasing the character that follows each."""
    return _SEPARATOR_RUN.sub(
        lambda match: match.group(1).upper() if match.group(1) else "", text
    )


def to_camel_case(text: str) -> str:
    text = _collapse_separators(text.lower())
    return text[:1].lower() + text[1:]


def to_pascal_case(text: str) -> str:
    text = _collapse_separators(text.lower())
    return text[:1].upper() + text[1:]


_TRANSFORMS = {
    KEBAB_CASE: to_kebab_case,
    SNAKE_CASE: to_snake_case,
    CAMEL_CASE: to_camel_case,
    PASCAL_CASE: to_pascal_case,
}


def _is_canonical_compound(stem: str, convention_type: str) -> bool:
    """Check whether a stem already satisfies camelCase or PascalCase.

    A stem without separators whose first character already has the
    required case is a fixed point; lowercasing it again would destroy
    its internal capitals.
    """
    if not stem or _SEPARATOR.search(stem):
        return False
    if convention_type == CAMEL_CASE:
        return not stem[0].isupper()
    if convention_type == PASCAL_CASE:
        return not stem[0].islower()
    return False


def apply_convention(filename: str, convention: NamingConvention) -> str:
    """Compute the canonical filename under a naming convention.

    Args:
        filename: Basename of the file (no directory part)
        convention: Naming convention to apply

    Returns:
        Canonical filename with a lowercased extension
    """
    stem, extension = os.path.splitext(filename)

    transform = _TRANSFORMS.get(convention.type)
    if transform is None:
        logger.warning(f"Unknown naming convention: {convention.type}")
        converted = stem
    elif _is_canonical_compound(stem, convention.type):
        converted = stem
    else:
        converted = transform(stem)

    if convention.lowercase and convention.type in (KEBAB_CASE, SNAKE_CASE):
        converted = converted.lower()

    # A stem made only of stripped characters is left alone.
    if not converted:
        return filename

    return converted + extension.lower()


def needs_rename(filename: str, convention: NamingConvention) -> bool:
    """Check whether a filename differs from its canonical form."""
    return apply_convention(filename, convention) != filename
