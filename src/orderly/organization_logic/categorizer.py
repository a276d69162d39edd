"""
Category rule evaluation.
"""

import logging
from collections import Counter
from fnmatch import fnmatchcase
from typing import Dict, Iterable, Optional, Sequence

from ..utils.config_manager import CategoryRule

logger = logging.getLogger(__name__)

UNCATEGORIZED = "uncategorized"


def matches_rule(extension: str, filename: str, rule: CategoryRule) -> bool:
    """Check whether a file satisfies a single category rule.

    Args:
        extension: File extension including the dot
        filename: Basename of the file, matched against the rule's patterns
        rule: Category rule to test

    Returns:
        True if the extension is listed and any declared pattern matches
    """
    if extension.lower() not in rule.extensions:
        return False

    if rule.patterns:
        return any(fnmatchcase(filename, pattern) for pattern in rule.patterns)

    return True


def categorize(
    extension: str, filename: str, category_rules: Sequence[CategoryRule]
) -> Optional[CategoryRule]:
    """Return the first rule in declared order that matches the file."""
    for rule in category_rules:
        if matches_rule(extension, filename, rule):
            return rule
    return None


def get_category_summary(files: Iterable) -> Dict[str, int]:
    """Count discovered files per category name."""
    summary = Counter(f.category or UNCATEGORIZED for f in files)
    return dict(summary)
