"""
Task identifier extraction.

Identifiers look like ``<PREFIX>-<digits>`` (``GEN-6250``). They are matched
case-insensitively in the pull request title and branch name and always
returned upper-cased.
"""

import re
from typing import List


def task_id_pattern(prefix: str) -> "re.Pattern[str]":
    """Compile the identifier pattern for a configured prefix (escaped, case-insensitive)."""
    return re.compile(rf"{re.escape(prefix)}-\d+", re.IGNORECASE)


def extract_task_ids(title: str, branch: str, prefix: str) -> List[str]:
    """
    Extract task identifiers referenced by a pull request.

    Title matches come first, then branch matches; duplicates are dropped by
    their normalized value, keeping the first occurrence. No match is a
    valid, empty result.

    Args:
        title: Pull request title
        branch: Head branch name
        prefix: Identifier prefix (e.g. 'GEN')

    Returns:
        Ordered, de-duplicated upper-case identifiers
    """
    pattern = task_id_pattern(prefix)
    matches = [m.upper() for m in pattern.findall(title)]
    matches += [m.upper() for m in pattern.findall(branch)]
    return list(dict.fromkeys(matches))


def task_id_number(task_id: str) -> int:
    """
    Return the numeric suffix of an identifier (``GEN-6250`` -> ``6250``).

    Raises:
        ValueError: If the identifier has no numeric suffix
    """
    _, sep, number = task_id.rpartition("-")
    if not sep or not number.isdigit():
        raise ValueError(f"Task identifier has no numeric suffix: {task_id!r}")
    return int(number)
