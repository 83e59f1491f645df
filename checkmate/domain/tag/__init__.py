"""Tag domain package.

Tags categorize tasks and supply default capacities to sprint health.
"""

from checkmate.domain.tag.models import UNTAGGED_CAPACITY, UNTAGGED_ID, Tag

__all__ = [
    "Tag",
    "UNTAGGED_ID",
    "UNTAGGED_CAPACITY",
]
