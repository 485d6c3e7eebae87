"""
Keyword merge engine.

Combines a freshly generated keyword batch into a project's collection.
Entries are identified by their exact ``keyword`` text: no case folding or
whitespace normalization, so "SEO Tips" and "seo tips" are distinct.
"""

from dataclasses import replace
from typing import Iterable

from .models import KeywordProject, KeywordResult


def new_keywords(
    project: KeywordProject,
    incoming: Iterable[KeywordResult],
) -> list[KeywordResult]:
    """
    Return the incoming entries a merge would append, in order.

    An entry is new when no existing entry, and no earlier incoming entry,
    has the same keyword text.
    """
    seen = {kw.keyword for kw in project.keywords}
    added: list[KeywordResult] = []
    for kw in incoming:
        if kw.keyword in seen:
            continue
        seen.add(kw.keyword)
        added.append(kw)
    return added


def merge_keywords(
    project: KeywordProject,
    incoming: Iterable[KeywordResult],
) -> KeywordProject:
    """
    Merge a keyword batch into a project.

    Existing entries are kept unchanged and in order; a duplicate incoming
    entry never overwrites the stored one. The caller's project is not
    modified.

    Args:
        project: Project to merge into.
        incoming: Newly generated keyword results.

    Returns:
        A new KeywordProject with the merged keyword list.
    """
    merged = list(project.keywords) + new_keywords(project, incoming)
    return replace(project, keywords=merged)
