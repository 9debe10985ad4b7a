import re
from typing import Iterable, List

from slidestudio.config import MAX_SNIPPETS_PER_SLIDE

_WHITESPACE_RUN = re.compile(r"\s+")


def normalize_whitespace(text: str) -> str:
    """Collapse whitespace runs (newlines and tabs included) to one space and trim."""
    return _WHITESPACE_RUN.sub(" ", text).strip()


def summarize_snippets(
    snippets: Iterable[str], max_snippets: int = MAX_SNIPPETS_PER_SLIDE
) -> List[str]:
    """
    Turn raw text candidates into the snippet set shown for a slide.

    Candidates are whitespace-normalized, empty ones dropped and duplicates
    removed keeping the first occurrence. Only the first ``max_snippets``
    distinct values are returned; the rest are dropped silently.
    """
    seen: set[str] = set()
    result: List[str] = []
    if max_snippets <= 0:
        return result
    for snippet in snippets:
        normalized = normalize_whitespace(snippet)
        if not normalized or normalized in seen:
            continue
        seen.add(normalized)
        result.append(normalized)
        if len(result) >= max_snippets:
            break
    return result
