"""Review scoring helpers."""

from typing import Iterable, Optional

CATEGORIES = ("punctuality", "quality", "communication", "professionalism")


def category_scores(rating: int, categories: Optional[dict] = None) -> dict[str, int]:
    """Per-category scores; each missing category falls back to the overall rating."""
    categories = categories or {}
    return {name: categories.get(name) or rating for name in CATEGORIES}


def mean_score(scores: Iterable[float]) -> float:
    scores = list(scores)
    if not scores:
        return 0.0
    return float(sum(scores)) / len(scores)
