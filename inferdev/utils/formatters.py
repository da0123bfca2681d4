"""Formatting helpers for recommendation results."""

from typing import Any, Dict, List, Mapping, Optional


def rank_scores(scores: Mapping[str, float]) -> List[Dict[str, Any]]:
    """Order job scores from highest to lowest.

    Equal scores keep their original order. Each entry carries the score's
    ratio to the best score, which is what the result bars are drawn from.

    Args:
        scores: Job ID to score mapping

    Returns:
        List[Dict[str, Any]]: Entries with ``job_id``, ``score`` and ``ratio``
    """
    if not scores:
        return []

    top = max(scores.values())
    ranked = sorted(scores.items(), key=lambda item: item[1], reverse=True)

    return [
        {
            "job_id": job_id,
            "score": score,
            "ratio": round(score / top, 4) if top > 0 else 0.0,
        }
        for job_id, score in ranked
    ]


def format_ratio(value: Optional[float]) -> Optional[str]:
    """Render a 0-1 value such as readiness or confidence as a percentage.

    Args:
        value: Value in [0, 1]; out of range values are clamped

    Returns:
        Optional[str]: e.g. ``"73%"``, or None when no value is given
    """
    if value is None:
        return None
    clamped = min(max(float(value), 0.0), 1.0)
    return f"{round(clamped * 100)}%"
