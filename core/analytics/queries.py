"""
Data-loading helpers for analytics.
"""

from __future__ import annotations

from typing import Optional

import pandas as pd

from core import fsrs
from core.analytics.constants import EVENT_COLUMNS


def load_review_events_df(user_id: str, sources: Optional[list[str]] = None) -> pd.DataFrame:
    """
    Load a user's review events into a dataframe, oldest first.

    Args:
        user_id: User identifier for scoping review data
        sources: Only keep events from these sources (None keeps all)
    """
    rows = fsrs.get_review_events(user_id)
    if not rows:
        return pd.DataFrame(columns=EVENT_COLUMNS)

    df = pd.DataFrame(rows)[["word_id", "timestamp", "rating", "session_id", "source"]].copy()
    if sources is not None:
        df = df[df["source"].isin(sources)].copy()

    df["timestamp"] = pd.to_datetime(df["timestamp"], utc=True, errors="coerce")
    df = df.dropna(subset=["word_id", "timestamp"])
    df["day_utc"] = df["timestamp"].dt.floor("D")
    return df.sort_values("timestamp").reset_index(drop=True)
