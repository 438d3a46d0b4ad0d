"""
Metric computations for the review analytics dashboard.
"""

from __future__ import annotations

import pandas as pd

from core.analytics.constants import RATING_ORDER, RECALLED_RATINGS


def build_day_index(events_df: pd.DataFrame) -> pd.DatetimeIndex:
    """
    Build a dense UTC day index spanning the event range.
    """
    if events_df.empty:
        return pd.DatetimeIndex([], tz="UTC")
    return pd.date_range(
        start=events_df["day_utc"].min(),
        end=events_df["day_utc"].max(),
        freq="D",
        tz="UTC",
    )


def compute_studied_unique(events_df: pd.DataFrame) -> int:
    """
    Count distinct words with at least one review.
    """
    if events_df.empty:
        return 0
    return int(events_df["word_id"].nunique())


def compute_studied_cumulative(
    events_df: pd.DataFrame,
    day_index: pd.DatetimeIndex
) -> pd.Series:
    """
    Running count of distinct reviewed words, by the day each was first seen.
    """
    if events_df.empty or len(day_index) == 0:
        return pd.Series(dtype="int64")

    first_days = events_df.drop_duplicates(subset="word_id", keep="first")["day_utc"]
    per_day = first_days.value_counts()
    return per_day.reindex(day_index, fill_value=0).cumsum().astype("int64")


def compute_daily_reviews(events_df: pd.DataFrame, day_index: pd.DatetimeIndex) -> pd.Series:
    """
    Number of ratings applied per day (0 on idle days).
    """
    if events_df.empty or len(day_index) == 0:
        return pd.Series(dtype="int64")
    counts = events_df.groupby("day_utc").size()
    return counts.reindex(day_index, fill_value=0).astype("int64")


def compute_daily_retention(events_df: pd.DataFrame, day_index: pd.DatetimeIndex) -> pd.Series:
    """
    Share of ratings per day that were recalls (anything but "again").

    Idle days are NaN rather than 0 so charts show a gap.
    """
    if events_df.empty or len(day_index) == 0:
        return pd.Series(dtype="float64")
    recalled = events_df["rating"].isin(RECALLED_RATINGS)
    retention = recalled.groupby(events_df["day_utc"]).mean()
    return retention.reindex(day_index).astype("float64")


def compute_overall_retention(events_df: pd.DataFrame) -> float:
    if events_df.empty:
        return 0.0
    return float(events_df["rating"].isin(RECALLED_RATINGS).mean())


def compute_rating_distribution(events_df: pd.DataFrame) -> pd.Series:
    """
    Count of each rating, in again/hard/good/easy order.
    """
    if events_df.empty:
        return pd.Series(0, index=RATING_ORDER, dtype="int64")
    return events_df["rating"].value_counts().reindex(RATING_ORDER, fill_value=0).astype("int64")


def compute_session_span_daily_hours(
    events_df: pd.DataFrame,
    day_index: pd.DatetimeIndex
) -> pd.Series:
    """
    Daily study time as the sum of session spans (last - first rating).
    """
    if events_df.empty or len(day_index) == 0:
        return pd.Series(dtype="float64")

    in_session = events_df[events_df["session_id"].notna()]
    if in_session.empty:
        return pd.Series(0.0, index=day_index, dtype="float64")

    bounds = in_session.groupby("session_id")["timestamp"].agg(["min", "max"])
    hours = (bounds["max"] - bounds["min"]).dt.total_seconds() / 3600.0
    daily = hours.groupby(bounds["min"].dt.floor("D")).sum()
    return daily.reindex(day_index, fill_value=0.0).astype("float64")
