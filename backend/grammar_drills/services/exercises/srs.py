"""
Review Scheduling for Cached Exercises

A cached exercise is due for a user when it has never been served to them,
or when at least repetition_counter² days have passed since it was last
served. Every serving counts as a successful review: mistakes and hints
reported by the client do not shorten the interval.

    counter   interval
    0         0 days (always due)
    1         1 day
    2         4 days
    3         9 days

All functions are pure; "now" is always passed in.

Usage:
    from grammar_drills.services.exercises import srs

    eligible = srs.filter_eligible(cached, views, now)
    batch = srs.select_batch(eligible, 10, rng)
    updated_views = srs.advance_views(user_id, batch, views, now)
"""

import random
from collections.abc import Mapping, Sequence
from datetime import datetime
from typing import Optional, TypeVar

from grammar_drills.services.records import ExerciseRecord, ViewRecord

T = TypeVar("T")

SECONDS_PER_DAY = 86400.0


def next_review_interval_days(repetition_counter: int) -> float:
    """Days that must pass after a serving before the exercise is due again."""
    return float(repetition_counter**2)


def days_since(last_viewed: datetime, now: datetime) -> float:
    """Fractional days between two timestamps (negative if last_viewed is in the future)."""
    return (now - last_viewed).total_seconds() / SECONDS_PER_DAY


def is_eligible(view: Optional[ViewRecord], now: datetime) -> bool:
    """
    Check whether an exercise is due for a user.

    Args:
        view: The user's view record for the exercise, None if never served
        now: Current time (timezone-aware)

    Returns:
        True if the exercise may be served again
    """
    if view is None:
        return True
    return days_since(view.last_viewed, now) >= next_review_interval_days(
        view.repetition_counter
    )


def filter_eligible(
    exercises: Sequence[ExerciseRecord],
    views: Mapping[str, ViewRecord],
    now: datetime,
) -> list[ExerciseRecord]:
    """
    Keep the exercises that are due for a user, preserving order.

    Args:
        exercises: Cached exercises for the topic's current prompt
        views: The user's view records keyed by exercise id
        now: Current time

    Returns:
        Eligible exercises
    """
    return [ex for ex in exercises if is_eligible(views.get(ex.id), now)]


def select_batch(
    items: Sequence[T],
    size: int,
    rng: Optional[random.Random] = None,
) -> list[T]:
    """
    Pick up to `size` items uniformly at random without replacement.

    When there are no more than `size` items, all of them are returned in
    their original order.
    """
    if len(items) <= size:
        return list(items)
    return (rng or random).sample(list(items), size)


def advance_views(
    user_id: str,
    exercises: Sequence[ExerciseRecord],
    views: Mapping[str, ViewRecord],
    now: datetime,
) -> list[ViewRecord]:
    """
    Build the view records to store after serving exercises to a user.

    Existing records keep their id and get their counter incremented; new
    records start at counter 1.

    Args:
        user_id: User the batch was served to
        exercises: Served exercises
        views: The user's view records before serving, keyed by exercise id
        now: Serving time

    Returns:
        One view record per served exercise
    """
    updated = []
    for exercise in exercises:
        previous = views.get(exercise.id)
        updated.append(
            ViewRecord(
                id=previous.id if previous else None,
                user_id=user_id,
                exercise_id=exercise.id,
                last_viewed=now,
                repetition_counter=(previous.repetition_counter if previous else 0) + 1,
            )
        )
    return updated
