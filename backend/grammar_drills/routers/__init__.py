"""API routers."""

from grammar_drills.routers import exercises, health, topics, users, versions

__all__ = ["exercises", "health", "topics", "users", "versions"]
