"""Invitation email adapter."""

from .client import RecordingNotificationDispatcher, ResendNotificationDispatcher

__all__ = ["RecordingNotificationDispatcher", "ResendNotificationDispatcher"]
