"""
Error taxonomy for the birthday pipeline.

Invalid data (bad timezone, missing birthday) skips one user or job; DeliveryError is a
transient failure that the dispatcher retries. None of these abort a batch.
"""
from __future__ import annotations


class BirthdayError(Exception):
    """Base class for birthday pipeline errors."""


class InvalidTimezoneError(BirthdayError):
    """Timezone name is not a resolvable IANA identifier."""

    def __init__(self, zone: object):
        self.zone = zone
        super().__init__(f"{zone!r} is not a valid IANA timezone (e.g. Asia/Jakarta)")


class InvalidBirthdayError(BirthdayError):
    """User record has no usable birthday."""


class DeliveryError(BirthdayError):
    """Notifier did not confirm delivery."""
