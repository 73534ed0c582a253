from __future__ import annotations


class CareerCoreError(Exception):
    """Base class for errors raised by the assessment pipeline."""


class InvalidSubmissionError(CareerCoreError):
    pass


class UnknownUserError(CareerCoreError):
    pass


class UnverifiedUserError(CareerCoreError):
    pass


class ProviderError(CareerCoreError):
    """The recommendation provider is unavailable or answered with junk."""


class StorageError(CareerCoreError):
    pass
