"""
Error taxonomy for profile computation.

Only the validation errors ever reach a caller. The capability errors
are raised inside the pillar resolver and turned into the stub fallback.
"""


class ProfileError(Exception):
    """Base class for every error raised by this package."""


class IncompleteInput(ProfileError, ValueError):
    """Name, birth date, birth time or focus areas are missing."""


class InvalidYear(ProfileError, ValueError):
    """Birth year is not an integer in [1000, 9999]."""


class MalformedInput(ProfileError, ValueError):
    """Birth date, birth time or UTC offset text is not in the expected shape."""


class CapabilityUnavailable(ProfileError):
    """The calendar converter module is missing or failed to load."""


class ConversionFailed(ProfileError):
    """The converter loaded but produced nothing usable for either call shape."""
