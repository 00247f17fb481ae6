"""Hazard Certifier exception hierarchy.

All public exceptions inherit from HazardCertifierError, giving callers a
single base class to catch when they want to handle any analysis failure
without swallowing unrelated errors.

Compliance findings (missing hazards, hazards a device does not allow,
mandatory actions that were never supplied) are ordinary analysis output
and are never raised.
"""


class HazardCertifierError(Exception):
    """Base exception for all Hazard Certifier errors."""


class SourceError(HazardCertifierError):
    """Raised when a device or firmware source cannot be read.

    Covers missing paths, unreadable directories and files. Always fatal:
    the whole run is aborted.
    """


class ConcurrencyError(HazardCertifierError):
    """Raised when a concurrent pipeline run fails.

    Covers unexpected exceptions raised by a pipeline role (source,
    transform or aggregate) and hand-offs that fail because the peer
    role already terminated.
    """


class ManifestError(HazardCertifierError):
    """Raised for compliance manifest path or write failures."""


class ConfigError(HazardCertifierError):
    """Raised when analyzer settings cannot be loaded or are invalid."""
