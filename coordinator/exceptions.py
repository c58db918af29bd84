class CeremonySetupError(RuntimeError):
    """
    Base class for every error that terminates a ceremony setup run.
    None of these are retried; the operator fixes the cause and runs again.
    """


class CollectionError(CeremonySetupError):
    """No eligible circuit files were found, or a requested one is unavailable."""


class MetadataParseError(CeremonySetupError):
    """A required field is missing from a circuit statistics report."""


class DownloadError(CeremonySetupError):
    """A Powers of Tau parameter file could not be fetched."""


class ComputeError(CeremonySetupError):
    """The external zkey computation failed."""


class UploadError(CeremonySetupError):
    """A storage write or existence check failed."""


class RegistrationError(CeremonySetupError):
    """The registration service call failed or was rejected."""
