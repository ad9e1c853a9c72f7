"""Exceptions raised by the Nexus artifact uploader."""


class NexusUploaderError(Exception):
    """Base exception for uploader errors."""

    pass


class ConfigError(NexusUploaderError):
    """Exception raised for missing, malformed or ambiguous plugin inputs."""

    pass


class ArtifactError(NexusUploaderError):
    """Exception raised when a single artifact fails to upload."""

    pass


class UploadError(NexusUploaderError):
    """Exception raised after a run in which some artifacts failed."""

    pass
