"""Nexus Uploader - Upload build artifacts to Nexus 2 and Nexus 3 repositories."""

__version__ = "0.1.0"

from nexus_uploader.api_client import NexusClient
from nexus_uploader.arguments import UploadMode, validate_args
from nexus_uploader.errors import ArtifactError, ConfigError, NexusUploaderError, UploadError
from nexus_uploader.models import ArtifactDescriptor, FailedArtifact, FailureLedger, RawInput, UploadSession
from nexus_uploader.uploader import ArtifactUploader

__all__ = [
    "NexusClient",
    "UploadMode",
    "validate_args",
    "ArtifactError",
    "ConfigError",
    "NexusUploaderError",
    "UploadError",
    "ArtifactDescriptor",
    "FailedArtifact",
    "FailureLedger",
    "RawInput",
    "UploadSession",
    "ArtifactUploader",
]
