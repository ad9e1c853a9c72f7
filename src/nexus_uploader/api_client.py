"""Nexus repository client for the v2 direct and v3 component upload protocols."""

import logging
from pathlib import PureWindowsPath
from typing import Any, BinaryIO

import httpx

from nexus_uploader.errors import ArtifactError
from nexus_uploader.models import ArtifactDescriptor, UploadSession

logger = logging.getLogger(__name__)

# Nexus 3 component upload endpoint
COMPONENTS_ENDPOINT = "/service/rest/v1/components"


def nexus2_artifact_url(session: UploadSession, artifact: ArtifactDescriptor) -> str:
    """Build the direct upload URL of an artifact for a Nexus 2 repository.

    Args:
        session: Upload session
        artifact: Artifact to upload

    Returns:
        The target URL, or an empty string if the format has no direct layout
    """
    base = f"{session.server_url}/repository/{session.repository}"

    if session.format == "maven2":
        return (
            f"{base}/{artifact.group_id}/{artifact.artifact_id}/{artifact.version}/"
            f"{artifact.artifact_id}-{artifact.version}.{artifact.type}"
        )
    if session.format == "yum":
        return f"{base}/{artifact.artifact_id}/{artifact.version}"
    if session.format == "raw":
        return f"{base}/{artifact.group_id}/{artifact.artifact_id}.{artifact.type}"

    logger.warning(f"Unsupported format for direct upload: {session.format}")
    return ""


def nexus3_form_fields(session: UploadSession, artifact: ArtifactDescriptor) -> tuple[dict[str, str], str]:
    """Build the multipart metadata fields and the asset field name for Nexus 3.

    Args:
        session: Upload session
        artifact: Artifact to upload

    Returns:
        Tuple of (form fields, name of the file field)
    """
    if session.format == "maven2":
        fields = {
            "maven2.groupId": artifact.group_id,
            "maven2.artifactId": artifact.artifact_id,
            "maven2.version": artifact.version,
            "maven2.asset1.extension": artifact.type,
        }
        return fields, "maven2.asset1"
    if session.format == "raw":
        fields = {
            "raw.directory": artifact.group_id,
            "raw.asset1.filename": f"{artifact.artifact_id}.{artifact.type}",
        }
        return fields, "raw.asset1"
    return {}, f"{session.format}.asset"


def asset_filename(path: str) -> str:
    """Return the final component of ``path``, accepting ``/`` and ``\\`` separators."""
    return PureWindowsPath(path).name


class NexusClient:
    """Client for uploading artifacts to a Nexus repository using httpx."""

    def __init__(self, username: str, password: str, timeout: float = 30.0) -> None:
        """Initialize Nexus client.

        Args:
            username: Basic auth user name
            password: Basic auth password
            timeout: Transport timeout in seconds
        """
        self.username = username
        self.password = password
        self.timeout = timeout
        self._client: httpx.Client | None = None

    def __enter__(self) -> "NexusClient":
        """Context manager entry."""
        self._client = httpx.Client(
            auth=httpx.BasicAuth(self.username, self.password),
            timeout=self.timeout,
        )
        return self

    def __exit__(self, *args: Any) -> None:
        """Context manager exit."""
        if self._client:
            self._client.close()
        self._client = None

    @property
    def client(self) -> httpx.Client:
        """Get the httpx Client instance.

        Raises:
            RuntimeError: If client is used outside of context manager
        """
        if self._client is None:
            raise RuntimeError("Client must be used within context manager")
        return self._client

    def upload_nexus2(
        self, session: UploadSession, artifact: ArtifactDescriptor, content: BinaryIO
    ) -> None:
        """Upload an artifact with a direct PUT to its repository path.

        Args:
            session: Upload session
            artifact: Artifact to upload
            content: Open binary file holding the artifact

        Raises:
            ArtifactError: If the format has no direct layout or the upload fails
        """
        url = nexus2_artifact_url(session, artifact)
        if not url:
            raise ArtifactError(f"unsupported format for direct upload: {session.format}")

        logger.debug(f"PUT {url}")
        response = self._send(
            "PUT",
            url,
            content=content.read(),
            headers={"Content-Type": "application/octet-stream"},
        )
        self._check_response(response)

    def upload_nexus3(
        self, session: UploadSession, artifact: ArtifactDescriptor, content: BinaryIO
    ) -> None:
        """Upload an artifact through the Nexus 3 components API.

        Args:
            session: Upload session
            artifact: Artifact to upload
            content: Open binary file holding the artifact

        Raises:
            ArtifactError: If the upload fails
        """
        url = f"{session.server_url}{COMPONENTS_ENDPOINT}"
        data, asset_field = nexus3_form_fields(session, artifact)
        files = {
            asset_field: (asset_filename(artifact.file), content.read(), "application/octet-stream")
        }

        logger.debug(f"POST {url}?repository={session.repository} ({asset_field})")
        response = self._send(
            "POST",
            url,
            params={"repository": session.repository},
            data=data,
            files=files,
        )
        self._check_response(response)

    def _send(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        """Send a request, turning transport failures into artifact errors."""
        try:
            return self.client.request(method, url, **kwargs)
        except httpx.RequestError as e:
            logger.warning(f"Network error during {method} {url}: {e}")
            raise ArtifactError(f"Network error: {e}") from e

    def _check_response(self, response: httpx.Response) -> None:
        """Fail on error statuses, keeping the response body for the message.

        Args:
            response: The httpx Response object

        Raises:
            ArtifactError: If the status code is 400 or above
        """
        body = response.text

        if response.status_code >= 400:
            logger.error(f"Upload failed with status: {response.status_code}")
            if body:
                logger.error(f"Response body: {body}")
                raise ArtifactError(f"Upload failed with status {response.status_code}: {body}")
            raise ArtifactError(f"Upload failed with status {response.status_code}")

        if body:
            logger.debug(f"Upload successful. Response: {body}")
