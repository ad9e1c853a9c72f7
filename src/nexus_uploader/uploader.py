"""Sequential artifact uploader with per-artifact failure isolation."""

import logging
import os
from typing import BinaryIO

from nexus_uploader.api_client import NexusClient, asset_filename
from nexus_uploader.errors import ArtifactError, UploadError
from nexus_uploader.models import NEXUS2, NEXUS3, ArtifactDescriptor, FailureLedger, UploadSession

module_logger = logging.getLogger(__name__)


class ArtifactUploader:
    """Uploads the artifacts of a session one at a time, recording failures."""

    def __init__(self, api_client: NexusClient, logger: logging.Logger | None = None) -> None:
        """Initialize artifact uploader.

        Args:
            api_client: Nexus API client instance
            logger: Logger receiving progress messages; defaults to this module's logger
        """
        self.api_client = api_client
        self.logger = logger or module_logger

    def upload_artifacts(self, session: UploadSession, ledger: FailureLedger) -> None:
        """Upload every artifact of the session in order.

        A failing artifact is added to ``ledger`` and never stops the
        remaining uploads.

        Args:
            session: Validated upload session
            ledger: Ledger receiving failed artifacts, possibly already populated

        Raises:
            UploadError: If the ledger holds any entry once all uploads are done
        """
        total = len(session.artifacts)
        rejected = len(ledger)
        self._log_configuration(session)

        for index, artifact in enumerate(session.artifacts, start=1):
            self._upload_artifact(session, artifact, ledger, index, total)

        # rejected artifacts count toward Total and Failed but were never uploaded
        failed = len(ledger)
        self.logger.info("Upload Summary:")
        self.logger.info(
            f"  Total: {total + rejected}, Successful: {total + rejected - failed}, Failed: {failed}"
        )

        if ledger:
            raise UploadError("some artifacts failed to upload")

    def _log_configuration(self, session: UploadSession) -> None:
        self.logger.info("Upload Configuration:")
        self.logger.info(f"  Nexus Version: {session.nexus_version}")
        self.logger.info(f"  Server URL: {session.server_url}")
        self.logger.info(f"  Repository: {session.repository}")
        self.logger.info(f"  Format: {session.format}")
        self.logger.info(f"  Total artifacts: {len(session.artifacts)}")

    def _upload_artifact(
        self,
        session: UploadSession,
        artifact: ArtifactDescriptor,
        ledger: FailureLedger,
        index: int,
        total: int,
    ) -> None:
        """Open, upload and close a single artifact.

        Args:
            session: Upload session
            artifact: Artifact to upload
            ledger: Ledger receiving the failure, if any
            index: 1-based position of the artifact
            total: Number of artifacts in the session
        """
        try:
            content = open(artifact.file, "rb")
        except OSError as e:
            self.logger.error(f"Could not open {artifact.file}: {e}")
            ledger.add(artifact, f"could not open file: {e}")
            return

        with content:
            self._log_artifact(artifact, content, index, total)
            try:
                self._dispatch(session, artifact, content)
            except ArtifactError as e:
                self.logger.error(f"Failed to upload {artifact.file}: {e}")
                ledger.add(artifact, f"upload failed: {e}")
                return

        self.logger.info(
            f"[OK] Successfully uploaded: {asset_filename(artifact.file)} -> {artifact.coordinates}"
        )

    def _dispatch(
        self, session: UploadSession, artifact: ArtifactDescriptor, content: BinaryIO
    ) -> None:
        if session.nexus_version == NEXUS2:
            self.api_client.upload_nexus2(session, artifact, content)
        elif session.nexus_version == NEXUS3:
            self.api_client.upload_nexus3(session, artifact, content)
        else:
            raise ArtifactError(f"unsupported nexus version '{session.nexus_version}'")

    def _log_artifact(
        self, artifact: ArtifactDescriptor, content: BinaryIO, index: int, total: int
    ) -> None:
        self.logger.info(f"Uploading artifact {index}/{total}:")

        size_mb = os.fstat(content.fileno()).st_size / (1024 * 1024)
        self.logger.info(f"  File: {artifact.file} ({size_mb:.2f} MB)")

        self.logger.info(f"  ArtifactId: {artifact.artifact_id}")
        if artifact.group_id:
            self.logger.info(f"  GroupId: {artifact.group_id}")
        self.logger.info(f"  Version: {artifact.version}")
        self.logger.info(f"  Type: {artifact.type}")
        if artifact.classifier:
            self.logger.info(f"  Classifier: {artifact.classifier}")
