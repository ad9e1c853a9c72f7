"""Validation and normalization of plugin inputs into an upload session."""

import enum
import logging
import re

import yaml
from pydantic import TypeAdapter, ValidationError

from nexus_uploader.errors import ConfigError
from nexus_uploader.models import (
    NEXUS3,
    NEXUS_VERSIONS,
    ArtifactDescriptor,
    ArtifactRecord,
    FailureLedger,
    RawInput,
    UploadSession,
)

logger = logging.getLogger(__name__)

# Keys understood in the legacy ``-C<key>=<value> -A<key>=<value>`` attribute string
ATTRIBUTE_PATTERN = re.compile(r"-(CgroupId|CartifactId|Cversion|Aextension|Aclassifier)=(\S+)")

# CartifactId is parsed but was never enforced for single-file uploads
REQUIRED_ATTRIBUTES = ("CgroupId", "Cversion", "Aextension", "Aclassifier")

_artifact_list_adapter = TypeAdapter(list[ArtifactRecord])


class UploadMode(enum.Enum):
    """Input shape of a run."""

    SINGLE_FILE = "single-file"
    MULTI_FILE = "multi-file"


def resolve_upload_mode(raw: RawInput) -> UploadMode:
    """Decide whether the inputs describe a single-file or multi-file upload.

    Args:
        raw: Plugin inputs

    Returns:
        The upload mode

    Raises:
        ConfigError: If neither or both of attributes and artifacts are set
    """
    if raw.attributes and not raw.artifacts:
        return UploadMode.SINGLE_FILE
    if raw.artifacts and not raw.attributes:
        return UploadMode.MULTI_FILE
    if not raw.attributes and not raw.artifacts:
        raise ConfigError("both 'attributes' and 'artifacts' cannot be empty")
    raise ConfigError("both 'attributes' and 'artifacts' provided, which is ambiguous")


def strip_trailing_slashes(url: str) -> str:
    """Remove every trailing ``/`` from ``url``."""
    return url.rstrip("/")


def _require(fields: list[tuple[str, str]]) -> None:
    for name, value in fields:
        if not value:
            raise ConfigError(f"{name} cannot be empty")


def parse_artifact_list(text: str) -> list[ArtifactRecord]:
    """Decode the structured artifact list.

    The list is YAML, so a JSON array is accepted as well. Scalars are kept
    as strings, so a version such as 1.10 or an empty field survive intact.

    Args:
        text: Serialized artifact list

    Returns:
        Artifact records in input order

    Raises:
        ConfigError: If the text is not valid YAML or does not match the schema
    """
    try:
        data = yaml.load(text, Loader=yaml.BaseLoader)
    except yaml.YAMLError as e:
        raise ConfigError(f"Error decoding YAML: {e}") from e

    if data is None:
        return []

    try:
        return _artifact_list_adapter.validate_python(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid artifact list: {e}") from e


def _missing_artifact_fields(record: ArtifactRecord) -> list[str]:
    missing = []
    if not record.artifact_id:
        missing.append("ArtifactId")
    if not record.file:
        missing.append("File")
    if not record.type:
        missing.append("Type")
    if not record.version:
        missing.append("Version")
    return missing


def validate_multi_file_args(raw: RawInput, ledger: FailureLedger) -> UploadSession:
    """Build a session from multi-file inputs.

    Artifacts with missing fields do not fail the run: they are recorded in
    ``ledger`` and left out of the session.

    Args:
        raw: Plugin inputs
        ledger: Ledger receiving rejected artifacts

    Returns:
        Session holding the valid artifacts in input order

    Raises:
        ConfigError: If a batch-level input is missing or the artifact list is malformed
    """
    _require(
        [
            ("username", raw.username),
            ("password", raw.password),
            ("protocol", raw.protocol),
            ("serverUrl", raw.server_url),
            ("nexusVersion", raw.nexus_version),
            ("repository", raw.repository),
            ("groupId", raw.group_id),
            ("format", raw.format),
        ]
    )

    if raw.nexus_version not in NEXUS_VERSIONS:
        raise ConfigError(
            f"nexusVersion must be one of {', '.join(NEXUS_VERSIONS)}, got '{raw.nexus_version}'"
        )

    server_url = f"{raw.protocol}://{strip_trailing_slashes(raw.server_url)}"
    records = parse_artifact_list(raw.artifacts)

    artifacts: list[ArtifactDescriptor] = []
    for record in records:
        if not record.group_id:
            record = record.model_copy(update={"group_id": raw.group_id})

        missing = _missing_artifact_fields(record)
        if missing:
            logger.warning(
                f"Skipping artifact '{record.file or record.artifact_id}': "
                f"missing {', '.join(missing)}"
            )
            ledger.add(record, f"Missing fields: {', '.join(missing)}")
            continue

        artifacts.append(
            ArtifactDescriptor(
                file=record.file,
                artifact_id=record.artifact_id,
                version=record.version,
                type=record.type,
                group_id=record.group_id,
                classifier=record.classifier,
            )
        )

    return UploadSession(
        username=raw.username,
        password=raw.password,
        server_url=server_url,
        nexus_version=raw.nexus_version,
        format=raw.format,
        repository=raw.repository,
        group_id=raw.group_id,
        artifacts=tuple(artifacts),
    )


def parse_attributes(text: str) -> dict[str, str]:
    """Extract the recognized ``-<key>=<value>`` tokens from a legacy attribute string.

    Unrecognized tokens are ignored; a repeated key keeps its last value.
    """
    return {key: value for key, value in ATTRIBUTE_PATTERN.findall(text)}


def validate_single_file_args(raw: RawInput) -> UploadSession:
    """Build a session holding exactly one artifact from legacy inputs.

    Args:
        raw: Plugin inputs

    Returns:
        Nexus 3 session with a single artifact

    Raises:
        ConfigError: If a required input or attribute is missing
    """
    _require(
        [
            ("username", raw.username),
            ("password", raw.password),
            ("serverUrl", raw.server_url),
            ("filename", raw.filename),
            ("format", raw.format),
            ("repository", raw.repository),
        ]
    )

    values = parse_attributes(raw.attributes)
    _require([(key, values.get(key, "")) for key in REQUIRED_ATTRIBUTES])

    artifact = ArtifactDescriptor(
        file=raw.filename,
        artifact_id=values.get("CartifactId", ""),
        version=values["Cversion"],
        type=values["Aextension"],
        group_id=values["CgroupId"],
        classifier=values["Aclassifier"],
    )
    return UploadSession(
        username=raw.username,
        password=raw.password,
        server_url=strip_trailing_slashes(raw.server_url),
        nexus_version=NEXUS3,
        format=raw.format,
        repository=raw.repository,
        group_id=values["CgroupId"],
        artifacts=(artifact,),
    )


def validate_args(raw: RawInput) -> tuple[UploadSession, FailureLedger]:
    """Resolve the upload mode and validate the inputs for it.

    Args:
        raw: Plugin inputs

    Returns:
        The session and a ledger pre-populated with rejected artifacts

    Raises:
        ConfigError: If the inputs cannot describe a valid run
    """
    mode = resolve_upload_mode(raw)
    logger.debug(f"Resolved upload mode: {mode.value}")

    ledger = FailureLedger()
    if mode is UploadMode.MULTI_FILE:
        session = validate_multi_file_args(raw, ledger)
    else:
        session = validate_single_file_args(raw)

    logger.info(
        f"Validated {mode.value} upload: {len(session.artifacts)} artifact(s) to upload, "
        f"{len(ledger)} rejected"
    )
    return session, ledger
