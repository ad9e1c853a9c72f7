"""Data models for the Nexus artifact uploader."""

from dataclasses import dataclass, field
from typing import Any, Iterator

from pydantic import BaseModel, ConfigDict, Field, field_validator

NEXUS2 = "nexus2"
NEXUS3 = "nexus3"
NEXUS_VERSIONS = (NEXUS2, NEXUS3)

# Plain YAML null spellings, which the string-preserving loader leaves as text
YAML_NULLS = {"null", "Null", "NULL", "~"}


@dataclass(frozen=True)
class RawInput:
    """Plugin inputs exactly as supplied by the pipeline, all strings."""

    username: str = ""
    password: str = ""
    server_url: str = ""
    protocol: str = ""
    repository: str = ""
    group_id: str = ""
    format: str = ""
    nexus_version: str = ""
    artifacts: str = ""
    filename: str = ""
    attributes: str = ""


class ArtifactRecord(BaseModel):
    """One entry of the structured artifact list."""

    model_config = ConfigDict(
        populate_by_name=True,
        coerce_numbers_to_str=True,
        extra="ignore",
    )

    file: str = ""
    artifact_id: str = Field(default="", alias="artifactId")
    type: str = ""
    version: str = ""
    group_id: str = Field(default="", alias="groupId")
    classifier: str = ""

    @field_validator("file", "artifact_id", "type", "version", "group_id", "classifier", mode="before")
    @classmethod
    def _null_to_empty(cls, value: object) -> object:
        if value is None or (isinstance(value, str) and value in YAML_NULLS):
            return ""
        return value


@dataclass(frozen=True)
class ArtifactDescriptor:
    """A file plus the repository coordinates it is stored under."""

    file: str
    artifact_id: str
    version: str
    type: str
    group_id: str = ""
    classifier: str = ""

    @property
    def coordinates(self) -> str:
        """Return ``group:artifact:version``, or ``artifact:version`` without a group."""
        if self.group_id:
            return f"{self.group_id}:{self.artifact_id}:{self.version}"
        return f"{self.artifact_id}:{self.version}"


@dataclass(frozen=True)
class UploadSession:
    """Validated, normalized settings for one upload run."""

    username: str
    password: str
    server_url: str
    nexus_version: str
    format: str
    repository: str
    group_id: str
    artifacts: tuple[ArtifactDescriptor, ...] = ()


@dataclass(frozen=True)
class FailedArtifact:
    """An artifact that was rejected or failed to upload."""

    file: str
    artifact_id: str
    err: str

    def to_dict(self) -> dict[str, str]:
        """Return the record with the camelCase keys used in the output variable."""
        return {"file": self.file, "artifactId": self.artifact_id, "err": self.err}


@dataclass
class FailureLedger:
    """Append-only record of the failed artifacts of a single run."""

    _entries: list[FailedArtifact] = field(default_factory=list)

    def add(self, artifact: ArtifactDescriptor | ArtifactRecord, message: str) -> FailedArtifact:
        """Record a failure for ``artifact``.

        Args:
            artifact: The artifact that failed, validated or not
            message: Human-readable cause

        Returns:
            The recorded entry
        """
        entry = FailedArtifact(
            file=artifact.file,
            artifact_id=artifact.artifact_id,
            err=message,
        )
        self._entries.append(entry)
        return entry

    @property
    def entries(self) -> tuple[FailedArtifact, ...]:
        """Return a snapshot of the recorded failures."""
        return tuple(self._entries)

    def to_list(self) -> list[dict[str, Any]]:
        """Return the failures as JSON-ready dicts, in order."""
        return [entry.to_dict() for entry in self._entries]

    def __iter__(self) -> Iterator[FailedArtifact]:
        return iter(tuple(self._entries))

    def __len__(self) -> int:
        return len(self._entries)

    def __bool__(self) -> bool:
        return bool(self._entries)
