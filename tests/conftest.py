"""Pytest configuration and shared fixtures."""

import pytest
from pathlib import Path

from nexus_uploader.models import ArtifactDescriptor, RawInput, UploadSession

SERVER_URL = "https://nexus.example.com"


@pytest.fixture
def artifacts_dir(tmp_path: Path) -> Path:
    """Create a temporary directory with build artifacts.

    Structure:
        temp_dir/
            build/
                app.jar
                lib.jar
                notes.txt
    """
    build = tmp_path / "build"
    build.mkdir()
    (build / "app.jar").write_bytes(b"fake jar content")
    (build / "lib.jar").write_bytes(b"fake lib content")
    (build / "notes.txt").write_text("release notes")
    return build


@pytest.fixture
def credentials() -> tuple[str, str]:
    """Return fake basic auth credentials."""
    return "testUser", "testPass"


@pytest.fixture
def make_session(credentials: tuple[str, str]):
    """Return a factory building upload sessions against the test server."""
    username, password = credentials

    def _make(
        *artifacts: ArtifactDescriptor,
        nexus_version: str = "nexus3",
        format: str = "maven2",
    ) -> UploadSession:
        return UploadSession(
            username=username,
            password=password,
            server_url=SERVER_URL,
            nexus_version=nexus_version,
            format=format,
            repository="repo",
            group_id="com.example",
            artifacts=tuple(artifacts),
        )

    return _make


@pytest.fixture
def multi_file_input(artifacts_dir: Path, credentials: tuple[str, str]) -> RawInput:
    """Return valid multi-file inputs describing two jars."""
    username, password = credentials
    artifacts = (
        f"- file: {artifacts_dir / 'app.jar'}\n"
        "  artifactId: app\n"
        "  type: jar\n"
        "  version: 1.0.0\n"
        f"- file: {artifacts_dir / 'lib.jar'}\n"
        "  artifactId: lib\n"
        "  type: jar\n"
        "  version: 1.0.0\n"
        "  groupId: com.example.lib\n"
    )
    return RawInput(
        username=username,
        password=password,
        server_url="nexus.example.com",
        protocol="https",
        repository="repo",
        group_id="com.example",
        format="maven2",
        nexus_version="nexus3",
        artifacts=artifacts,
    )


@pytest.fixture
def single_file_input(artifacts_dir: Path, credentials: tuple[str, str]) -> RawInput:
    """Return valid legacy single-file inputs."""
    username, password = credentials
    return RawInput(
        username=username,
        password=password,
        server_url=SERVER_URL,
        repository="repo",
        format="maven2",
        filename=str(artifacts_dir / "app.jar"),
        attributes="-CgroupId=com.example -CartifactId=app -Cversion=1.0.0 -Aextension=jar -Aclassifier=bin",
    )
