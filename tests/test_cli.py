"""Black-box tests for CLI entry point."""

import json
from pathlib import Path

from typer.testing import CliRunner
from pytest_httpx import HTTPXMock

from nexus_uploader.cli import app

runner = CliRunner()

COMPONENTS_URL = "https://nexus.example.com/service/rest/v1/components?repository=repo"


def _multi_file_env(artifacts_dir: Path, artifacts: str | None = None) -> dict[str, str]:
    if artifacts is None:
        artifacts = json.dumps(
            [
                {"file": str(artifacts_dir / "app.jar"), "artifactId": "app", "type": "jar", "version": "1.0"},
                {"file": str(artifacts_dir / "lib.jar"), "artifactId": "lib", "type": "jar", "version": "1.0"},
            ]
        )
    return {
        "PLUGIN_USERNAME": "testUser",
        "PLUGIN_PASSWORD": "testPass",
        "PLUGIN_PROTOCOL": "https",
        "PLUGIN_SERVER_URL": "nexus.example.com/",
        "PLUGIN_NEXUS_VERSION": "nexus3",
        "PLUGIN_REPOSITORY": "repo",
        "PLUGIN_GROUP_ID": "com.example",
        "PLUGIN_FORMAT": "maven2",
        "PLUGIN_ARTIFACTS": artifacts,
    }


class TestCLI:
    """Test command-line interface."""

    def test_cli_help(self) -> None:
        """Test CLI help output."""
        result = runner.invoke(app, ["--help"])

        assert result.exit_code == 0
        assert "Upload artifacts to a Nexus repository" in result.stdout

    def test_cli_multi_file_success(
        self, artifacts_dir: Path, tmp_path: Path, httpx_mock: HTTPXMock
    ) -> None:
        """Test a multi-file upload configured through environment variables."""
        httpx_mock.add_response(method="POST", url=COMPONENTS_URL, status_code=200)
        httpx_mock.add_response(method="POST", url=COMPONENTS_URL, status_code=200)
        output = tmp_path / "drone_output.env"

        result = runner.invoke(
            app, ["--output-file", str(output)], env=_multi_file_env(artifacts_dir)
        )

        assert result.exit_code == 0
        assert "Successful: 2" in result.stdout
        assert output.read_text() == "UPLOAD_STATUS=Success\n"

    def test_cli_upload_failure(
        self, artifacts_dir: Path, tmp_path: Path, httpx_mock: HTTPXMock
    ) -> None:
        """Test that a failed upload exits non-zero and reports the failure."""
        httpx_mock.add_response(
            method="POST",
            url=COMPONENTS_URL,
            status_code=500,
            text='{"errors":[{"message":"Internal server error"}]}',
        )
        httpx_mock.add_response(method="POST", url=COMPONENTS_URL, status_code=200)
        output = tmp_path / "drone_output.env"

        result = runner.invoke(
            app, ["--output-file", str(output)], env=_multi_file_env(artifacts_dir)
        )

        assert result.exit_code == 1
        assert "Failed: 1" in result.stdout

        key, _, value = output.read_text().rstrip("\n").partition("=")
        failed = json.loads(value)
        assert key == "UPLOAD_STATUS"
        assert [f["artifactId"] for f in failed] == ["app"]
        assert "Internal server error" in failed[0]["err"]

    def test_cli_rejected_artifact_fails_without_upload(
        self, artifacts_dir: Path, tmp_path: Path
    ) -> None:
        """Test that an artifact rejected at validation fails the run with no request."""
        output = tmp_path / "drone_output.env"
        artifacts = f"- file: {artifacts_dir / 'app.jar'}\n  artifactId: app\n  version: '1.0'\n"

        result = runner.invoke(
            app, ["--output-file", str(output)], env=_multi_file_env(artifacts_dir, artifacts)
        )

        assert result.exit_code == 1
        failed = json.loads(output.read_text().rstrip("\n").partition("=")[2])
        assert failed[0]["err"] == "Missing fields: Type"

    def test_cli_single_file(
        self, artifacts_dir: Path, tmp_path: Path, httpx_mock: HTTPXMock
    ) -> None:
        """Test a legacy single-file upload configured through options."""
        httpx_mock.add_response(method="POST", url=COMPONENTS_URL, status_code=204)

        result = runner.invoke(
            app,
            [
                "--username", "testUser",
                "--password", "testPass",
                "--server-url", "https://nexus.example.com///",
                "--repository", "repo",
                "--format", "maven2",
                "--filename", str(artifacts_dir / "app.jar"),
                "--attributes=-CgroupId=com.example -CartifactId=app -Cversion=1.0 -Aextension=jar -Aclassifier=bin",
                "--output-file", str(tmp_path / "out.env"),
            ],
        )

        assert result.exit_code == 0
        body = httpx_mock.get_requests()[0].read()
        assert b'filename="app.jar"' in body

    def test_cli_ambiguous_mode(self, artifacts_dir: Path, tmp_path: Path) -> None:
        """Test that giving both input modes is a configuration error."""
        env = _multi_file_env(artifacts_dir)
        env["PLUGIN_ATTRIBUTES"] = "-CgroupId=g"
        output = tmp_path / "drone_output.env"

        result = runner.invoke(app, ["--output-file", str(output)], env=env)

        assert result.exit_code == 1
        assert "ambiguous" in result.stdout
        assert not output.exists()

    def test_cli_missing_inputs(self, tmp_path: Path) -> None:
        """Test that running without inputs fails."""
        result = runner.invoke(app, ["--output-file", str(tmp_path / "out.env")])

        assert result.exit_code == 1
        assert "cannot be empty" in result.stdout

    def test_cli_log_level_from_env(
        self, artifacts_dir: Path, tmp_path: Path, httpx_mock: HTTPXMock
    ) -> None:
        """Test that the log level is read from the environment."""
        httpx_mock.add_response(method="POST", url=COMPONENTS_URL, status_code=200)
        httpx_mock.add_response(method="POST", url=COMPONENTS_URL, status_code=200)
        env = _multi_file_env(artifacts_dir)
        env["PLUGIN_LOG_LEVEL"] = "DEBUG"

        result = runner.invoke(app, ["--output-file", str(tmp_path / "out.env")], env=env)

        assert result.exit_code == 0
