"""
Smoke tests for the Typer CLI.
"""

import json

import httpx
import respx
from typer.testing import CliRunner

from cli.main import app
from factories import DEFAULT_URL, FINGER_URL, envelope, ok, sdk_info_json

runner = CliRunner()


class TestInfoCommand:
    """Test `info`."""

    def test_info_json(self, monkeypatch):
        """Test aggregated SdkInfo printed as JSON."""
        monkeypatch.setenv("BIOSDK_CLIENT_LOG_LEVEL", "WARNING")
        with respx.mock() as router:
            router.post(f"{DEFAULT_URL}/init").mock(
                return_value=ok(envelope(sdk_info_json(api_version="0.9", modalities=["FACE"])))
            )
            result = runner.invoke(app, ["info", "--json", "-p", f"format.url.default={DEFAULT_URL}"])

        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["apiVersion"] == "0.9"
        assert data["supportedModalities"] == ["FACE"]

    def test_info_table(self):
        """Test the rich table output."""
        with respx.mock() as router:
            router.post(f"{DEFAULT_URL}/init").mock(
                return_value=ok(envelope(sdk_info_json(organization="ACME", other_info={"k": "v"})))
            )
            result = runner.invoke(app, ["info", "--no-banner", "-p", f"format.url.default={DEFAULT_URL}"])

        assert result.exit_code == 0, result.output
        assert "ACME" in result.stdout

    def test_info_failure_exit_code(self):
        """Test that a backend failure exits with 1."""
        with respx.mock() as router:
            router.post(f"{DEFAULT_URL}/init").mock(return_value=httpx.Response(503))
            result = runner.invoke(app, ["info", "-p", f"format.url.default={DEFAULT_URL}"])

        assert result.exit_code == 1
        assert "HTTP status: 503" in result.stdout

    def test_bad_param(self):
        """Test that params must be key=value."""
        result = runner.invoke(app, ["info", "-p", "nonsense"])
        assert result.exit_code != 0


class TestRoutesCommand:
    """Test `routes`."""

    def test_routes_resolution(self):
        """Test registry listing and resolution for a modality."""
        result = runner.invoke(app, [
            "routes",
            "-p", f"format.url.default={DEFAULT_URL}",
            "-p", f"format.url.finger-iso={FINGER_URL}",
            "-m", "finger",
            "-f", "FINGER.format=finger-iso",
        ])
        assert result.exit_code == 0, result.output
        assert "finger-iso" in result.stdout
        assert f"-> {FINGER_URL}" in result.stdout

    def test_routes_without_urls(self):
        """Test that an empty registry exits with 1."""
        result = runner.invoke(app, ["routes"])
        assert result.exit_code == 1


class TestDoctorCommand:
    """Test `doctor`."""

    def test_doctor_probes_services(self):
        """Test that each configured service is probed."""
        with respx.mock() as router:
            route = router.get(DEFAULT_URL).mock(return_value=httpx.Response(404))
            result = runner.invoke(app, ["doctor", "run", "-p", f"format.url.default={DEFAULT_URL}"])

        assert route.called
        assert result.exit_code == 0, result.output
        assert "404" in result.stdout

    def test_doctor_unreachable(self):
        """Test that an unreachable service fails the doctor run."""
        with respx.mock() as router:
            router.get(DEFAULT_URL).mock(side_effect=httpx.ConnectError("refused"))
            result = runner.invoke(app, ["doctor", "run", "-p", f"format.url.default={DEFAULT_URL}"])
        assert result.exit_code == 1

    def test_set_default_url(self, tmp_path):
        """Test storing the default URL in the user .env."""
        result = runner.invoke(app, ["doctor", "set-default-url", DEFAULT_URL])
        assert result.exit_code == 0, result.output
        env_file = tmp_path / "config" / "biosdk-client" / ".env"
        assert f"mosip_biosdk_service={DEFAULT_URL}" in env_file.read_text(encoding="utf-8")
