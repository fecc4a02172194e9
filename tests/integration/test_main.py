"""Tests for the platform wiring and CLI."""

from unittest.mock import patch

import pytest

from registrar.main import RegistrarPlatform, main


@pytest.mark.integration
class TestRegistrarPlatform:
    """Tests for RegistrarPlatform."""

    def test_services_share_registry(self) -> None:
        platform = RegistrarPlatform()

        assert platform.gradebook.registry is platform.registry
        assert platform.rest_api.app is not None

    def test_demo_output(self, capsys: pytest.CaptureFixture) -> None:
        RegistrarPlatform().run_demo()

        out = capsys.readouterr().out
        assert "Dan    -> C1: course_full" in out
        assert "Rejected: Student 3 is not enrolled in C1" in out
        assert "Top student in C1: Bob (92)" in out

    def test_demo_via_cli(self, capsys: pytest.CaptureFixture, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("REGISTRAR_LOG_FILE", raising=False)

        assert main(["--demo"]) == 0
        assert "REGISTRAR - DEMO" in capsys.readouterr().out

    def test_serves_rest_api(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("REGISTRAR_LOG_FILE", raising=False)
        monkeypatch.delenv("REGISTRAR_REST_PORT", raising=False)

        with patch("uvicorn.run") as run:
            assert main(["--rest-port", "8123"]) == 0

        assert run.call_args.kwargs["port"] == 8123

    def test_bad_log_level_is_a_usage_error(self, tmp_path, capsys: pytest.CaptureFixture,
                                            monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("REGISTRAR_LOG_LEVEL", raising=False)
        path = tmp_path / "config.json"
        path.write_text('{"log_level": 20}')

        with pytest.raises(SystemExit) as exc_info:
            main(["--demo", "--config", str(path)])

        assert exc_info.value.code == 2
        assert "Invalid log level" in capsys.readouterr().err
