import pydantic
import pytest

from pagediff.config.settings import Settings


@pytest.mark.unit
class TestSettings:
    def test_default_settings(self) -> None:
        settings = Settings(_env_file=None)
        assert settings.debug is False
        assert settings.log_level == "INFO"
        assert settings.headless is True
        assert settings.output_file == "output.png"
        assert settings.compare_to == []
        assert settings.viewport_width == 1028

    def test_settings_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PAGEDIFF_SOURCE", "https://a.example")
        monkeypatch.setenv("PAGEDIFF_COMPARE_TO", '["https://b.example", "https://c.example"]')
        monkeypatch.setenv("PAGEDIFF_THRESHOLD", "12")
        monkeypatch.setenv("PAGEDIFF_HEATMAP", "true")
        settings = Settings(_env_file=None)
        assert settings.source == "https://a.example"
        assert settings.compare_to == ["https://b.example", "https://c.example"]
        assert settings.threshold == 12
        assert settings.heatmap is True

    def test_threshold_out_of_range(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PAGEDIFF_THRESHOLD", "300")
        with pytest.raises(pydantic.ValidationError):
            Settings(_env_file=None)

    def test_debug_forces_debug_log_level(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PAGEDIFF_DEBUG", "true")
        monkeypatch.setenv("PAGEDIFF_LOG_LEVEL", "WARNING")
        settings = Settings(_env_file=None)
        assert settings.effective_log_level == "DEBUG"

    def test_log_level_without_debug(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PAGEDIFF_LOG_LEVEL", "WARNING")
        assert Settings(_env_file=None).effective_log_level == "WARNING"
