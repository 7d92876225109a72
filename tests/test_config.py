from RichContent.config import DEFAULT_MAX_IMAGE_BYTES, DEFAULT_PLACEHOLDER, EngineSettings, load_settings


def test_defaults_without_environment(monkeypatch):
    monkeypatch.delenv("RICHCONTENT_MAX_IMAGE_BYTES", raising=False)
    monkeypatch.delenv("RICHCONTENT_PLACEHOLDER", raising=False)

    settings = load_settings()
    assert settings == EngineSettings()
    assert settings.max_image_bytes == DEFAULT_MAX_IMAGE_BYTES == 5 * 1024 * 1024
    assert settings.placeholder == DEFAULT_PLACEHOLDER


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("RICHCONTENT_MAX_IMAGE_BYTES", "2048")
    monkeypatch.setenv("RICHCONTENT_PLACEHOLDER", "Write your answer")

    settings = load_settings()
    assert settings.max_image_bytes == 2048
    assert settings.placeholder == "Write your answer"


def test_invalid_size_falls_back_to_default(monkeypatch):
    monkeypatch.setenv("RICHCONTENT_MAX_IMAGE_BYTES", "five megabytes")
    assert load_settings().max_image_bytes == DEFAULT_MAX_IMAGE_BYTES

    monkeypatch.setenv("RICHCONTENT_MAX_IMAGE_BYTES", "-1")
    assert load_settings().max_image_bytes == DEFAULT_MAX_IMAGE_BYTES
