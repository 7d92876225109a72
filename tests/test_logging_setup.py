from pathlib import Path

import RichContent as richcontent_pkg


def test_find_project_root_locates_pyproject(tmp_path, monkeypatch):
    (tmp_path / "pyproject.toml").write_text("[project]\nname='x'\n", encoding="utf-8")
    package_dir = tmp_path / "RichContent"
    package_dir.mkdir()
    monkeypatch.setattr(richcontent_pkg, "__file__", str(package_dir / "__init__.py"))

    assert richcontent_pkg._find_project_root() == tmp_path.resolve()


def test_find_project_root_falls_back_to_package_parent(tmp_path, monkeypatch):
    package_dir = tmp_path / "site" / "RichContent"
    package_dir.mkdir(parents=True)
    monkeypatch.setattr(richcontent_pkg, "__file__", str(package_dir / "__init__.py"))

    assert richcontent_pkg._find_project_root() == package_dir.resolve().parent


def test_anchor_file_handler_paths_uses_absolute_base(tmp_path):
    config = {
        "handlers": {
            "console": {"class": "logging.StreamHandler"},
            "file": {"class": "logging.FileHandler", "filename": "out/logs/a.log"},
        }
    }
    base_dir = Path(tmp_path).resolve()

    richcontent_pkg._anchor_file_handler_paths(config, base_dir=base_dir)
    assert config["handlers"]["file"]["filename"] == str(base_dir / "out/logs/a.log")
    assert "filename" not in config["handlers"]["console"]


def test_remove_file_handlers_detaches_them_everywhere():
    config = {
        "handlers": {
            "console": {"class": "logging.StreamHandler"},
            "file": {"class": "logging.FileHandler", "filename": "x.log"},
        },
        "loggers": {"RichContent": {"handlers": ["console", "file"]}},
        "root": {"handlers": ["console", "file"]},
    }

    richcontent_pkg._remove_file_handlers(config)
    assert list(config["handlers"]) == ["console"]
    assert config["loggers"]["RichContent"]["handlers"] == ["console"]
    assert config["root"]["handlers"] == ["console"]


def test_substitute_env_vars_uses_environment_then_default(monkeypatch):
    monkeypatch.setenv("RICHCONTENT_LOG_LEVEL", "DEBUG")
    monkeypatch.delenv("RICHCONTENT_LOG_FILE", raising=False)

    text = "level: ${RICHCONTENT_LOG_LEVEL:-INFO}\nfile: ${RICHCONTENT_LOG_FILE:-out/a.log}"
    assert richcontent_pkg._substitute_env_vars(text) == "level: DEBUG\nfile: out/a.log"


def test_env_flag(monkeypatch):
    monkeypatch.setenv("RICHCONTENT_FILE_LOGGING", "off")
    assert richcontent_pkg._env_flag("RICHCONTENT_FILE_LOGGING", default=True) is False
    monkeypatch.setenv("RICHCONTENT_FILE_LOGGING", "Yes")
    assert richcontent_pkg._env_flag("RICHCONTENT_FILE_LOGGING") is True
    monkeypatch.delenv("RICHCONTENT_FILE_LOGGING")
    assert richcontent_pkg._env_flag("RICHCONTENT_FILE_LOGGING", default=True) is True


def test_setup_logging_without_file_handlers(monkeypatch):
    import logging

    monkeypatch.setenv("RICHCONTENT_FILE_LOGGING", "0")
    richcontent_pkg.setup_logging()

    handlers = logging.getLogger("RichContent").handlers
    assert handlers
    assert not any(isinstance(handler, logging.FileHandler) for handler in handlers)


def test_load_config_substitutes_before_parsing(tmp_path, monkeypatch):
    monkeypatch.setenv("RICHCONTENT_LOG_LEVEL", "WARNING")
    config_path = tmp_path / "logging.yaml"
    config_path.write_text(
        "version: 1\nloggers:\n  RichContent:\n    level: ${RICHCONTENT_LOG_LEVEL:-INFO}\n",
        encoding="utf-8",
    )

    config = richcontent_pkg._load_config(config_path)
    assert config == {"version": 1, "loggers": {"RichContent": {"level": "WARNING"}}}


def test_rotating_file_handlers_count_as_file_handlers(tmp_path):
    config = {
        "handlers": {
            "console": {"class": "logging.StreamHandler"},
            "rotating": {
                "class": "logging.handlers.RotatingFileHandler",
                "filename": str(tmp_path / "nested" / "logs" / "a.log"),
            },
        },
        "root": {"handlers": ["console", "rotating"]},
    }

    richcontent_pkg._ensure_file_handler_directories(config)
    assert (tmp_path / "nested" / "logs").is_dir()

    richcontent_pkg._remove_file_handlers(config)
    assert list(config["handlers"]) == ["console"]
    assert config["root"]["handlers"] == ["console"]


def test_bundled_config_is_found():
    assert richcontent_pkg.LOGGING_CONFIG.name == "logging.yaml"
    assert richcontent_pkg.LOGGING_CONFIG.exists()
