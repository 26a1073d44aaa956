"""Configuration hierarchy: YAML defaults, environment files and env overrides."""

from ersync.core.config.loader import ConfigLoader, load_config


def test_defaults_from_project_config():
    config = load_config()

    assert config["api"]["base_url"].endswith("/api/v1")
    assert config["api"]["endpoints"]["sections"]["experience"] == "employees/{employee_id}/work-experience"
    assert config["uploads"]["max_concurrent"] == 4


def test_env_overrides_use_double_underscore_nesting(monkeypatch):
    monkeypatch.setenv("ERSYNC_API__BASE_URL", "https://hr.example.com/api/v1")
    monkeypatch.setenv("ERSYNC_UPLOADS__MAX_CONCURRENT", "8")
    monkeypatch.setenv("ERSYNC_CACHE__ENABLED", "yes")

    config = load_config()

    assert config["api"]["base_url"] == "https://hr.example.com/api/v1"
    assert config["uploads"]["max_concurrent"] == 8
    assert config["cache"]["enabled"] is True


def test_environment_file_and_overrides_merge(tmp_path, monkeypatch):
    (tmp_path / "environments").mkdir()
    (tmp_path / "default.yaml").write_text(
        "api:\n  base_url: http://localhost:5000/api/v1\n  timeout_seconds: 30\nlogging:\n  level: INFO\n"
    )
    (tmp_path / "environments" / "staging.yaml").write_text("api:\n  timeout_seconds: 10\n")
    monkeypatch.setenv("ERSYNC_ENV", "staging")

    config = ConfigLoader(tmp_path).load(overrides={"logging": {"level": "DEBUG"}})

    assert config["api"] == {"base_url": "http://localhost:5000/api/v1", "timeout_seconds": 10}
    assert config["logging"]["level"] == "DEBUG"


def test_missing_config_dir_yields_empty_config(tmp_path):
    assert ConfigLoader(tmp_path / "absent").load() == {}
