"""Settings loaded from the environment."""

import pytest

from config.settings import Settings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("STORE_BACKEND", "ES_NODE", "ES_API_KEY", "OPENAI_API_KEY", "DATABASE_URL", "PORT"):
        monkeypatch.delenv(name, raising=False)


class TestSettings:

    def test_defaults(self):
        settings = Settings(_env_file=None)
        assert settings.store_backend == "elasticsearch"
        assert settings.port == 3050
        assert settings.openai_model == "gpt-4o"
        assert settings.openai_max_completion_tokens == 15000
        assert settings.tm_serialize_writes is False

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("ES_NODE", "http://localhost:9200")
        monkeypatch.setenv("PORT", "8080")
        settings = Settings(_env_file=None)
        assert settings.es_node == "http://localhost:9200"
        assert settings.port == 8080

    def test_missing_variables_for_elasticsearch(self):
        settings = Settings(_env_file=None)
        assert settings.missing_variables() == ["ES_NODE", "ES_API_KEY", "OPENAI_API_KEY"]
        with pytest.raises(ValueError, match="Missing required env variable"):
            settings.validate_runtime()

    def test_sqlite_needs_only_openai_key(self):
        settings = Settings(_env_file=None, store_backend="sqlite", openai_api_key="sk-test")
        assert settings.missing_variables() == []
        settings.validate_runtime()

    def test_unknown_backend(self):
        settings = Settings(_env_file=None, store_backend="mongodb")
        with pytest.raises(ValueError, match="Unsupported store backend"):
            settings.missing_variables()

    def test_database_url(self, tmp_path):
        explicit = Settings(_env_file=None, database_url="sqlite://")
        assert explicit.get_database_url() == "sqlite://"

        derived = Settings(_env_file=None, database_dir=tmp_path / "data")
        assert derived.get_database_url() == f"sqlite:///{tmp_path / 'data' / 'tm.db'}"
        assert (tmp_path / "data").is_dir()
