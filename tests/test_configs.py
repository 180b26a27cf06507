from collections import defaultdict

import pytest
from pymongo.errors import ConfigurationError

from jevan.configs import (
    HTTP_PORT,
    MONGO_DATABASE,
    MONGO_URI,
    load_application_config,
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for key in (HTTP_PORT, MONGO_URI, MONGO_DATABASE):
        monkeypatch.setenv(key, "")
        monkeypatch.delenv(key)


class _RecordingFactory:
    def __init__(self):
        self.calls = []
        self.databases = defaultdict(dict)

    def __call__(self, uri, **kwargs):
        self.calls.append((uri, kwargs))
        return self

    def __getitem__(self, name):
        return self.databases[name]

    def close(self):
        pass


def _write_env(tmp_path, port="3000"):
    env_file = tmp_path / ".env"
    env_file.write_text(
        f"HTTP_PORT={port}\n"
        "MONGO_URI=mongodb://localhost:27017\n"
        "MONGO_DATABASE=jevan\n"
    )
    return env_file


def test_loads_port_database_and_uri(tmp_path):
    factory = _RecordingFactory()
    config = load_application_config(_write_env(tmp_path), factory)
    assert config.http_port == "3000"
    assert config.db_client.db_name == "jevan"
    assert len(factory.calls) == 1
    uri, kwargs = factory.calls[0]
    assert uri == "mongodb://localhost:27017"
    assert kwargs["server_api"].version == "1"


def test_existing_environment_takes_precedence(tmp_path, monkeypatch):
    monkeypatch.setenv(HTTP_PORT, "8080")
    config = load_application_config(_write_env(tmp_path), _RecordingFactory())
    assert config.http_port == "8080"


def test_missing_env_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_application_config(tmp_path / "absent.env", _RecordingFactory())


def test_connection_error_propagates(tmp_path):
    def failing_factory(uri, **kwargs):
        raise ConfigurationError("bad uri")

    with pytest.raises(ConfigurationError, match="bad uri"):
        load_application_config(_write_env(tmp_path), failing_factory)


def test_collections_come_from_configured_database(tmp_path):
    factory = _RecordingFactory()
    factory.databases["jevan"]["things"] = "stored"
    config = load_application_config(_write_env(tmp_path), factory)
    collection = config.db_client.collection("things")
    assert collection._collection == "stored"