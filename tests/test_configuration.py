from __future__ import annotations

from pathlib import Path

import pytest

from amazonian.client import Amazonian, create_client
from amazonian.configuration import (
    DEFAULT_HOST,
    DEFAULT_PATH,
    OPTIONAL_ENV_VARS,
    REQUIRED_ENV_VARS,
    Configuration,
    load_configuration,
)
from amazonian.exceptions import ConfigurationError


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in REQUIRED_ENV_VARS | OPTIONAL_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    for name in ("AWS_ACCESS_KEY_ID", "AWS_ACCESS_KEY", "AWS_SECRET_ACCESS_KEY", "AWS_SECRET_KEY"):
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    configuration = Configuration()

    assert configuration.host == "webservices.amazon.com"
    assert configuration.path == "/onca/xml"
    assert configuration.default_search == "All"
    assert configuration.cache_last is True
    assert configuration.debug is False
    assert configuration.has_credentials is False


def test_repr_hides_secrets():
    configuration = Configuration(key="AKIDEXAMPLE", secret="wJalrXUtnFEMI")

    assert "AKIDEXAMPLE" not in repr(configuration)
    assert "wJalrXUtnFEMI" not in repr(configuration)


def test_setup_updates_known_options():
    configuration = Configuration()

    result = configuration.setup(key="AK", secret="secret", default_search="Books")

    assert result is configuration
    assert configuration.has_credentials
    assert configuration.default_search == "Books"


def test_setup_rejects_unknown_options():
    with pytest.raises(ConfigurationError, match="cacheLast"):
        Configuration().setup(cacheLast=False)


def test_load_configuration_from_environment(monkeypatch, tmp_path: Path):
    monkeypatch.setenv("AMAZONIAN_ACCESS_KEY", "AK")
    monkeypatch.setenv("AMAZONIAN_SECRET_KEY", "secret")
    monkeypatch.setenv("AMAZONIAN_CACHE_LAST", "false")
    monkeypatch.setenv("AMAZONIAN_DEBUG", "yes")
    monkeypatch.setenv("AMAZONIAN_TIMEOUT", "2.5")

    configuration = load_configuration(tmp_path / "missing.env")

    assert configuration is not None
    assert configuration.key == "AK"
    assert configuration.secret == "secret"
    assert configuration.host == DEFAULT_HOST
    assert configuration.path == DEFAULT_PATH
    assert configuration.cache_last is False
    assert configuration.debug is True
    assert configuration.timeout == 2.5


def test_load_configuration_accepts_aws_aliases(monkeypatch, tmp_path: Path):
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "AK")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "secret")

    configuration = load_configuration(tmp_path / "missing.env")

    assert configuration is not None
    assert configuration.key == "AK"


def test_load_configuration_falls_back_to_dotenv(tmp_path: Path):
    env_file = tmp_path / ".env"
    env_file.write_text(
        "# credentials\n"
        "AMAZONIAN_ACCESS_KEY='AK'\n"
        'AMAZONIAN_SECRET_KEY="secret"\n'
        "AMAZONIAN_HOST=webservices.amazon.de\n"
        "AMAZONIAN_DEFAULT_SEARCH=Music\n"
        "not a setting\n"
    )

    configuration = load_configuration(env_file)

    assert configuration is not None
    assert configuration.key == "AK"
    assert configuration.secret == "secret"
    assert configuration.host == "webservices.amazon.de"
    assert configuration.default_search == "Music"


def test_load_configuration_returns_none_without_credentials(monkeypatch, tmp_path: Path):
    monkeypatch.setenv("AMAZONIAN_ACCESS_KEY", "AK")

    assert load_configuration(tmp_path / "missing.env") is None
    assert create_client(tmp_path / "missing.env") is None


def test_create_client_applies_options(monkeypatch, tmp_path: Path):
    monkeypatch.setenv("AMAZONIAN_ACCESS_KEY", "AK")
    monkeypatch.setenv("AMAZONIAN_SECRET_KEY", "secret")

    client = create_client(tmp_path / "missing.env", cache_last=False)

    assert isinstance(client, Amazonian)
    assert client.configuration.cache_last is False


def test_dotenv_handles_export_prefix_and_inline_comments(tmp_path: Path):
    env_file = tmp_path / ".env"
    env_file.write_text(
        "export AMAZONIAN_ACCESS_KEY=AK  # from the console\n"
        "AMAZONIAN_SECRET_KEY='se#cret'\n"
        "AMAZONIAN_DEFAULT_SEARCH = Books\n",
        encoding="utf-8",
    )

    configuration = load_configuration(env_file)

    assert configuration is not None
    assert configuration.key == "AK"
    assert configuration.secret == "se#cret"
    assert configuration.default_search == "Books"
