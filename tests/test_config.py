from pathlib import Path

from commonlib.config import (
    DEFAULT_API_BASE_URL,
    DEFAULT_TOKEN_MAX_AGE,
    env_bool,
    load_api_config,
    load_client_config,
)


def test_client_config_defaults(tmp_path):
    config = load_client_config(tmp_path, {})
    assert config.api_base_url == DEFAULT_API_BASE_URL
    assert config.timeout == 30.0
    assert config.storage_file == tmp_path / "local_storage.json"
    assert config.log_level == "INFO"


def test_client_config_from_env(tmp_path):
    config = load_client_config(
        tmp_path,
        {
            "API_BASE_URL": " https://catalog.example.com/ ",
            "API_TIMEOUT": "2.5",
            "LOCAL_STORAGE_FILE": "/var/lib/catalog/session.json",
            "LOG_LEVEL": "debug",
        },
    )
    assert config.api_base_url == "https://catalog.example.com"
    assert config.timeout == 2.5
    assert config.storage_file == Path("/var/lib/catalog/session.json")
    assert config.log_level == "DEBUG"


def test_api_config_defaults(tmp_path):
    config = load_api_config(tmp_path, {})
    assert config.product_file == tmp_path / "products.json"
    assert config.product_backups == 2
    assert config.host == "0.0.0.0"
    assert config.port == 8080
    assert "http://localhost:3000" in config.allowed_origins
    assert config.force_tls is False
    assert config.require_auth is False
    assert config.token_max_age == DEFAULT_TOKEN_MAX_AGE


def test_api_config_from_env(tmp_path):
    config = load_api_config(
        tmp_path,
        {
            "PRODUCT_FILE": "data/catalog.json",
            "API_PORT": "9000",
            "ALLOWED_ORIGINS": "https://shop.example, ,https://admin.example",
            "REQUIRE_AUTH": "yes",
            "FORCE_TLS": "0",
            "SECRET_KEY": "s3cret",
        },
    )
    assert config.product_file == tmp_path / "data" / "catalog.json"
    assert config.port == 9000
    assert config.allowed_origins == ("https://shop.example", "https://admin.example")
    assert config.require_auth is True
    assert config.force_tls is False
    assert config.secret_key == "s3cret"


def test_env_bool():
    assert env_bool(None, True) is True
    assert env_bool("On", False) is True
    assert env_bool("nope", True) is False
