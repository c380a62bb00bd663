import logging

import pytest

from user_management.config import CONFIG_KEYS, ConfigError, ConfigErrorKind
from user_management.config.sources import load_env_source, load_file_source


def test_missing_file_yields_no_values(tmp_path):
    assert load_file_source(tmp_path / "absent.yaml") == {}
    assert load_file_source(None) == {}


def test_nested_sections_are_flattened(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "server:\n"
        "  port: 4000\n"
        "  read_timeout: 5s\n"
        "Database:\n"
        "  Host: db.internal\n"
        "  pool:\n"
        "    size: 5\n"
        "jwt:\n"
        "  secret:\n"
    )

    values = load_file_source(path)

    assert values == {
        "server.port": 4000,
        "server.read_timeout": "5s",
        "database.host": "db.internal",
        "database.pool.size": 5,
    }


def test_empty_file_yields_no_values(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("# nothing configured\n")

    assert load_file_source(path) == {}


@pytest.mark.parametrize(
    "content",
    [
        "server: [unclosed\n",
        "- just\n- a list\n",
        "plain scalar\n",
        "server: 3000\n",
    ],
)
def test_malformed_file_raises_parse_error(tmp_path, content):
    path = tmp_path / "config.yaml"
    path.write_text(content)

    with pytest.raises(ConfigError) as exc_info:
        load_file_source(path)

    assert exc_info.value.kind is ConfigErrorKind.FILE_PARSE_ERROR


def test_unreadable_path_raises_parse_error(tmp_path):
    with pytest.raises(ConfigError) as exc_info:
        load_file_source(tmp_path)

    assert exc_info.value.kind is ConfigErrorKind.FILE_PARSE_ERROR


def test_env_source_skips_unset_and_empty(caplog):
    environ = {"SERVER_PORT": "8080", "DATABASE_HOST": "", "UNRELATED": "x"}

    with caplog.at_level(logging.DEBUG, logger="user_management.config.sources"):
        values = load_env_source(CONFIG_KEYS, environ)

    assert values == {"server.port": "8080"}
    assert "SERVER_PORT" in caplog.text


def test_mapping_under_a_value_key_raises_parse_error(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("database:\n  host:\n    name: db.internal\n")

    with pytest.raises(ConfigError) as exc_info:
        load_file_source(path)

    assert exc_info.value.kind is ConfigErrorKind.FILE_PARSE_ERROR
    assert exc_info.value.key == "database.host"
