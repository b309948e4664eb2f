import pytest

from authlete_client.config.resolver import (
    CONFIGURATION_FILE_ENV,
    DEFAULT_CONFIGURATION_FILE,
    ConfigurationResolver,
    load_properties,
)
from authlete_client.exceptions import ConfigurationNotFoundError, ConfigurationParseError


@pytest.fixture()
def dirs(tmp_path, monkeypatch):
    """Separate working directory and resource directory; cwd is switched to 'cwd'."""
    cwd = tmp_path / "cwd"
    resources = tmp_path / "resources"
    cwd.mkdir()
    resources.mkdir()
    monkeypatch.chdir(cwd)
    return cwd, resources


def test_default_source_name_without_override():
    assert ConfigurationResolver(environ={}).source_name() == DEFAULT_CONFIGURATION_FILE


def test_override_variable_names_source():
    resolver = ConfigurationResolver(environ={CONFIGURATION_FILE_ENV: "custom.properties"})
    assert resolver.source_name() == "custom.properties"


def test_blank_override_falls_back_to_default():
    resolver = ConfigurationResolver(environ={CONFIGURATION_FILE_ENV: "   "})
    assert resolver.source_name() == DEFAULT_CONFIGURATION_FILE


def test_override_read_from_process_environment(monkeypatch):
    monkeypatch.setenv(CONFIGURATION_FILE_ENV, "from-env.properties")
    assert ConfigurationResolver().source_name() == "from-env.properties"


def test_override_takes_precedence_over_default(dirs, write_properties):
    cwd, resources = dirs
    write_properties(cwd, "base_url=https://default.example\n")
    write_properties(cwd, "base_url=https://override.example\n", name="override.properties")

    resolver = ConfigurationResolver(
        search_path=[str(resources)],
        environ={CONFIGURATION_FILE_ENV: "override.properties"},
    )
    assert resolver.resolve().base_url == "https://override.example"


def test_working_directory_wins_over_search_path(dirs, write_properties):
    cwd, resources = dirs
    write_properties(cwd, "base_url=https://cwd.example\n")
    write_properties(resources, "base_url=https://resource.example\n")

    resolver = ConfigurationResolver(search_path=[str(resources)], environ={})
    assert resolver.locate() == cwd / DEFAULT_CONFIGURATION_FILE
    assert resolver.resolve().base_url == "https://cwd.example"


def test_falls_back_to_search_path(dirs, write_properties):
    _, resources = dirs
    write_properties(resources, "base_url=https://resource.example\n")

    resolver = ConfigurationResolver(search_path=[str(resources)], environ={})
    assert resolver.resolve().base_url == "https://resource.example"


def test_first_search_path_entry_wins_without_merging(dirs, write_properties, tmp_path):
    _, resources = dirs
    second = tmp_path / "second"
    write_properties(resources, "base_url=https://first.example\n")
    write_properties(second, "base_url=https://second.example\nservice.api_key=42\n")

    resolver = ConfigurationResolver(search_path=[str(resources), str(second)], environ={})
    cfg = resolver.resolve()
    assert cfg.base_url == "https://first.example"
    assert cfg.service_api_key is None


def test_missing_configuration_raises_not_found(dirs):
    _, resources = dirs
    resolver = ConfigurationResolver(search_path=[str(resources)], environ={})
    with pytest.raises(ConfigurationNotFoundError) as excinfo:
        resolver.resolve()
    assert excinfo.value.source == DEFAULT_CONFIGURATION_FILE
    assert str(resources) in excinfo.value.searched


def test_absolute_override_is_used_as_is(dirs, write_properties, tmp_path):
    path = write_properties(tmp_path / "elsewhere", "base_url=https://absolute.example\n")
    resolver = ConfigurationResolver(search_path=[], environ={CONFIGURATION_FILE_ENV: str(path)})
    assert resolver.resolve().base_url == "https://absolute.example"


def test_absolute_override_missing_raises_not_found(dirs, tmp_path):
    missing = tmp_path / "nope.properties"
    resolver = ConfigurationResolver(search_path=[], environ={CONFIGURATION_FILE_ENV: str(missing)})
    with pytest.raises(ConfigurationNotFoundError):
        resolver.resolve()


def test_explicit_file_name_skips_environment(dirs, write_properties):
    cwd, _ = dirs
    write_properties(cwd, "base_url=https://explicit.example\n", name="explicit.properties")
    resolver = ConfigurationResolver(
        file_name="explicit.properties",
        search_path=[],
        environ={CONFIGURATION_FILE_ENV: "ignored.properties"},
    )
    assert resolver.resolve().base_url == "https://explicit.example"


def test_load_properties_handles_comments_quotes_and_spacing(tmp_path, write_properties):
    path = write_properties(tmp_path, (
        "# Authlete configuration\n"
        "\n"
        "base_url = https://api.authlete.com\n"
        "service.api_key=5526908833  # trailing comment\n"
        "service.api_secret=\"quoted secret\"\n"
        "service.dpop_key\n"
    ))
    props = load_properties(path)
    assert props == {
        "base_url": "https://api.authlete.com",
        "service.api_key": "5526908833",
        "service.api_secret": "quoted secret",
        "service.dpop_key": "",
    }


@pytest.mark.parametrize(
    "content",
    [
        "base_url https://api.authlete.com\n",
        "service.api_key=\"unterminated\n",
    ],
)
def test_malformed_statement_raises_parse_error(dirs, write_properties, content):
    cwd, _ = dirs
    write_properties(cwd, "base_url=https://ok.example\n" + content)
    resolver = ConfigurationResolver(search_path=[], environ={})
    with pytest.raises(ConfigurationParseError) as excinfo:
        resolver.resolve()
    assert excinfo.value.line == 2


def test_invalid_encoding_raises_parse_error(dirs):
    cwd, _ = dirs
    (cwd / DEFAULT_CONFIGURATION_FILE).write_bytes(b"base_url=\xff\xfe\n")
    resolver = ConfigurationResolver(search_path=[], environ={})
    with pytest.raises(ConfigurationParseError):
        resolver.resolve()


def test_invalid_value_raises_parse_error(dirs, write_properties):
    cwd, _ = dirs
    write_properties(cwd, "api_version=V4\n")
    resolver = ConfigurationResolver(search_path=[], environ={})
    with pytest.raises(ConfigurationParseError):
        resolver.resolve()
