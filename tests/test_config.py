import pytest

from interspace_core.config import Settings, load_settings
from interspace_core.constants import DEFAULT_API_BASE_URL, NATIVE_GAS_THRESHOLD_WEI, get_chain_name
from interspace_core.engine.exceptions import ConfigurationError

ENV_VARS = [
    "INTERSPACE_API_BASE_URL",
    "INTERSPACE_ACCESS_TOKEN",
    "INTERSPACE_REQUEST_TIMEOUT",
    "INTERSPACE_POLL_INTERVAL_MS",
    "INTERSPACE_POLL_MAX_ATTEMPTS",
    "INTERSPACE_PARTIAL_IS_TERMINAL",
    "INTERSPACE_USE_TEST_SIGNER",
    "INTERSPACE_NATIVE_GAS_THRESHOLD_WEI",
]


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    # setenv first so teardown also removes values loaded from a dotenv file
    for name in ENV_VARS:
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    return tmp_path


def test_defaults(clean_env):
    settings = load_settings(env_file=str(clean_env / "missing.env"))

    assert settings.api_base_url == DEFAULT_API_BASE_URL
    assert settings.access_token is None
    assert settings.poll_interval_ms == 2000
    assert settings.poll_interval == 2.0
    assert settings.poll_max_attempts == 60
    assert settings.partial_is_terminal is False
    assert settings.use_test_signer is False
    assert settings.native_gas_threshold_wei == NATIVE_GAS_THRESHOLD_WEI


def test_environment_overrides(clean_env, monkeypatch):
    monkeypatch.setenv("INTERSPACE_API_BASE_URL", "https://api.example.test/api/v1")
    monkeypatch.setenv("INTERSPACE_ACCESS_TOKEN", "tok")
    monkeypatch.setenv("INTERSPACE_POLL_INTERVAL_MS", "500")
    monkeypatch.setenv("INTERSPACE_POLL_MAX_ATTEMPTS", "3")
    monkeypatch.setenv("INTERSPACE_PARTIAL_IS_TERMINAL", "yes")
    monkeypatch.setenv("INTERSPACE_USE_TEST_SIGNER", "TRUE")

    settings = load_settings(env_file=str(clean_env / "missing.env"))

    assert settings.api_base_url == "https://api.example.test/api/v1"
    assert settings.access_token == "tok"
    assert settings.poll_interval == 0.5
    assert settings.poll_max_attempts == 3
    assert settings.partial_is_terminal is True
    assert settings.use_test_signer is True


def test_dotenv_file_is_loaded(clean_env):
    env_file = clean_env / ".env"
    env_file.write_text("INTERSPACE_REQUEST_TIMEOUT=12.5\nINTERSPACE_NATIVE_GAS_THRESHOLD_WEI=1000\n")

    settings = load_settings(env_file=str(env_file))

    assert settings.request_timeout == 12.5
    assert settings.native_gas_threshold_wei == 1000


@pytest.mark.parametrize("name, value", [
    ("INTERSPACE_PARTIAL_IS_TERMINAL", "maybe"),
    ("INTERSPACE_POLL_INTERVAL_MS", "fast"),
    ("INTERSPACE_POLL_MAX_ATTEMPTS", "0"),
    ("INTERSPACE_REQUEST_TIMEOUT", "-1"),
])
def test_invalid_values_raise_configuration_error(clean_env, monkeypatch, name, value):
    monkeypatch.setenv(name, value)

    with pytest.raises(ConfigurationError):
        load_settings(env_file=str(clean_env / "missing.env"))


def test_settings_can_be_built_directly():
    assert Settings(poll_interval_ms=250).poll_interval == 0.25


def test_chain_names():
    assert get_chain_name(1) == "Ethereum"
    assert get_chain_name(146) == "Sonic"
    assert get_chain_name(999999) == "Chain 999999"
