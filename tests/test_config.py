# settings parsing and provider wiring

import pytest
from pydantic import ValidationError
from multiweather.config import ConfigError, Settings, build_providers, load_settings
from multiweather.providers import Forecast, OpenWeatherMap, WeatherUnderground

ENV_KEYS = [
    "OPENWEATHERMAP_API_KEY",
    "WUNDERGROUND_API_KEY",
    "FORECAST_API_KEY",
    "FORECAST_REQUIRE_COORDS",
    "GEOCODE_API_KEY",
    "MULTIWEATHER_DEADLINE",
    "MULTIWEATHER_HTTP_TIMEOUT",
    "MULTIWEATHER_TIMEOUT_IS_ERROR",
    "MULTIWEATHER_HOST",
    "MULTIWEATHER_PORT",
    "MULTIWEATHER_LOG_LEVEL",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    # start every test from an empty configuration, whatever the shell exported
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


def test_defaults():
    s = load_settings(env_file=None)
    assert s.deadline == 2.0
    assert s.http_timeout == 5.0
    assert s.port == 8080
    assert s.log_level == "INFO"
    assert s.forecast_require_coords is True
    assert s.timeout_is_error is False
    assert s.wunderground_api_key is None


def test_values_from_env(monkeypatch):
    for key, value in {
        "WUNDERGROUND_API_KEY": "wu",
        "FORECAST_API_KEY": "fc",
        "FORECAST_REQUIRE_COORDS": "no",
        "MULTIWEATHER_DEADLINE": "0.5",
        "MULTIWEATHER_TIMEOUT_IS_ERROR": "true",
        "MULTIWEATHER_PORT": "9000",
        "MULTIWEATHER_LOG_LEVEL": "debug",
    }.items():
        monkeypatch.setenv(key, value)

    s = load_settings(env_file=None)

    assert (s.wunderground_api_key, s.forecast_api_key) == ("wu", "fc")
    assert s.forecast_require_coords is False
    assert s.deadline == 0.5
    assert s.timeout_is_error is True
    assert s.port == 9000
    assert s.log_level == "DEBUG"


def test_empty_key_counts_as_unset(monkeypatch):
    monkeypatch.setenv("WUNDERGROUND_API_KEY", "")
    assert load_settings(env_file=None).wunderground_api_key is None


def test_reads_dotenv_file(tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text("MULTIWEATHER_DEADLINE=1.25\nFORECAST_API_KEY=fc\n")

    s = load_settings(env_file=str(env_file))

    assert s.deadline == 1.25
    assert s.forecast_api_key == "fc"


@pytest.mark.parametrize(
    "key, value",
    [
        ("MULTIWEATHER_DEADLINE", "soon"),
        ("MULTIWEATHER_DEADLINE", "0"),
        ("MULTIWEATHER_HTTP_TIMEOUT", "-1"),
        ("MULTIWEATHER_PORT", "eighty"),
        ("MULTIWEATHER_PORT", "0"),
        ("FORECAST_REQUIRE_COORDS", "maybe"),
        ("MULTIWEATHER_LOG_LEVEL", "verbose"),
    ],
)
def test_invalid_values_rejected(monkeypatch, key, value):
    monkeypatch.setenv(key, value)
    with pytest.raises(ConfigError, match=f"(?i){key}"):
        load_settings(env_file=None)


def test_settings_are_frozen():
    s = load_settings(env_file=None)
    with pytest.raises(ValidationError):
        s.deadline = 10.0


def test_only_openweathermap_without_keys():
    providers = build_providers(Settings(_env_file=None))
    assert [type(p) for p in providers] == [OpenWeatherMap]


def test_keys_enable_providers_in_order():
    s = Settings(
        _env_file=None,
        WUNDERGROUND_API_KEY="wu",
        FORECAST_API_KEY="fc",
        GEOCODE_API_KEY="g",
        MULTIWEATHER_HTTP_TIMEOUT=3.0,
    )
    providers = build_providers(s)

    assert [type(p) for p in providers] == [OpenWeatherMap, WeatherUnderground, Forecast]
    forecast = providers[2]
    assert forecast.requires_coords is True
    assert forecast.geocoder.api_key == "g"
    assert all(p.timeout == 3.0 for p in providers)
