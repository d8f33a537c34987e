"""
Loop API — Configuration Tests
================================

What we test:
    ✅ Both spellings of the backend variables are accepted
    ✅ check_environment names what is missing and never raises
    ✅ log_level validation and URL normalization
"""

import logging

import pytest
from pydantic import ValidationError

from loop_api.config import Settings, check_environment

ALL_REQUIRED = {
    "SUPABASE_URL": "http://supabase.test",
    "SUPABASE_ANON_KEY": "anon",
    "SUPABASE_SERVICE_ROLE_KEY": "service",
    "CLOUDINARY_CLOUD_NAME": "cloud",
    "CLOUDINARY_API_KEY": "key",
    "CLOUDINARY_API_SECRET": "secret",
}


@pytest.fixture
def clean_env(monkeypatch):
    for name in list(ALL_REQUIRED) + [
        "NEXT_PUBLIC_SUPABASE_URL",
        "NEXT_PUBLIC_SUPABASE_ANON_KEY",
        "NEXT_PUBLIC_WEBSOCKET_URL",
        "REALTIME_URL",
    ]:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def make_settings(**env) -> Settings:
    return Settings(_env_file=None, **env)


class TestSettings:

    def test_frontend_variable_names(self, clean_env):
        clean_env.setenv("NEXT_PUBLIC_SUPABASE_URL", "https://project.supabase.co/")
        clean_env.setenv("NEXT_PUBLIC_SUPABASE_ANON_KEY", "anon")
        clean_env.setenv("NEXT_PUBLIC_WEBSOCKET_URL", "http://ws.test:3001")

        config = make_settings()

        assert config.supabase_url == "https://project.supabase.co"
        assert config.supabase_anon_key == "anon"
        assert config.realtime_url == "http://ws.test:3001"

    def test_backend_key_prefers_service_role(self, clean_env):
        clean_env.setenv("SUPABASE_ANON_KEY", "anon")
        assert make_settings().backend_api_key == "anon"

        clean_env.setenv("SUPABASE_SERVICE_ROLE_KEY", "service")
        assert make_settings().backend_api_key == "service"

    def test_log_level_is_normalized(self, clean_env):
        clean_env.setenv("LOG_LEVEL", "debug")

        assert make_settings().log_level == "DEBUG"

    def test_invalid_log_level(self, clean_env):
        clean_env.setenv("LOG_LEVEL", "LOUD")

        with pytest.raises(ValidationError):
            make_settings()

    def test_cors_origins_list(self, clean_env):
        clean_env.setenv("CORS_ORIGINS", "http://a.test, http://b.test,")

        assert make_settings().cors_origins_list == ["http://a.test", "http://b.test"]


class TestCheckEnvironment:

    def test_all_present(self, clean_env):
        for name, value in ALL_REQUIRED.items():
            clean_env.setenv(name, value)

        assert check_environment(make_settings()) is True

    def test_missing_variables_are_logged(self, clean_env, caplog):
        clean_env.setenv("SUPABASE_URL", "http://supabase.test")

        with caplog.at_level(logging.ERROR, logger="loop_api.config"):
            assert check_environment(make_settings()) is False

        assert "CLOUDINARY_API_SECRET" in caplog.text
        assert "SUPABASE_ANON_KEY" in caplog.text
        assert "SUPABASE_URL" not in caplog.text
