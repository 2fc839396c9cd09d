"""
Tests for the Supabase and OpenAI client singletons.
"""

from unittest.mock import MagicMock

import pytest

from picky_joy.db import client as db_client
from picky_joy.errors import ConfigurationError
from picky_joy.llm import client as llm_client


@pytest.fixture
def clean_env(monkeypatch):
    for name in ("SUPABASE_URL", "SUPABASE_SERVICE_ROLE_KEY", "OPENAI_API_KEY"):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestServiceClient:
    def test_unconfigured_names_missing_vars(self, clean_env):
        with pytest.raises(ConfigurationError) as exc_info:
            db_client.get_service_client()
        assert exc_info.value.details == "Missing environment variables: SUPABASE_URL, SUPABASE_SERVICE_ROLE_KEY"

    def test_cached_until_reset(self, clean_env):
        clean_env.setenv("SUPABASE_URL", "https://example.supabase.co")
        clean_env.setenv("SUPABASE_SERVICE_ROLE_KEY", "service-key")
        create_client = MagicMock(side_effect=lambda url, key: MagicMock())
        clean_env.setattr(db_client, "create_client", create_client)

        first = db_client.get_service_client()
        assert db_client.get_service_client() is first
        create_client.assert_called_once_with("https://example.supabase.co", "service-key")

        db_client.reset_service_client()
        assert db_client.get_service_client() is not first
        assert create_client.call_count == 2


class TestOpenAIClient:
    def test_missing_key(self, clean_env):
        with pytest.raises(ConfigurationError) as exc_info:
            llm_client.get_client()
        assert "OPENAI_API_KEY" in exc_info.value.details

    def test_no_sdk_retries(self, clean_env):
        clean_env.setenv("OPENAI_API_KEY", "sk-test")
        openai_cls = MagicMock()
        clean_env.setattr(llm_client, "OpenAI", openai_cls)

        client = llm_client.get_client()

        assert llm_client.get_client() is client
        kwargs = openai_cls.call_args.kwargs
        assert kwargs["api_key"] == "sk-test"
        assert kwargs["max_retries"] == 0

        llm_client.reset_client()
        llm_client.get_client()
        assert openai_cls.call_count == 2
