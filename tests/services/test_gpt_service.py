# tests/services/test_gpt_service.py
"""
Unit tests for the GPT Service.

Uses mock-first approach to test without making real API calls.
"""
import os
import pytest
from unittest.mock import Mock, AsyncMock, patch
from openai.types.chat import ChatCompletion, ChatCompletionMessage
from openai.types.chat.chat_completion import Choice
from openai.types.completion_usage import CompletionUsage

from outreach.core.config import Settings
from outreach.services.gpt_service import GPTService, GPTConfig
from outreach.core.exceptions import GPTServiceError, ConfigurationError, ServiceError, ValidationError


def _completion(content):
    return ChatCompletion(
        id="test-id",
        object="chat.completion",
        created=1234567890,
        model="gpt-4o-mini",
        choices=[Choice(
            index=0,
            message=ChatCompletionMessage(role="assistant", content=content),
            finish_reason="stop"
        )],
        usage=CompletionUsage(prompt_tokens=10, completion_tokens=20, total_tokens=30)
    )


@pytest.fixture
def mock_config():
    """Create a test configuration"""
    return GPTConfig(
        api_key="test-api-key",
        model="gpt-4o-mini",
        temperature=0.7,
        timeout=30
    )


@pytest.fixture
def mock_openai_client():
    """Create a mock OpenAI client"""
    client = Mock()
    client.chat.completions.create = AsyncMock(return_value=_completion("Olá Maria!"))
    client.close = AsyncMock()
    return client


@pytest.fixture
async def gpt_service(mock_config, mock_openai_client):
    """Create a GPT service with mocked client"""
    service = GPTService(mock_config)

    with patch.object(service, '_initialize_client', return_value=mock_openai_client):
        await service.initialize()

    return service


@pytest.mark.unit
class TestGPTService:
    """Test GPT Service functionality"""

    async def test_initialization(self, mock_config):
        service = GPTService(mock_config)

        assert service.config == mock_config
        assert not service.is_initialized

        with patch.object(service, '_initialize_client', return_value=Mock()):
            await service.initialize()

        assert service.is_initialized

    async def test_lazy_initialization_on_first_complete(self, mock_config):
        with patch('outreach.services.gpt_service.AsyncOpenAI') as openai_cls:
            openai_cls.return_value.chat.completions.create = AsyncMock(return_value=_completion("Olá"))
            service = GPTService(mock_config)

            assert await service.complete("Prompt") == "Olá"

        openai_cls.assert_called_once_with(api_key="test-api-key", timeout=30, max_retries=2)
        assert service.is_initialized

    def test_config_from_settings(self):
        settings = Settings(
            OPENAI_APIKEY="env-api-key",
            GPT_MODEL="gpt-4o",
            GPT_TEMPERATURE=0.5,
            GPT_MAX_RETRIES=4
        )

        config = GPTConfig.from_settings(settings)

        assert config.api_key == "env-api-key"
        assert config.model == "gpt-4o"
        assert config.temperature == 0.5
        assert config.max_retries == 4

    async def test_missing_api_key(self):
        service = GPTService(GPTConfig(api_key=None))

        with pytest.raises(ConfigurationError) as exc_info:
            await service.initialize()

        assert "API key is required" in str(exc_info.value)
        assert exc_info.value.component == "api_key"

    async def test_invalid_temperature(self):
        service = GPTService(GPTConfig(api_key="test", temperature=3.0))

        with pytest.raises(ConfigurationError) as exc_info:
            await service.initialize()

        assert "Temperature must be between" in str(exc_info.value)

    async def test_client_failure_wrapped(self, mock_config):
        service = GPTService(mock_config)

        with patch.object(service, '_initialize_client', side_effect=RuntimeError("no network")):
            with pytest.raises(ServiceError) as exc_info:
                await service.initialize()

        assert exc_info.value.operation == "initialize"
        assert not service.is_initialized

    def test_client_before_initialize(self, mock_config):
        service = GPTService(mock_config)

        with pytest.raises(ServiceError):
            service.client

    async def test_complete_success(self, gpt_service):
        result = await gpt_service.complete("Test prompt")

        assert result == "Olá Maria!"

        call_args = gpt_service.client.chat.completions.create.call_args
        assert call_args[1]['model'] == 'gpt-4o-mini'
        assert call_args[1]['messages'][0]['content'] == 'Test prompt'
        assert call_args[1]['temperature'] == 0.7
        assert 'max_tokens' not in call_args[1]

    async def test_complete_with_system_prompt(self, gpt_service):
        await gpt_service.complete("User prompt", system_prompt="System instructions")

        messages = gpt_service.client.chat.completions.create.call_args[1]['messages']

        assert len(messages) == 2
        assert messages[0] == {'role': 'system', 'content': 'System instructions'}
        assert messages[1] == {'role': 'user', 'content': 'User prompt'}

    async def test_complete_overrides(self, gpt_service):
        await gpt_service.complete("Prompt", temperature=0, max_tokens=5)

        call_args = gpt_service.client.chat.completions.create.call_args
        assert call_args[1]['temperature'] == 0
        assert call_args[1]['max_tokens'] == 5

    async def test_complete_strips_content(self, gpt_service):
        gpt_service.client.chat.completions.create.return_value = _completion("  Olá!\n")
        assert await gpt_service.complete("Prompt") == "Olá!"

    async def test_complete_empty_prompt(self, gpt_service):
        with pytest.raises(ValidationError) as exc_info:
            await gpt_service.complete("   ")

        assert "Prompt cannot be empty" in str(exc_info.value)
        gpt_service.client.chat.completions.create.assert_not_awaited()

    async def test_complete_empty_content(self, gpt_service):
        gpt_service.client.chat.completions.create.return_value = _completion(None)

        with pytest.raises(GPTServiceError) as exc_info:
            await gpt_service.complete("Prompt")

        assert "Empty completion" in str(exc_info.value)

    async def test_complete_api_error(self, gpt_service):
        gpt_service.client.chat.completions.create.side_effect = Exception("API Error")

        with pytest.raises(GPTServiceError) as exc_info:
            await gpt_service.complete("Test prompt")

        assert "Failed to generate completion" in str(exc_info.value)
        assert exc_info.value.__cause__ is not None
        assert exc_info.value.model == "gpt-4o-mini"

    async def test_health_check_healthy(self, gpt_service):
        health = await gpt_service.health_check()

        assert health['healthy'] is True
        assert health['status'] == 'connected'
        assert 'response_time_ms' in health['details']

    async def test_health_check_unhealthy(self, gpt_service):
        gpt_service.client.chat.completions.create.side_effect = Exception("Connection error")

        health = await gpt_service.health_check()

        assert health['healthy'] is False
        assert health['status'] == 'error'
        assert 'error' in health['details']

    async def test_shutdown_closes_client(self, gpt_service, mock_openai_client):
        await gpt_service.shutdown()

        mock_openai_client.close.assert_awaited_once()
        assert not gpt_service.is_initialized

    async def test_get_metrics(self, gpt_service):
        metrics = gpt_service.get_metrics()

        assert metrics['service_name'] == 'GPTService'
        assert metrics['initialized'] is True
        assert metrics['model'] == 'gpt-4o-mini'
        assert metrics['temperature'] == 0.7
        assert metrics['timeout'] == 30


@pytest.mark.integration
class TestGPTServiceIntegration:
    """Integration tests that make real API calls"""

    @pytest.mark.skipif(
        not os.getenv("RUN_INTEGRATION_TESTS"),
        reason="Integration tests disabled"
    )
    async def test_real_completion(self):
        service = GPTService(GPTConfig(api_key=os.getenv("OPENAI_API_KEY")))

        result = await service.complete("Diga olá em uma palavra", temperature=0, max_tokens=5)

        assert isinstance(result, str)
        assert len(result) > 0
