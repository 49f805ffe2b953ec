# outreach/services/gpt_service.py
"""
GPT Service for the outreach wizard.

Async-only wrapper around the OpenAI chat completions API with:
- Consistent error handling
- Lazy initialization
- Health checks
- No embedded prompts
"""
from typing import Optional, Dict, Any
from dataclasses import dataclass
import logging
import time
from openai import AsyncOpenAI
from openai.types.chat import ChatCompletion

from outreach.core.config import Settings, settings as default_settings
from outreach.core.service_base import BaseService, ServiceConfig
from outreach.core.exceptions import (
    GPTServiceError,
    ConfigurationError,
    ValidationError
)

logger = logging.getLogger(__name__)


@dataclass
class GPTConfig(ServiceConfig):
    """Configuration for GPT Service"""
    api_key: Optional[str] = None
    model: str = "gpt-4o-mini"
    max_tokens: Optional[int] = None
    temperature: float = 0.7
    timeout: int = 30
    max_retries: int = 2

    @classmethod
    def from_settings(cls, settings: Settings) -> "GPTConfig":
        return cls(
            api_key=settings.OPENAI_API_KEY,
            model=settings.GPT_MODEL,
            temperature=settings.GPT_TEMPERATURE,
            timeout=settings.GPT_TIMEOUT,
            max_retries=settings.GPT_MAX_RETRIES
        )


class GPTService(BaseService[GPTConfig]):
    """
    Async-only GPT service for text generation.

    Provides a clean interface to OpenAI's chat models, handling API
    interaction and error wrapping.
    """

    def __init__(self, config: Optional[GPTConfig] = None):
        """
        Initialize GPT Service.

        Args:
            config: GPT configuration. If not provided, built from application settings.
        """
        if config is None:
            config = GPTConfig.from_settings(default_settings)

        super().__init__(config, logger)

    def _validate_config(self) -> None:
        """Validate GPT configuration"""
        super()._validate_config()

        if not self.config.api_key:
            raise ConfigurationError(
                component="api_key",
                message="OpenAI API key is required. Set OPENAI_API_KEY environment variable."
            )

        if self.config.temperature < 0 or self.config.temperature > 2:
            raise ConfigurationError(
                component="temperature",
                message="Temperature must be between 0 and 2"
            )

    async def _initialize_client(self) -> AsyncOpenAI:
        """Initialize the OpenAI client"""
        return AsyncOpenAI(
            api_key=self.config.api_key,
            timeout=self.config.timeout,
            max_retries=self.config.max_retries
        )

    async def complete(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        **kwargs
    ) -> str:
        """
        Generate a completion for the given prompt.

        Args:
            prompt: The user prompt
            system_prompt: Optional system prompt to set context
            temperature: Override default temperature
            max_tokens: Override default max tokens
            **kwargs: Additional OpenAI API parameters

        Returns:
            Generated text completion

        Raises:
            GPTServiceError: If generation fails
            ValidationError: If inputs are invalid
        """
        await self.ensure_initialized()

        if not prompt or not prompt.strip():
            raise ValidationError(
                field="prompt",
                message="Prompt cannot be empty"
            )

        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})

        params = {
            "model": self.config.model,
            "messages": messages,
            "temperature": self.config.temperature if temperature is None else temperature,
        }

        if max_tokens or self.config.max_tokens:
            params["max_tokens"] = max_tokens or self.config.max_tokens

        params.update(kwargs)

        try:
            self.logger.debug(f"Generating completion with model {params['model']}")

            response: ChatCompletion = await self.client.chat.completions.create(**params)

            if not response.choices:
                raise GPTServiceError(
                    message="No completion choices returned from API",
                    model=params["model"]
                )

            content = response.choices[0].message.content

            if not content:
                raise GPTServiceError(
                    message="Empty completion returned from API",
                    model=params["model"]
                )

            self.logger.debug(f"Generated completion: {len(content)} characters")
            return content.strip()

        except (GPTServiceError, ValidationError):
            raise
        except Exception as e:
            error_msg = f"Failed to generate completion: {str(e)}"
            self.logger.error(error_msg, exc_info=True)

            raise GPTServiceError(
                message=error_msg,
                model=params["model"],
                prompt_length=len(prompt),
                details={"error_type": type(e).__name__}
            ) from e

    async def health_check(self) -> Dict[str, Any]:
        """
        Check GPT service health.

        Returns:
            Health status including availability and response time
        """
        try:
            start_time = time.time()

            await self.complete(
                "Respond with OK",
                temperature=0,
                max_tokens=5
            )

            response_time_ms = int((time.time() - start_time) * 1000)

            return {
                "healthy": True,
                "status": "connected",
                "details": {
                    "model": self.config.model,
                    "response_time_ms": response_time_ms,
                    "api_key_set": bool(self.config.api_key)
                }
            }

        except Exception as e:
            return {
                "healthy": False,
                "status": "error",
                "details": {
                    "error": str(e),
                    "model": self.config.model
                }
            }

    async def _cleanup(self) -> None:
        await self._client.close()

    def get_metrics(self) -> Dict[str, Any]:
        """Get service metrics"""
        metrics = super().get_metrics()
        metrics.update({
            "model": self.config.model,
            "temperature": self.config.temperature,
            "timeout": self.config.timeout
        })
        return metrics
