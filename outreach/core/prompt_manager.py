# outreach/core/prompt_manager.py
"""
Centralized prompt management for the outreach wizard.

All templates live in the ``outreach.prompts`` modules; this manager
registers them under dotted keys and handles variable substitution:
- Organized prompt storage
- Variable extraction and checking
- Lookup by PromptType enum or string key
"""
from typing import Dict, Optional, List
from enum import Enum
import logging
import re
from dataclasses import dataclass
from outreach.core.exceptions import PromptError

logger = logging.getLogger(__name__)

_VARIABLE_PATTERN = re.compile(r'\{(\w+)\}')


class PromptCategory(str, Enum):
    """Categories for organizing prompts"""
    SCENARIO = "scenario"
    GENERATION = "generation"
    COMMON = "common"


class PromptType(str, Enum):
    """Enum for all prompt types - maps to prompt keys"""

    # Scenario context templates
    SCENARIO_HEADER = "scenario.header"
    SURGERY_SCHEDULING = "scenario.surgery_scheduling"
    POST_OP_CHECK = "scenario.post_op_check"
    EXAM_RESULT = "scenario.exam_result"
    CONSERVATIVE_TREATMENT = "scenario.conservative_treatment"

    # Generation prompts
    MESSAGE_SYSTEM = "generation.message_system"
    MESSAGE_REQUEST = "generation.message_request"
    TONE_PROFESSIONAL = "generation.tone.professional"
    TONE_EMPATHETIC = "generation.tone.empathetic"
    TONE_MOTIVATIONAL = "generation.tone.motivational"

    # Operator notices and labels
    GENERATION_FAILED = "common.generation.failed"
    GENERATION_SUCCEEDED = "common.generation.succeeded"
    CAPTURE_FAILED = "common.capture.failed"
    SHARE_FAILED = "common.share.failed"
    DOWNLOAD_READY = "common.download.ready"
    COPY_FAILED = "common.copy.failed"
    LINK_OPEN_FAILED = "common.link.open.failed"
    SHARE_TITLE = "common.share.title"
    SHARE_TEXT = "common.share.text"
    STEP_COUNTER = "common.step.counter"


@dataclass
class Prompt:
    """Represents a single prompt template"""
    key: str
    template: str
    category: PromptCategory
    description: str = ""
    variables: List[str] = None

    def __post_init__(self):
        if self.variables is None:
            self.variables = sorted(set(_VARIABLE_PATTERN.findall(self.template)))

    def format(self, **kwargs) -> str:
        """
        Format the prompt with provided variables.

        Args:
            **kwargs: Variable values

        Returns:
            Formatted prompt string

        Raises:
            PromptError: If required variables are missing
        """
        missing = set(self.variables) - set(kwargs.keys())
        if missing:
            raise PromptError(
                prompt_type=self.key,
                message=f"Missing required variables: {sorted(missing)}",
                details={"missing_variables": sorted(missing)}
            )

        try:
            return self.template.format(**kwargs)
        except (KeyError, IndexError, ValueError) as e:
            raise PromptError(
                prompt_type=self.key,
                message=f"Error formatting prompt: {e}",
                details={"error": str(e)}
            )


class PromptManager:
    """
    Centralized prompt management system.

    This manager:
    - Loads prompts from the prompt modules
    - Provides access by key or PromptType
    - Handles variable substitution
    """

    def __init__(self):
        self.prompts: Dict[str, Prompt] = {}
        self._loaded = False

    def get_prompt(self, prompt_type, **kwargs) -> str:
        """
        Get a formatted prompt by PromptType enum or string key.

        Args:
            prompt_type: PromptType enum value or string key
            **kwargs: Variables for formatting

        Returns:
            Formatted prompt string
        """
        key = prompt_type.value if hasattr(prompt_type, 'value') else str(prompt_type)
        return self.get(key, **kwargs)

    def load_prompts(self):
        """Register all prompts from the prompt modules (idempotent)."""
        if self._loaded:
            logger.debug("Prompts already loaded")
            return

        self._define_prompts()

        self._loaded = True
        logger.info(f"Loaded {len(self.prompts)} prompts")

    def _define_prompts(self):
        """Load all prompts from the prompt files"""
        from outreach.prompts import (
            scenario_prompts,
            generation_prompts,
            common_prompts
        )

        def register_from_module(module, category: PromptCategory, key_prefix: str):
            """Register all string constants from a module as prompts"""
            for name in dir(module):
                value = getattr(module, name)
                if isinstance(value, str) and name.isupper() and not name.startswith('_'):
                    # CONSTANT_NAME -> prefix.constant.name
                    key = f"{key_prefix}.{'.'.join(name.lower().split('_'))}"
                    self.add_prompt(Prompt(
                        key=key,
                        template=value,
                        category=category,
                        description=f"Auto-imported from {module.__name__}.{name}"
                    ))

        register_from_module(common_prompts, PromptCategory.COMMON, "common")

        # Scenario templates keep underscore keys matching ScenarioType names
        scenario_templates = {
            PromptType.SCENARIO_HEADER: scenario_prompts.SCENARIO_HEADER_TEMPLATE,
            PromptType.SURGERY_SCHEDULING: scenario_prompts.SURGERY_SCHEDULING_TEMPLATE,
            PromptType.POST_OP_CHECK: scenario_prompts.POST_OP_CHECK_TEMPLATE,
            PromptType.EXAM_RESULT: scenario_prompts.EXAM_RESULT_TEMPLATE,
            PromptType.CONSERVATIVE_TREATMENT: scenario_prompts.CONSERVATIVE_TREATMENT_TEMPLATE,
        }
        for prompt_type, template in scenario_templates.items():
            self.add_prompt(Prompt(
                key=prompt_type.value,
                template=template,
                category=PromptCategory.SCENARIO
            ))

        generation_templates = {
            PromptType.MESSAGE_SYSTEM: generation_prompts.MESSAGE_SYSTEM_TEMPLATE,
            PromptType.MESSAGE_REQUEST: generation_prompts.MESSAGE_REQUEST_TEMPLATE,
            PromptType.TONE_PROFESSIONAL: generation_prompts.TONE_PROFESSIONAL,
            PromptType.TONE_EMPATHETIC: generation_prompts.TONE_EMPATHETIC,
            PromptType.TONE_MOTIVATIONAL: generation_prompts.TONE_MOTIVATIONAL,
        }
        for prompt_type, template in generation_templates.items():
            self.add_prompt(Prompt(
                key=prompt_type.value,
                template=template,
                category=PromptCategory.GENERATION
            ))

    def add_prompt(self, prompt: Prompt):
        """Add a prompt to the manager"""
        if prompt.key in self.prompts:
            logger.warning(f"Overwriting existing prompt: {prompt.key}")

        self.prompts[prompt.key] = prompt

    def get(self, key: str, **kwargs) -> str:
        """
        Get a formatted prompt by key.

        Args:
            key: Prompt key (e.g., "scenario.post_op_check")
            **kwargs: Variables for formatting

        Returns:
            Formatted prompt string

        Raises:
            PromptError: If prompt not found or formatting fails
        """
        if not self._loaded:
            self.load_prompts()

        if key not in self.prompts:
            raise PromptError(
                prompt_type=key,
                message=f"Prompt not found: {key}",
                details={"available_keys": list(self.prompts.keys())}
            )

        prompt = self.prompts[key]

        if not prompt.variables and not kwargs:
            return prompt.template

        return prompt.format(**kwargs)

    def list_prompts(self, category: Optional[PromptCategory] = None) -> List[str]:
        """
        List all available prompt keys.

        Args:
            category: Optional category filter

        Returns:
            List of prompt keys
        """
        if not self._loaded:
            self.load_prompts()

        if category:
            return [
                key for key, prompt in self.prompts.items()
                if prompt.category == category
            ]

        return list(self.prompts.keys())


# Shared instance; templates are read-only once loaded
_prompt_manager = None


def get_prompt_manager() -> PromptManager:
    """Get the shared PromptManager instance"""
    global _prompt_manager
    if _prompt_manager is None:
        _prompt_manager = PromptManager()
        _prompt_manager.load_prompts()
    return _prompt_manager
