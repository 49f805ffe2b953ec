# outreach/prompts/__init__.py
"""Prompts package - centralized prompt management"""

# Import all prompt modules for PromptManager
from . import scenario_prompts
from . import generation_prompts
from . import common_prompts

__all__ = [
    'scenario_prompts',
    'generation_prompts',
    'common_prompts'
]
