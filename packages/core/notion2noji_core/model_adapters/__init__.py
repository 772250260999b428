"""Model adapters for LLM backends.

Supported providers:
- OpenAI: any chat model with vision and structured output (gpt-4o, gpt-4o-mini)
"""

from notion2noji_core.model_adapters.base import BaseModelAdapter
from notion2noji_core.model_adapters.openai import OpenAIAdapter

__all__ = ["BaseModelAdapter", "OpenAIAdapter"]
