"""
LLM Provider — Abstract Interface

Every generative-model call goes through this interface. Swap
providers by changing FINSAFE_LLM_PROVIDER in env.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional


class LLMProvider(ABC):
    """Abstract base for LLM providers."""

    name: str = "llm"

    @abstractmethod
    async def generate(
        self,
        prompt: str,
        system_instruction: Optional[str] = None,
        temperature: float = 0.7,
    ) -> str:
        """Generate a text response from the LLM."""
        ...
