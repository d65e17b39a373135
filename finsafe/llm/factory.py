"""LLM provider factory."""

from finsafe.llm import LLMProvider


def get_provider(provider_name: str = "gemini") -> LLMProvider:
    """Return the configured LLM provider."""
    if provider_name == "gemini":
        from finsafe.llm.gemini import GeminiProvider
        return GeminiProvider()
    raise ValueError(f"Unknown LLM provider: {provider_name}")
