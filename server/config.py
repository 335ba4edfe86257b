import os
from dataclasses import dataclass
from enum import Enum
from typing import Mapping


class Provider(str, Enum):
    OPENAI = "OpenAI"
    GEMINI = "Gemini"


@dataclass(frozen=True)
class ProviderConfig:
    provider: Provider
    api_key: str


def resolve_provider_config(environ: Mapping[str, str] | None = None) -> ProviderConfig | None:
    """Pick the upstream provider from whichever credential is set.

    OPENAI_API_KEY wins over GEMINI_API_KEY. Returns None when neither is present.
    """
    env = os.environ if environ is None else environ
    openai_key = env.get("OPENAI_API_KEY")
    if openai_key:
        return ProviderConfig(Provider.OPENAI, openai_key)
    gemini_key = env.get("GEMINI_API_KEY")
    if gemini_key:
        return ProviderConfig(Provider.GEMINI, gemini_key)
    return None
