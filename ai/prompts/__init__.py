# ai/prompts/__init__.py
from ai.prompts.profile_extraction import PROFILE_EXTRACTION

__all__ = ["PROFILE_EXTRACTION"]
