"""Prompt Generation Package"""

from aicommits.prompts.builder import generate_prompt

__all__ = ["generate_prompt"]
