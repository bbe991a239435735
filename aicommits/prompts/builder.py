"""Prompt Builder - System instructions for commit message generation."""

from aicommits import COMMIT_TYPES, CONVENTIONAL_TYPES


def _build_type_section(commit_type: str) -> str:
    if commit_type != 'conventional':
        return ""
    types_list = "\n".join(f'  "{t}": "{desc}"' for t, desc in CONVENTIONAL_TYPES.items())
    return (
        "Choose a type from the type-to-description JSON below that best describes the git diff:\n"
        f"{{\n{types_list}\n}}"
    )


def _build_format_section(commit_type: str) -> str:
    return (
        "The output response must be in format:\n"
        f"{COMMIT_TYPES.get(commit_type, COMMIT_TYPES[''])}"
    )


def generate_prompt(locale: str, max_length: int, commit_type: str = "") -> str:
    """System prompt for a locale, subject length limit and commit type."""
    sections = [
        "Generate a concise git commit message written in present tense for the following code diff with the given specifications below:",
        f"Message language: {locale}",
        f"Commit message must be a maximum of {max_length} characters.",
        "Exclude anything unnecessary such as translation. Your entire response will be passed directly into git commit.",
        _build_type_section(commit_type),
        _build_format_section(commit_type),
    ]
    return "\n".join(filter(None, sections))
