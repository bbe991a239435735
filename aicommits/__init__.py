"""
aicommits

AI-generated commit messages from a staged diff via an OpenAI-compatible
chat completions API.
"""

__version__ = "1.0.0"

# Commit message formats - single source of truth
# Used by: prompts/builder.py (format line), config (validation), cli/args.py (argparse)
COMMIT_TYPES = {
    '': '<commit message>',
    'conventional': '<type>(<optional scope>): <commit message>',
}

COMMIT_TYPE_NAMES = list(COMMIT_TYPES.keys())

# Conventional commit types offered to the model when type == 'conventional'
CONVENTIONAL_TYPES = {
    'docs': 'Documentation only changes',
    'style': 'Changes that do not affect the meaning of the code (white-space, formatting, missing semi-colons, etc)',
    'refactor': 'A code change that neither fixes a bug nor adds a feature',
    'perf': 'A code change that improves performance',
    'test': 'Adding missing tests or correcting existing tests',
    'build': 'Changes that affect the build system or external dependencies',
    'ci': 'Changes to our CI configuration files and scripts',
    'chore': "Other changes that don't modify src or test files",
    'revert': 'Reverts a previous commit',
    'feat': 'A new feature',
    'fix': 'A bug fix',
}
