"""reviewprompt - turn GitHub PR review comments into AI prompts."""

__version__ = "0.1.0"
