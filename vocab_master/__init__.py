"""Local definition cache and derived-state management for vocab-master."""

from .environment import load_environment

# Load environment variables from .env-style files as soon as the package is
# imported so the CLI and library callers resolve the same settings.
load_environment()

__all__ = ["load_environment"]
