"""Root of the Pulse Risk error hierarchy."""

from typing import Dict, Optional


class PulseError(Exception):
    """Anything Pulse Risk raises on purpose.

    ``details`` carries structured context (file path, config key, ...) that
    the CLI and logs render after the message as ``key=value`` pairs.
    """

    def __init__(self, message: str, details: Optional[Dict[str, str]] = None):
        super().__init__(message)
        self.message = message
        self.details = dict(details) if details else {}

    def __str__(self) -> str:
        if not self.details:
            return self.message
        context = ", ".join(f"{key}={value}" for key, value in self.details.items())
        return f"{self.message} ({context})"
