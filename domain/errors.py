from typing import List, Optional


class NotFoundError(LookupError):
    """A form or submission that does not exist or is not available."""


class ModelsExhaustedError(RuntimeError):
    """Every candidate model failed to return a usable evaluation."""

    def __init__(self, failure_notes: List[str], attempts: List[str],
                 raw_response_preview: Optional[str] = None):
        self.failure_notes = list(failure_notes)
        self.attempts = list(attempts)
        self.raw_response_preview = raw_response_preview
        message = " | ".join(self.failure_notes) or "All models failed."
        super().__init__(message)
