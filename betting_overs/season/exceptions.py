"""Recoverable errors raised by the week orchestration layer."""


class WeekNotFound(LookupError):
    """No week (or no fixtures) matched the request."""


class SelectionRejected(ValueError):
    """A pick submission failed validation."""


class RefreshCooldown(RuntimeError):
    """Fixtures were refreshed too recently."""

    def __init__(self, wait_seconds: int):
        self.wait_seconds = wait_seconds
        minutes = -(-wait_seconds // 60)
        super().__init__(
            f"Fixtures were refreshed recently. Try again in {minutes} minute(s)."
        )
