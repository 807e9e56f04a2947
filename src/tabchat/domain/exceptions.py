class TabchatError(Exception):
    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class NotFoundError(TabchatError):
    """Requested resource does not exist."""


class ConflictError(TabchatError):
    """Operation conflicts with existing state (e.g. two CSVs claiming one table)."""


class LLMError(TabchatError):
    """Language model provider call failed; ``message`` is safe to show users."""
