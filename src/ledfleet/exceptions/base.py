"""Root of the ledfleet exception tree.

Every failure raised on purpose derives from LedFleetError, so the CLI
catches the whole family in one place. An error has two audiences: the
operator at the terminal reads `user_message` and `recovery_hint`, the
log file gets `technical_message`.
"""

from typing import Optional


class LedFleetError(Exception):
    """
    Base exception for ledfleet.

    Attributes:
        user_message: Short text for the operator
        technical_message: Detail for the log (falls back to user_message)
        recoverable: True if trying again later may succeed
        recovery_hint: What the operator can do about it, if anything
    """

    def __init__(
        self,
        user_message: str,
        technical_message: Optional[str] = None,
        recoverable: bool = False,
        recovery_hint: Optional[str] = None,
    ):
        super().__init__(user_message)
        self.user_message = user_message
        self.technical_message = technical_message or user_message
        self.recoverable = recoverable
        self.recovery_hint = recovery_hint

    def __str__(self) -> str:
        return self.user_message

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.technical_message!r})"

    def get_full_message(self) -> str:
        """The operator message, followed by the recovery hint when there is one."""
        if not self.recovery_hint:
            return self.user_message
        return f"{self.user_message}\n\nSuggestion: {self.recovery_hint}"
