class BartenderError(Exception):
    """Base exception for the order recognizer."""

    pass


class NotUnderstood(BartenderError):
    """Raised when a line of text is not a recognizable drink order."""

    def __init__(self, text: str):
        super().__init__(f"Not understood: {text!r}")
        self.text = text


class GrammarError(BartenderError):
    """Raised when grammar notation or its vocabulary wiring is broken."""

    pass
