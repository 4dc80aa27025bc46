class DecodeError(ValueError):
    """
    Raised when a wire value cannot be decoded into a Zone.
    """

    def __init__(self, path: str, message: str) -> None:
        self.path = path
        self.message = message
        super().__init__(f"{path or '<root>'}: {message}")


class TZifError(ValueError):
    """
    Raised for malformed compiled time zone data.
    """
