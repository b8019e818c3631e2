"""Parse errors raised for malformed version and range text."""


class ParseError(ValueError):
    """Base class for version and range text that cannot be used."""

    def __init__(self, text, message):
        super().__init__(message)
        self.text = text


class InvalidVersionFormat(ParseError):
    """Version text is not ``major.minor.patch[.QUALIFIER]``."""

    def __init__(self, text, reason=None):
        message = f"Invalid version format '{text}'"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(text, message)


class InvalidRangeFormat(ParseError):
    """Range text is empty or its bracket notation is malformed."""

    def __init__(self, text, reason=None):
        message = f"Invalid range format '{text}'"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(text, message)


class InvalidRangeBounds(ParseError):
    """Range bounds are syntactically valid but describe an unusable interval."""

    def __init__(self, text, reason):
        super().__init__(text, f"Invalid range bounds '{text}': {reason}")
