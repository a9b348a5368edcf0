"""Exception types raised by the journal."""


class JournalError(Exception):
    """Raised when a journal operation cannot be completed."""


class TemplateError(JournalError):
    """Raised when a template cannot be parsed or rendered."""