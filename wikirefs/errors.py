from __future__ import annotations


class WikiError(Exception):
    """Base class for every error raised by wikirefs."""


class ConfigError(WikiError):
    pass


class ProviderError(WikiError):
    """Storage provider could not read, write or move something."""


class RenameError(WikiError):
    pass


class InvalidArgument(RenameError):
    pass


class NoOpRename(RenameError):
    pass


class PageNotFound(RenameError):
    pass


class PageAlreadyExists(RenameError):
    pass


class InternalRenameError(RenameError):
    """
    The page was moved, but the state after the move is not what it should
    be. Needs operator attention.
    """


class RewriteFailed(WikiError):
    """A referring page could not be rewritten after a rename."""

    def __init__(self, page: str, cause: BaseException):
        super().__init__(f"Unable to update links in {page}: {cause}")
        self.page = page
        self.cause = cause
