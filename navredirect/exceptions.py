"""
Exceptions raised by navredirect.

We use builtin exceptions where they fit (e.g. ValueError for a malformed rule)
and only specialize where callers need to tell failures apart.
"""


class NavRedirectException(Exception):
    """
    Base class for all exceptions thrown by navredirect.
    """

    def __init__(self, message=None):
        super().__init__(message)


class OptionsError(NavRedirectException):
    pass


class AddonManagerError(NavRedirectException):
    pass


class AddonHalt(NavRedirectException):
    """
    Raised by addons to signal that no further handlers should handle this event.
    """


class StoreError(NavRedirectException):
    """
    Reading from or writing to the rule store failed.
    """


class EventReadException(NavRedirectException):
    pass
