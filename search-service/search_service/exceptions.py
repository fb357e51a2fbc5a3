"""
Search Service errors

Each error carries the HTTP status and the client-facing message it is
rendered with by the exception handler in ``main``.
"""


class SearchError(Exception):
    """Base error for the search engine"""

    status: int = 500
    message: str = "Failed to perform search."

    def __init__(self, message: str = None, status: int = None):
        if message is not None:
            self.message = message
        if status is not None:
            self.status = status
        super().__init__(self.message)


class InvalidTabError(SearchError):
    """Requested tab is not one of the known tabs"""

    status = 400
    message = "Invalid tab. Must be overall, users, social, marketplace, or quilts."


class SearchFailedError(SearchError):
    """Unexpected failure while fetching, scoring or assembling results"""

    status = 500
    message = "Failed to perform search."
