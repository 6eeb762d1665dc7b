class FetchError(Exception):
    """
    Raised by the fetch helpers when a request does not produce a usable payload.
    Non-2xx statuses, transport errors, timeouts and undecodable bodies all end up here.
    """

    def __init__(self, url: str, status: int | None = None, reason: str = ""):
        self.url = url
        self.status = status
        self.reason = reason
        super().__init__(f"{url} -> {status if status is not None else 'no response'}: {reason}")


class AccountLookupError(Exception):
    """Base class of the errors that abort a lookup."""
    user_message = "Error during the search"

    def __init__(self, identifier: str, message: str | None = None):
        self.identifier = identifier
        super().__init__(message or self.user_message)


class InvalidIdentifier(AccountLookupError):
    user_message = "Please enter a valid UID"


class ProfileUnavailable(AccountLookupError):
    user_message = "UID not found"


class BanCheckFailed(AccountLookupError):
    user_message = "Error while checking the ban status"
