from enum import Enum

from app.account_tracker.errors import AccountLookupError
from app.account_tracker.structures import LookupResult
from app.logger import logger


class SearchStatus(str, Enum):
    IDLE = "idle"
    SEARCHING = "searching"
    SUCCESS = "success"
    ERROR = "error"


def _release(result: LookupResult | None) -> None:
    if result is not None and result["avatar"] is not None:
        result["avatar"].release()


class SearchState:
    """
    Search state owned by whoever issues lookups (one per Discord user in the bot).

    Every ``begin`` hands out a new generation token. Results and errors carrying an
    older token belong to a superseded search and are dropped. The state holds at most
    one result, its avatar is released as soon as it is replaced.
    """

    def __init__(self):
        self.identifier: str = ""
        self.status = SearchStatus.IDLE
        self.result: LookupResult | None = None
        self.error: str = ""
        self.generation = 0

    @property
    def loading(self) -> bool:
        return self.status is SearchStatus.SEARCHING

    def is_current(self, token: int) -> bool:
        return token == self.generation

    def begin(self, identifier: str) -> int:
        self.generation += 1
        self.identifier = identifier
        self.status = SearchStatus.SEARCHING
        self.error = ""
        _release(self.result)
        self.result = None
        return self.generation

    def succeed(self, token: int, result: LookupResult) -> bool:
        if not self.is_current(token):
            logger.debug(f"Discarding stale result for {self.identifier!r} (token {token} < {self.generation})")
            _release(result)
            return False
        _release(self.result)
        self.result = result
        self.status = SearchStatus.SUCCESS
        return True

    def fail(self, token: int, error: AccountLookupError) -> bool:
        if not self.is_current(token):
            logger.debug(f"Discarding stale error for {self.identifier!r}: {error}")
            return False
        _release(self.result)
        self.result = None
        self.error = str(error)
        self.status = SearchStatus.ERROR
        return True

    def reset(self) -> None:
        _release(self.result)
        self.result = None
        self.identifier = ""
        self.error = ""
        self.status = SearchStatus.IDLE

    def __repr__(self):
        return f"<SearchState {self.status.value} {self.identifier!r} gen={self.generation}>"
