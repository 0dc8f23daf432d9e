import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Protocol, Tuple

from loguru import logger

from .api import ClientError
from ..schemas import Pagination, SearchRecord

NOTIFICATION_SECONDS = 5.0
MIN_KEYWORD_LENGTH = 2
CLIENT_PER_PAGE = 10


class Phase(str, Enum):
    INITIALIZING = "initializing"
    READY = "ready"


class Activity(str, Enum):
    IDLE = "idle"
    SEARCHING = "searching"


class NotificationKind(str, Enum):
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class Notification:
    kind: NotificationKind
    message: str
    expires_at: float


@dataclass(frozen=True)
class Stats:
    total_searches: int
    total_repositories: int
    unique_keywords: int


class SearchAPI(Protocol):
    async def search(self, keyword: str, per_page: int = CLIENT_PER_PAGE, page: int = 1) -> SearchRecord:
        ...

    async def list_results(self, page: int = 1, limit: int = 20) -> Tuple[List[SearchRecord], Pagination]:
        ...


def validate_keyword(keyword: str) -> Optional[str]:
    """Return the form error for `keyword`, or None when it can be submitted."""
    cleaned = keyword.strip()
    if not cleaned:
        return "Please enter a search keyword"
    if len(cleaned) < MIN_KEYWORD_LENGTH:
        return f"Keyword must be at least {MIN_KEYWORD_LENGTH} characters long"
    return None


class FinderStore:
    """Client state: search history, the highlighted result and the notification.

    Moves INITIALIZING -> READY once, then IDLE <-> SEARCHING for each search.
    Every mutation after an await happens in one synchronous block, so an observer
    never sees a half-applied search.
    """

    def __init__(
        self,
        api: SearchAPI,
        clock: Callable[[], float] = time.monotonic,
        per_page: int = CLIENT_PER_PAGE,
    ):
        self.api = api
        self.clock = clock
        self.per_page = per_page
        self.phase = Phase.INITIALIZING
        self.activity = Activity.IDLE
        self.history: List[SearchRecord] = []
        self.current: Optional[SearchRecord] = None
        self.form_error: Optional[str] = None
        self._notification: Optional[Notification] = None
        self._initialized = False

    @property
    def busy(self) -> bool:
        return self.activity is Activity.SEARCHING

    @property
    def form_enabled(self) -> bool:
        return self.phase is Phase.READY and not self.busy

    @property
    def notification(self) -> Optional[Notification]:
        if self._notification and self.clock() >= self._notification.expires_at:
            self._notification = None
        return self._notification

    def notify(self, kind: NotificationKind, message: str) -> None:
        self._notification = Notification(kind, message, self.clock() + NOTIFICATION_SECONDS)

    def dismiss(self) -> None:
        self._notification = None

    @property
    def stats(self) -> Stats:
        return Stats(
            total_searches=len(self.history),
            total_repositories=sum(len(record.repository_data) for record in self.history),
            unique_keywords=len({record.keyword.lower() for record in self.history}),
        )

    async def initialize(self) -> None:
        if self._initialized:
            return
        self._initialized = True
        try:
            records, _ = await self.api.list_results()
        except ClientError as exc:
            logger.warning(f"Error loading search results: {exc.message}")
            self.notify(NotificationKind.ERROR, "Failed to load search history")
        else:
            self.history = list(records)
        finally:
            self.phase = Phase.READY

    async def submit(self, keyword: str) -> Optional[SearchRecord]:
        """Run one search from the form; returns the new record on success."""
        if not self.form_enabled:
            return None
        error = validate_keyword(keyword)
        self.form_error = error
        if error:
            return None

        cleaned = keyword.strip()
        self.activity = Activity.SEARCHING
        self.current = None
        try:
            record = await self.api.search(cleaned, per_page=self.per_page)
        except ClientError as exc:
            logger.warning(f"Search error: {exc.message}")
            self.notify(NotificationKind.ERROR, exc.message or "Search failed")
            return None
        finally:
            self.activity = Activity.IDLE

        self.current = record
        self.history = [record, *self.history]
        self.notify(
            NotificationKind.SUCCESS,
            f'Found {record.total_count:,} repositories for "{cleaned}" and stored results in database!',
        )
        return record
