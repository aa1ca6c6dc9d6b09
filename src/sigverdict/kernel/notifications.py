"""Append-only notification log for ingested verdicts."""

import threading
from pathlib import Path
from typing import Callable, Iterator, List, Optional, Tuple, Union

from sigverdict._internal.canonical_json import canonical_dumps
from sigverdict.contracts import VerificationNotice

Subscriber = Callable[[VerificationNotice], None]


class NotificationLog:
    """Ordered, append-only record of ingestion notices.

    When a path is given, every notice is also appended to that file as
    one canonical JSON line.
    """

    def __init__(self, path: Optional[Union[str, Path]] = None):
        self._records: List[VerificationNotice] = []
        self._subscribers: List[Subscriber] = []
        self._lock = threading.Lock()
        self._path = Path(path) if path is not None else None

    @property
    def path(self) -> Optional[Path]:
        return self._path

    def record(
        self,
        *,
        key: str,
        message: bytes,
        signature: bytes,
        result: bool,
        outcome: Optional[str] = None,
    ) -> VerificationNotice:
        """Append a notice without notifying subscribers."""
        with self._lock:
            notice = VerificationNotice(
                sequence=len(self._records),
                key=key,
                message=message.hex(),
                signature=signature.hex(),
                result=result,
                outcome=outcome,
            )
            self._records.append(notice)
            if self._path is not None:
                with open(self._path, "a", encoding="utf-8") as f:
                    f.write(canonical_dumps(notice.model_dump()) + "\n")
        return notice

    def publish(self, notice: VerificationNotice) -> None:
        """Hand an already recorded notice to subscribers, in registration order."""
        with self._lock:
            subscribers = list(self._subscribers)
        for callback in subscribers:
            callback(notice)

    def emit(self, **fields) -> VerificationNotice:
        """Append a notice and fan it out to subscribers."""
        notice = self.record(**fields)
        self.publish(notice)
        return notice

    def subscribe(self, callback: Subscriber) -> None:
        """Register an in-process observer called after each append.

        Observers run outside any ingestion lock, after the verdict and its
        notice are committed, so they may call back into ingest. An observer
        that raises stops the fan-out and the exception reaches the caller
        of emit()/ingest(); the committed verdict and notice stay.
        """
        with self._lock:
            self._subscribers.append(callback)

    def records(self) -> Tuple[VerificationNotice, ...]:
        with self._lock:
            return tuple(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[VerificationNotice]:
        return iter(self.records())
