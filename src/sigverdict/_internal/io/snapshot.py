"""Result store snapshot I/O helpers (internal)."""

import os
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Iterator, Union

from pydantic import BaseModel, ConfigDict, field_validator

from sigverdict._internal.canonical_json import canonical_dumps
from sigverdict.kernel.key_deriver import is_cache_key
from sigverdict.kernel.result_store import ResultStore

SNAPSHOT_FORMAT = "sigverdict.results"
SNAPSHOT_VERSION = "0.1"


class ResultSnapshot(BaseModel):
    """On-disk form of a result store."""
    format: str = SNAPSHOT_FORMAT
    version: str = SNAPSHOT_VERSION
    entries: Dict[str, bool]

    model_config = ConfigDict(extra="forbid", strict=True)

    @field_validator("format")
    @classmethod
    def validate_format(cls, v: str) -> str:
        if v != SNAPSHOT_FORMAT:
            raise ValueError(f"unsupported snapshot format: {v}")
        return v

    @field_validator("entries")
    @classmethod
    def validate_keys(cls, v: Dict[str, bool]) -> Dict[str, bool]:
        bad = sorted(k for k in v if not is_cache_key(k))
        if bad:
            raise ValueError(f"malformed cache keys in snapshot: {bad}")
        return v


def save_snapshot(store: ResultStore, path: Union[str, Path]) -> Path:
    """Write the store to a canonical JSON file and return its path."""
    snapshot = ResultSnapshot(entries=dict(store.items()))
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    tmp = out.with_name(out.name + ".tmp")
    tmp.write_text(canonical_dumps(snapshot.model_dump()) + "\n", encoding="utf-8")
    os.replace(tmp, out)
    return out


def load_snapshot(path: Union[str, Path], missing_ok: bool = False) -> ResultStore:
    """Load a store from a snapshot file.

    Args:
        path: Snapshot file path
        missing_ok: Return an empty store when the file does not exist

    Raises:
        FileNotFoundError: File is missing and missing_ok is False
        pydantic.ValidationError: File content is not a valid snapshot
    """
    snapshot_path = Path(path)
    if missing_ok and not snapshot_path.exists():
        return ResultStore()
    snapshot = ResultSnapshot.model_validate_json(snapshot_path.read_bytes())
    return ResultStore.from_entries(snapshot.entries)


@contextmanager
def _exclusive_lock(path: Path) -> Iterator[None]:
    lock_path = path.with_name(path.name + ".lock")
    lock_path.parent.mkdir(parents=True, exist_ok=True)
    with open(lock_path, "a+") as fp:
        try:
            import fcntl  # Unix only
        except ImportError:
            fcntl = None
        if fcntl is not None:
            fcntl.flock(fp.fileno(), fcntl.LOCK_EX)
        try:
            yield
        finally:
            if fcntl is not None:
                fcntl.flock(fp.fileno(), fcntl.LOCK_UN)


@contextmanager
def locked_snapshot(path: Union[str, Path]) -> Iterator[ResultStore]:
    """Load, mutate and save a snapshot under an exclusive sidecar lock.

    The store is re-read from disk after the lock is taken, so writers in
    other processes are seen and conflicts are detected against the value
    actually on disk. The file is only rewritten when the block exits
    without an exception.

    Usage:
        with locked_snapshot(path) as store:
            ingestor = ResultIngestor(guard, store, notifications)
            ingestor.ingest(context, request, result)
    """
    snapshot_path = Path(path)
    with _exclusive_lock(snapshot_path):
        store = load_snapshot(snapshot_path, missing_ok=True)
        yield store
        save_snapshot(store, snapshot_path)
