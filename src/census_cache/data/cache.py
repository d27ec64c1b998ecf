import logging
import os
import threading
from pathlib import Path
from typing import Callable, TypeVar

from ..config import CacheConfig
from ..errors import CacheCorrupt, FetchFailure, PersistFailure
from .keys import RequestKey
from .serializers import get_serializer

logger = logging.getLogger(__name__)

T = TypeVar("T")

class FetchCache:
    """Fetch-or-cache over a directory of entry files.

    Each distinct RequestKey is fetched at most once for the lifetime of the
    cache directory. Entries are never expired; delete the file (or call
    `invalidate`) to force a refetch.
    """

    def __init__(self, config: CacheConfig):
        self.config = config
        self.root = Path(config.cache_root)
        self.serializer = get_serializer(config.serializer)
        self.root.mkdir(parents=True, exist_ok=True)
        self._locks = {}
        self._locks_guard = threading.Lock()

    def path_for(self, key) -> Path:
        key = RequestKey.coerce(key)
        return self.root / key.filename(self.serializer.suffix)

    def contains(self, key) -> bool:
        return self.path_for(key).exists()

    def invalidate(self, key) -> bool:
        key = RequestKey.coerce(key)
        with self._lock_for(key):
            try:
                self.path_for(key).unlink()
            except FileNotFoundError:
                return False
        logger.info("Invalidated cache entry %s", key.filename(self.serializer.suffix))
        return True

    def resolve(self, key, fetch: Callable[[], T]) -> T:
        key = RequestKey.coerce(key)
        path = self.path_for(key)

        # fast path: no lock for readers of an existing entry
        if path.exists():
            try:
                return self._read(key, path)
            except FileNotFoundError:
                pass  # removed since the exists() check; treat as a miss
            except CacheCorrupt:
                if self.config.on_corrupt == "raise":
                    raise
                logger.warning("Corrupt cache entry %s; refetching and overwriting", path)

        return self._fill(key, path, fetch)

    def _lock_for(self, key: RequestKey) -> threading.Lock:
        # one lock per key filled or invalidated by this instance; never pruned
        with self._locks_guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = self._locks[key] = threading.Lock()
            return lock

    def _fill(self, key: RequestKey, path: Path, fetch):
        with self._lock_for(key):
            # another caller may have filled (or repaired) the entry while we waited
            if path.exists():
                try:
                    return self._read(key, path)
                except FileNotFoundError:
                    pass
                except CacheCorrupt:
                    if self.config.on_corrupt == "raise":
                        raise

            logger.info("Cache miss for %s; fetching", path.name)
            try:
                result = fetch()
            except Exception as e:
                raise FetchFailure(f"Fetch failed for {key.namespace} {key.canonical}: {e}", key=key) from e

            # decode before writing so nothing unreadable reaches the cache
            try:
                data = self.serializer.dumps(result)
                value = self.serializer.loads(data)
            except Exception as e:
                raise PersistFailure(f"Could not serialize result for {path.name}: {e}", key=key) from e

            self._write_atomic(key, path, data)
            logger.info("Cached %d bytes at %s", len(data), path)
            return value

    def _read(self, key: RequestKey, path: Path):
        try:
            data = path.read_bytes()
        except FileNotFoundError:
            raise
        except OSError as e:
            raise CacheCorrupt(f"Cannot read cache entry {path}: {e}", key=key, path=path) from e
        if not data:
            raise CacheCorrupt(f"Cache entry {path} is empty", key=key, path=path)
        try:
            value = self.serializer.loads(data)
        except Exception as e:
            raise CacheCorrupt(f"Cannot decode cache entry {path}: {e}", key=key, path=path) from e
        logger.debug("Cache hit for %s", path.name)
        return value

    def _write_atomic(self, key: RequestKey, path: Path, data: bytes):
        temp_path = path.with_name(f".{path.name}.{os.getpid()}.{threading.get_ident()}.tmp")
        try:
            with open(temp_path, "wb") as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
            os.replace(temp_path, path)
        except OSError as e:
            if temp_path.exists():
                temp_path.unlink()
            raise PersistFailure(f"Could not write cache entry {path}: {e}", key=key) from e
