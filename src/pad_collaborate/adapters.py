"""Define the adapters of the key stores."""

import abc
import copy
import logging
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Iterator

from ruyaml import YAML
from ruyaml.error import YAMLError

from .exceptions import NotFoundError, StoreError

Record = Dict[str, Any]

log = logging.getLogger(__name__)


class KeyStore(abc.ABC):
    """Define the interface of the key-value store that holds the records.

    Keys are strings formed by a per entity prefix and the entity id. The store
    also hands out per key locks so that read-modify-write cycles on the same
    record are serialized.
    """

    def __init__(self) -> None:
        """Initialize the lock registry."""
        self._locks: Dict[str, threading.RLock] = {}
        self._lock_holders: Dict[str, int] = {}
        self._locks_guard = threading.Lock()

    @abc.abstractmethod
    def get(self, key: str) -> Record:
        """Return the record stored under key.

        Raises:
            NotFoundError: if there is no record for the key.
        """
        raise NotImplementedError

    @abc.abstractmethod
    def set(self, key: str, record: Record) -> None:
        """Store the record under key, replacing the previous one."""
        raise NotImplementedError

    @abc.abstractmethod
    def delete(self, key: str) -> None:
        """Remove the record stored under key.

        Raises:
            NotFoundError: if there is no record for the key.
        """
        raise NotImplementedError

    @abc.abstractmethod
    def exists(self, key: str) -> bool:
        """Check if there is a record stored under key."""
        raise NotImplementedError

    @contextmanager
    def lock(self, key: str) -> Iterator[None]:
        """Hold the mutex of a key while the context is active.

        The mutex is re-entrant, so a thread holding it can lock the key again.
        It's dropped from the registry once no thread holds or waits for it.
        """
        with self._locks_guard:
            key_lock = self._locks.setdefault(key, threading.RLock())
            self._lock_holders[key] = self._lock_holders.get(key, 0) + 1
        log.debug(f"Acquiring lock of {key}")
        try:
            with key_lock:
                yield
        finally:
            with self._locks_guard:
                self._lock_holders[key] -= 1
                if self._lock_holders[key] == 0:
                    del self._lock_holders[key]
                    del self._locks[key]


class MemoryKeyStore(KeyStore):
    """Define the adapter of a key store that lives in the process memory."""

    def __init__(self) -> None:
        """Initialize the storage."""
        super().__init__()
        self.data: Dict[str, Record] = {}

    def __repr__(self) -> str:
        """Return a string that represents the object."""
        return f"MemoryKeyStore(records={len(self.data)})"

    def get(self, key: str) -> Record:
        """Return a copy of the record stored under key.

        Raises:
            NotFoundError: if there is no record for the key.
        """
        try:
            return copy.deepcopy(self.data[key])
        except KeyError as error:
            raise NotFoundError(f"There is no record with key {key}.", key) from error

    def set(self, key: str, record: Record) -> None:
        """Store a copy of the record under key."""
        self.data[key] = copy.deepcopy(record)

    def delete(self, key: str) -> None:
        """Remove the record stored under key.

        Raises:
            NotFoundError: if there is no record for the key.
        """
        try:
            del self.data[key]
        except KeyError as error:
            raise NotFoundError(f"There is no record with key {key}.", key) from error

    def exists(self, key: str) -> bool:
        """Check if there is a record stored under key."""
        return key in self.data


class YAMLKeyStore(MemoryKeyStore):
    """Define the adapter of a key store persisted in a YAML file.

    The whole content is kept in memory and the file is rewritten after each
    change.

    Args:
        path: Path to the YAML file. It's created on the first write if it
            doesn't exist.

    Raises:
        StoreError: if the file can't be read or parsed.
    """

    def __init__(self, path: Path) -> None:
        """Load the content of the store file."""
        super().__init__()
        self.path = path.expanduser()
        self.load()

    def __repr__(self) -> str:
        """Return a string that represents the object."""
        return f"YAMLKeyStore(path={self.path})"

    def load(self) -> None:
        """Load the records from the store file."""
        if not self.path.exists():
            log.debug(f"Store file {self.path} doesn't exist yet")
            self.data = {}
            return
        try:
            with self.path.open("r", encoding="utf-8") as file_cursor:
                content = YAML(typ="safe").load(file_cursor)
        except (OSError, YAMLError) as error:
            raise StoreError(f"Could not load the store file {self.path}") from error

        if content is None:
            content = {}
        if not isinstance(content, dict):
            raise StoreError(f"The store file {self.path} is not a mapping of records")
        self.data = content

    def save(self) -> None:
        """Save the records into the store file."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with self.path.open("w+", encoding="utf-8") as file_cursor:
                yaml = YAML()
                yaml.default_flow_style = False
                yaml.dump(self.data, file_cursor)
        except (OSError, YAMLError) as error:
            raise StoreError(f"Could not save the store file {self.path}") from error

    def set(self, key: str, record: Record) -> None:
        """Store a copy of the record under key and persist the change.

        Raises:
            StoreError: if the change can't be persisted. The in memory content
                is left as it was before the call.
        """
        previous = self.data.get(key)
        super().set(key, record)
        try:
            self.save()
        except StoreError:
            if previous is None:
                self.data.pop(key, None)
            else:
                self.data[key] = previous
            raise

    def delete(self, key: str) -> None:
        """Remove the record stored under key and persist the change.

        Raises:
            NotFoundError: if there is no record for the key.
            StoreError: if the change can't be persisted.
        """
        previous = self.data.get(key)
        super().delete(key)
        try:
            self.save()
        except StoreError:
            self.data[key] = previous  # type: ignore
            raise
