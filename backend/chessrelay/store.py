"""
In-memory хранилище записей по строковому id.
Выдаёт id вида "<prefix>-<n>", счётчик только растёт.
"""
import threading
from typing import Callable, Generic, Protocol, TypeVar


class HasId(Protocol):
    id: str


T = TypeVar("T", bound=HasId)


class Store(Generic[T]):
    def __init__(self, prefix: str):
        self._prefix = prefix
        self._counter = 0
        self._data: dict[str, T] = {}
        self._lock = threading.Lock()

    def make_id(self) -> str:
        with self._lock:
            new_id = f"{self._prefix}-{self._counter}"
            self._counter += 1
        return new_id

    def get(self, accessor: str | T) -> T | None:
        """Поиск по id или по записи (берётся её id)."""
        if isinstance(accessor, str):
            return self._data.get(accessor)
        return self._data.get(accessor.id)

    def set(self, obj: T) -> None:
        self._data[obj.id] = obj

    def find(self, predicate: Callable[[T], bool]) -> T | None:
        for obj in list(self._data.values()):
            if predicate(obj):
                return obj
        return None

    def values(self) -> list[T]:
        return list(self._data.values())
