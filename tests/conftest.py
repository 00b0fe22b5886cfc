"""Shared pytest configuration for formcheck tests.

Provides ``multi_dict``, a factory for a minimal multi-value mapping shaped
like the parsed form data web frameworks hand to request handlers.
"""

from collections.abc import Callable, Iterator

import pytest


class MultiDict:
    """Read-only mapping where each key holds a list of submitted values."""

    def __init__(self, data: dict[str, list[str]]) -> None:
        self._data = data

    def __getitem__(self, key: str) -> str:
        return self._data[key][0]

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def get_list(self, key: str) -> list[str]:
        return list(self._data.get(key, []))


@pytest.fixture
def multi_dict() -> Callable[[dict[str, list[str]]], MultiDict]:
    return MultiDict
