"""Lazy, restartable views over JSON arrays."""

from typing import Any, Callable, Generic, Iterable, Iterator, List, Optional, TypeVar


T = TypeVar("T")


class LazySequence(Generic[T]):
    """
    A finite sequence whose elements are converted on iteration.

    Every call to ``iter()`` starts again from the first element of the
    source, so the sequence can be consumed any number of times. Nothing is
    converted until the sequence is iterated.
    """

    def __init__(self, source: Optional[Iterable[Any]] = None,
                 convert: Optional[Callable[[Any], T]] = None):
        """
        Initialize the sequence.

        Args:
            source: Re-iterable source of raw elements (a list, for example)
            convert: Function applied to each raw element
        """
        self._source = source if source is not None else ()
        self._convert = convert

    @classmethod
    def empty(cls) -> "LazySequence[T]":
        """Create an empty sequence."""
        return cls()

    def __iter__(self) -> Iterator[T]:
        if self._convert is None:
            return iter(self._source)
        return (self._convert(item) for item in self._source)

    def __bool__(self) -> bool:
        for _ in self._source:
            return True
        return False

    def to_list(self) -> List[T]:
        """Materialize the sequence into a list."""
        return list(self)

    def __repr__(self) -> str:
        return f"LazySequence({list(self._source)!r})"
