"""Typed, reference-counted contiguous storage over an allocator's buffer."""

from __future__ import annotations

import array
import enum
import itertools
import math
import struct
from typing import Any, Iterable, Iterator, List, Optional, Union

from thcore.allocator import (
    DEFAULT_ALLOCATOR,
    MAP_ALLOCATOR,
    Allocator,
    MapAllocatorContext,
)
from thcore.atomic import AtomicInt
from thcore.general import arg_check, raise_error

Number = Union[int, float]


class ElementType(enum.Enum):
    """Element types a storage can hold, valued by their struct format code."""

    BYTE = "B"
    CHAR = "b"
    SHORT = "h"
    INT = "i"
    LONG = "l"
    FLOAT = "f"
    DOUBLE = "d"

    @property
    def itemsize(self) -> int:
        """Size of one element in bytes."""
        return struct.calcsize(self.value)

    @property
    def is_floating(self) -> bool:
        return self in (ElementType.FLOAT, ElementType.DOUBLE)

    def convert(self, value: Any) -> Number:
        """Convert ``value`` the way a C cast to this type does."""
        if self is ElementType.DOUBLE:
            return float(value)
        if self is ElementType.FLOAT:
            result = float(value)
            try:
                struct.pack("f", result)
            except OverflowError:
                return math.copysign(math.inf, result)
            return result
        number = int(value)
        bits = self.itemsize * 8
        full = 1 << bits
        if self is ElementType.BYTE:
            return number % full
        half = full >> 1
        return (number + half) % full - half


class StorageFlag(enum.IntFlag):
    """Behaviour switches of a storage."""

    REFCOUNTED = 1
    RESIZABLE = 2
    FREEMEM = 4


_DEFAULT_FLAGS = StorageFlag.REFCOUNTED | StorageFlag.RESIZABLE | StorageFlag.FREEMEM


class Storage:
    """A contiguous array of elements of one type, owned through an allocator."""

    def __init__(
        self,
        element_type: ElementType,
        size: int = 0,
        allocator: Optional[Allocator] = None,
        allocator_context: Any = None,
    ) -> None:
        if allocator is None:
            allocator = DEFAULT_ALLOCATOR
        element_type = ElementType(element_type)
        data = allocator.alloc(allocator_context, element_type.itemsize * size)
        self._setup(element_type, data, size, allocator, allocator_context)

    def _setup(
        self,
        element_type: ElementType,
        data: Any,
        size: int,
        allocator: Allocator,
        allocator_context: Any,
    ) -> None:
        self.element_type = element_type
        self._data = data
        self._size = size
        self._refcount = AtomicInt(1)
        self._flag = _DEFAULT_FLAGS
        self._allocator = allocator
        self._context = allocator_context
        self._released = False
        self._raw: Optional[memoryview] = None
        self._view: Optional[memoryview] = None
        self._bind()

    def _bind(self) -> None:
        if self._data is None:
            self._raw = self._view = None
            return
        nbytes = max(self._size, 0) * self.element_type.itemsize
        self._raw = memoryview(self._data)
        self._view = self._raw[:nbytes].cast(self.element_type.value)

    def _unbind(self) -> None:
        if self._view is not None:
            self._view.release()
        if self._raw is not None:
            self._raw.release()
        self._raw = self._view = None

    def _live_view(self) -> memoryview:
        if self._released or self._view is None:
            raise_error("storage has been released")
        return self._view

    @classmethod
    def with_values(cls, element_type: ElementType, *args: Number) -> "Storage":
        """Return a storage holding exactly the given values."""
        storage = cls(element_type, len(args))
        storage.raw_copy(args)
        return storage

    @classmethod
    def with_data(cls, element_type: ElementType, data: Union[bytearray, Iterable[Number]]) -> "Storage":
        """Return a storage over ``data``.

        A bytearray is adopted as the storage's own buffer; any other
        iterable is copied element by element.
        """
        element_type = ElementType(element_type)
        if not isinstance(data, bytearray):
            return cls.with_values(element_type, *data)
        itemsize = element_type.itemsize
        arg_check(len(data) % itemsize == 0, 2, "buffer size must be a multiple of the element size")
        storage = cls.__new__(cls)
        storage._setup(element_type, data, len(data) // itemsize, DEFAULT_ALLOCATOR, None)
        return storage

    @classmethod
    def with_mapping(
        cls,
        element_type: ElementType,
        filename: str,
        size: int = 0,
        shared: bool = False,
    ) -> "Storage":
        """Return a storage backed by a memory-mapped file.

        With ``size <= 0`` the whole file is mapped. Such a storage cannot be resized.
        """
        element_type = ElementType(element_type)
        context = MapAllocatorContext(filename, shared)
        storage = cls(element_type, size, MAP_ALLOCATOR, context)
        if size <= 0:
            storage._unbind()
            storage._size = context.size() // element_type.itemsize
            storage._bind()
        storage.clear_flag(StorageFlag.RESIZABLE)
        return storage

    @property
    def data(self) -> memoryview:
        """Typed view of the elements."""
        return self._live_view()

    @property
    def flag(self) -> StorageFlag:
        return StorageFlag(self._flag)

    @property
    def refcount(self) -> int:
        return self._refcount.get()

    @property
    def allocator(self) -> Allocator:
        return self._allocator

    @property
    def allocator_context(self) -> Any:
        return self._context

    def __len__(self) -> int:
        return self._size

    def __getitem__(self, idx: int) -> Number:
        return self.get(idx)

    def __setitem__(self, idx: int, value: Number) -> None:
        self.set(idx, value)

    def __iter__(self) -> Iterator[Number]:
        return iter(self.tolist())

    def element_size(self) -> int:
        """Size of one element in bytes."""
        return self.element_type.itemsize

    def get(self, idx: int) -> Number:
        """Return the element at ``idx``, checking bounds."""
        arg_check(0 <= idx < self._size, 2, "out of bounds")
        return self._live_view()[idx]

    def set(self, idx: int, value: Number) -> None:
        """Store ``value`` at ``idx``, checking bounds."""
        arg_check(0 <= idx < self._size, 2, "out of bounds")
        self._live_view()[idx] = self.element_type.convert(value)

    def set_flag(self, flag: StorageFlag) -> None:
        self._flag = StorageFlag(self._flag | flag)

    def clear_flag(self, flag: StorageFlag) -> None:
        self._flag = StorageFlag(self._flag & ~StorageFlag(flag))

    def retain(self) -> None:
        """Take one more reference."""
        if self._flag & StorageFlag.REFCOUNTED:
            self._refcount.increment_ref()

    def free(self) -> None:
        """Drop one reference; the buffer is released with the last one."""
        if not (self._flag & StorageFlag.REFCOUNTED) or self._refcount.get() <= 0:
            return
        if self._refcount.decrement_ref():
            self._unbind()
            if self._flag & StorageFlag.FREEMEM:
                self._allocator.free(self._context, self._data)
            self._data = None
            self._released = True

    def resize(self, size: int) -> None:
        """Change the number of elements, keeping the leading ones; no-op if not resizable."""
        if not (self._flag & StorageFlag.RESIZABLE):
            return
        self._live_view()
        self._unbind()
        try:
            self._data = self._allocator.realloc(
                self._context, self._data, self.element_type.itemsize * size
            )
            self._size = size
        finally:
            self._bind()

    def fill(self, value: Number) -> None:
        """Set every element to ``value``."""
        view = self._live_view()
        if self._size > 0:
            view[:] = array.array(self.element_type.value, [self.element_type.convert(value)]) * self._size

    def raw_copy(self, values: Iterable[Number]) -> None:
        """Overwrite every element with the first ``len(self)`` of ``values``."""
        view = self._live_view()
        chunk = list(itertools.islice(iter(values), self._size))
        arg_check(len(chunk) == self._size, 2, "not enough values to copy")
        if chunk:
            convert = self.element_type.convert
            view[:] = array.array(self.element_type.value, map(convert, chunk))

    def copy(self, src: "Storage") -> None:
        """Copy the elements of ``src``, of any element type, converting each."""
        arg_check(len(self) == len(src), 2, "size mismatch")
        self.raw_copy(src.tolist())

    def tolist(self) -> List[Number]:
        """Return the elements as a list."""
        return self._live_view().tolist()

    def __repr__(self) -> str:
        if self._released:
            return f"Storage({self.element_type.name}, released)"
        return f"Storage({self.element_type.name}, {self.tolist()!r})"