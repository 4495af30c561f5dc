"""Memory allocators: plain heap buffers and file-backed mappings."""

from __future__ import annotations

import abc
import mmap
import os
from typing import Any, Optional

from thcore.general import raise_error

_GIGABYTE = 1073741824


class Allocator(abc.ABC):
    """Strategy that provides, resizes and releases byte buffers."""

    @abc.abstractmethod
    def alloc(self, context: Any, size: int) -> Any:
        """Return a new buffer of ``size`` bytes."""

    @abc.abstractmethod
    def realloc(self, context: Any, data: Any, size: int) -> Any:
        """Return ``data`` resized to ``size`` bytes."""

    @abc.abstractmethod
    def free(self, context: Any, data: Any) -> None:
        """Release ``data``."""


class DefaultAllocator(Allocator):
    """Allocator backed by zero-initialised bytearrays."""

    def alloc(self, context: Any, size: int) -> bytearray:
        if size < 0:
            raise_error("$ Torch: invalid memory size -- maybe an overflow?")
        try:
            return bytearray(size)
        except MemoryError:
            raise_error(
                f"$ Torch: not enough memory: you tried to allocate "
                f"{size // _GIGABYTE}GB. Buy new RAM!"
            )

    def realloc(self, context: Any, data: Optional[bytearray], size: int) -> bytearray:
        if data is None:
            return self.alloc(context, size)
        if size == 0:
            self.free(context, data)
            return bytearray()
        if size < 0:
            raise_error("$ Torch: invalid memory size -- maybe an overflow?")
        try:
            if size < len(data):
                del data[size:]
            else:
                data.extend(bytes(size - len(data)))
        except MemoryError:
            raise_error(
                f"$ Torch: not enough memory: you tried to reallocate "
                f"{size // _GIGABYTE}GB. Buy new RAM!"
            )
        return data

    def free(self, context: Any, data: Optional[bytearray]) -> None:
        if data is not None:
            data.clear()


class MapAllocatorContext:
    """Describes the file to map and records the size actually mapped."""

    def __init__(self, filename: str, shared: bool) -> None:
        self.filename = os.fspath(filename)
        self.shared = bool(shared)
        self._size = 0

    def size(self) -> int:
        """Return the mapped size in bytes (0 before mapping)."""
        return self._size


class MapAllocator(Allocator):
    """Allocator mapping a file into memory.

    Shared mappings write through to the file, creating or stretching it as
    needed; private mappings are copy-on-write and need an existing file.
    """

    def alloc(self, context: MapAllocatorContext, size: int) -> mmap.mmap:
        name = context.filename
        if context.shared:
            try:
                fd = os.open(name, os.O_RDWR | os.O_CREAT | getattr(os, "O_BINARY", 0), 0o600)
            except OSError:
                raise_error(f"unable to open file <{name}> in read-write mode")
        else:
            try:
                fd = os.open(name, os.O_RDONLY | getattr(os, "O_BINARY", 0))
            except OSError:
                raise_error(f"unable to open file <{name}> in read-only mode")

        try:
            try:
                file_size = os.lseek(fd, 0, os.SEEK_END)
            except OSError:
                raise_error(f"unable to seek at end of file <{name}>")

            if size > 0:
                if size > file_size:
                    if not context.shared:
                        raise_error(
                            f"file <{name}> size is smaller than the required "
                            f"mapping size <{size}>"
                        )
                    try:
                        os.lseek(fd, size - 1, os.SEEK_SET)
                    except OSError:
                        raise_error(f"unable to stretch file <{name}> to the right size")
                    try:
                        written = os.write(fd, b"\0")
                    except OSError:
                        written = 0
                    if written != 1:
                        raise_error(f"unable to write to file <{name}>")
            else:
                size = file_size

            context._size = size
            access = mmap.ACCESS_WRITE if context.shared else mmap.ACCESS_COPY
            try:
                return mmap.mmap(fd, size, access=access)
            except (OSError, ValueError):
                raise_error(
                    f"$ Torch: unable to mmap memory: you tried to mmap "
                    f"{size // _GIGABYTE}GB."
                )
        finally:
            os.close(fd)

    def realloc(self, context: Any, data: Any, size: int) -> Any:
        raise_error("cannot realloc mapped data")

    def free(self, context: Any, data: mmap.mmap) -> None:
        try:
            data.close()
        except (BufferError, OSError, ValueError):
            raise_error("could not unmap the shared memory file")


DEFAULT_ALLOCATOR = DefaultAllocator()
MAP_ALLOCATOR = MapAllocator()