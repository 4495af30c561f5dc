import pytest

from thcore.allocator import (
    Allocator,
    DefaultAllocator,
    MapAllocator,
    MapAllocatorContext,
)
from thcore.general import TorchError


def test_allocator_is_abstract():
    with pytest.raises(TypeError):
        Allocator()


def test_default_alloc_returns_zeroed_buffer():
    buf = DefaultAllocator().alloc(None, 12)
    assert buf == bytearray(12)


def test_default_alloc_negative_size_fails():
    with pytest.raises(TorchError, match="invalid memory size"):
        DefaultAllocator().alloc(None, -1)


def test_default_realloc_grows_and_keeps_content():
    allocator = DefaultAllocator()
    buf = allocator.alloc(None, 4)
    buf[:] = b"abcd"
    grown = allocator.realloc(None, buf, 8)
    assert bytes(grown) == b"abcd" + bytes(4)


def test_default_realloc_shrinks():
    allocator = DefaultAllocator()
    buf = bytearray(b"abcdef")
    assert bytes(allocator.realloc(None, buf, 3)) == b"abc"


def test_default_realloc_from_none_allocates():
    assert len(DefaultAllocator().realloc(None, None, 5)) == 5


def test_default_realloc_to_zero_is_empty():
    assert len(DefaultAllocator().realloc(None, bytearray(b"xyz"), 0)) == 0


def test_default_realloc_negative_fails():
    with pytest.raises(TorchError):
        DefaultAllocator().realloc(None, bytearray(b"x"), -3)


def test_default_free_clears_buffer():
    buf = bytearray(b"abc")
    DefaultAllocator().free(None, buf)
    assert len(buf) == 0


def test_context_initial_size_is_zero(tmp_path):
    ctx = MapAllocatorContext(str(tmp_path / "f.bin"), True)
    assert ctx.size() == 0
    assert ctx.shared is True


def test_shared_mapping_creates_and_writes_through(tmp_path):
    path = tmp_path / "shared.bin"
    ctx = MapAllocatorContext(str(path), True)
    allocator = MapAllocator()
    data = allocator.alloc(ctx, 16)
    assert ctx.size() == 16
    data[0:4] = b"abcd"
    allocator.free(ctx, data)
    content = path.read_bytes()
    assert len(content) == 16
    assert content[:4] == b"abcd"


def test_shared_mapping_stretches_existing_file(tmp_path):
    path = tmp_path / "grow.bin"
    path.write_bytes(b"xy")
    ctx = MapAllocatorContext(str(path), True)
    allocator = MapAllocator()
    data = allocator.alloc(ctx, 10)
    assert bytes(data[:2]) == b"xy"
    allocator.free(ctx, data)
    assert path.stat().st_size == 10


def test_zero_size_maps_whole_file(tmp_path):
    path = tmp_path / "whole.bin"
    path.write_bytes(b"hello")
    ctx = MapAllocatorContext(str(path), False)
    allocator = MapAllocator()
    data = allocator.alloc(ctx, 0)
    assert ctx.size() == 5
    assert bytes(data[:]) == b"hello"
    allocator.free(ctx, data)


def test_private_mapping_does_not_write_back(tmp_path):
    path = tmp_path / "private.bin"
    path.write_bytes(b"hello")
    ctx = MapAllocatorContext(str(path), False)
    allocator = MapAllocator()
    data = allocator.alloc(ctx, 0)
    data[0:1] = b"J"
    assert bytes(data[:]) == b"Jello"
    allocator.free(ctx, data)
    assert path.read_bytes() == b"hello"


def test_private_mapping_missing_file_fails(tmp_path):
    ctx = MapAllocatorContext(str(tmp_path / "missing.bin"), False)
    with pytest.raises(TorchError, match="read-only mode"):
        MapAllocator().alloc(ctx, 4)


def test_private_mapping_too_small_file_fails(tmp_path):
    path = tmp_path / "small.bin"
    path.write_bytes(b"ab")
    ctx = MapAllocatorContext(str(path), False)
    with pytest.raises(TorchError, match="smaller than the required mapping size"):
        MapAllocator().alloc(ctx, 8)


def test_empty_file_cannot_be_mapped(tmp_path):
    path = tmp_path / "empty.bin"
    path.write_bytes(b"")
    ctx = MapAllocatorContext(str(path), True)
    with pytest.raises(TorchError, match="unable to mmap memory"):
        MapAllocator().alloc(ctx, 0)


def test_map_realloc_is_an_error(tmp_path):
    ctx = MapAllocatorContext(str(tmp_path / "r.bin"), True)
    with pytest.raises(TorchError, match="cannot realloc mapped data"):
        MapAllocator().realloc(ctx, None, 10)