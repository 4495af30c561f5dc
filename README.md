# thcore

Building blocks for numerical code:

- `thcore.storage`: `Storage`, a flat, typed buffer. `ElementType` chooses byte,
  char, short, int, long, float or double. A storage is reference-counted
  (`retain`, `free`), carries `StorageFlag` switches, can be resized and filled,
  copies from storages of any element type, and can be backed by a memory-mapped
  file through `Storage.with_mapping`.
- `thcore.allocator`: `DefaultAllocator` hands out zero-filled bytearrays.
  `MapAllocator` together with `MapAllocatorContext` maps files into memory.
- `thcore.rng`: `Generator`, a Mersenne Twister (MT19937). It draws uniform,
  normal, exponential, Cauchy, log-normal, geometric and Bernoulli values.
- `thcore.blas`: `swap`, `scal`, `copy`, `axpy`, `dot`, `gemv`, `ger` and `gemm`,
  plain Python routines that work on strided, column-major sequences.
- `thcore.lapack`: `gesv`, `gels`, `syev`, `geev`, `gesvd`, `getrf`, `getri`,
  `potrf`, `potri` and `potrs`, computed with NumPy/SciPy. A non-zero status
  raises `LapackError`, and its `info` attribute holds the status.
- `thcore.atomic`: `AtomicInt`, a thread-safe integer used for reference counts.
- `thcore.general`: `TorchError`, `ArgumentError`, `raise_error`, `arg_check`,
  per-thread handlers (`set_error_handler`, `set_arg_error_handler`) and `log1p`.

## Install

```
pip install .
```

## Examples

Random numbers that can be reproduced from a seed:

```python
from thcore.rng import Generator

gen = Generator(42)
gen.random()          # 32-bit unsigned integer
gen.uniform(0.0, 1.0)
gen.normal(0.0, 1.0)
twin = gen.copy()     # continues with the same sequence
```

Calling `Generator()` with no seed seeds the generator from the operating
system. The seed it used is available from `initial_seed()`.

Storages:

```python
from thcore.storage import ElementType, Storage

s = Storage.with_values(ElementType.DOUBLE, 1.0, 2.0, 3.0)
s.fill(0.5)
s.tolist()            # [0.5, 0.5, 0.5]

b = Storage(ElementType.BYTE, 3)
b.copy(Storage.with_values(ElementType.INT, 1, 256, -1))
b.tolist()            # [1, 0, 255]
```

A storage backed by a file. When `shared` is true, writes go to the file, and
the file is created or extended as needed:

```python
m = Storage.with_mapping(ElementType.FLOAT, "values.bin", 4, True)
m[0] = 1.5
m.free()
```

BLAS on column-major lists:

```python
from thcore import blas

blas.dot(3, [1, 2, 3], 1, [4, 5, 6], 1)      # 32
c = [0.0] * 4
blas.gemm("N", "N", 2, 2, 2, 1.0, [1, 3, 2, 4], 2, [1, 0, 0, 1], 2, 0.0, c, 2)
c                                            # [1.0, 3.0, 2.0, 4.0]
```

LAPACK:

```python
from thcore import lapack

x, lu, ipiv = lapack.gesv([[2.0, 0.0], [0.0, 4.0]], [2.0, 8.0])
x                                            # array([1., 2.])
```

## Errors

When an operation fails, the package raises `thcore.general.TorchError`. When an
argument check fails, it raises `thcore.general.ArgumentError`, which carries
`arg_number` and `message`. You can install a handler for each thread. A handler
may raise an exception of its own. If it returns instead, the default exception
is still raised.

## What this package does not do

- It has no file objects for serialising typed values or storages to memory, to
  disk or to pipes, in either ASCII or binary form.
- It has no log-space addition or subtraction helpers.

## Tests

```
pip install .[test]
pytest
```