"""Typed storages, allocators, BLAS/LAPACK routines and a Mersenne Twister generator."""

__version__ = "0.1.0"