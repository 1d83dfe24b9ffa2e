"""SHA-256 hashing for pattern and export provenance.

Provides:
    - sha256_bytes(): Hash an in-memory export payload
    - pattern_fingerprint(): Hash a generated dot list

The CLI logs the fingerprint next to the seed, and every exporter logs the
digest of the bytes it wrote, so two runs can be compared without diffing
files. Results are hex strings (64 chars).

Note: Module named `hashing.py` to avoid shadowing builtin `hash()`.
"""

import hashlib
from dataclasses import astuple
from typing import Iterable


def sha256_bytes(data: bytes) -> str:
    """Compute SHA-256 hex digest of a byte buffer."""
    return hashlib.sha256(data).hexdigest()


def pattern_fingerprint(dots: Iterable) -> str:
    """Compute SHA-256 hash of a dot list.

    Parameters
    ----------
    dots : Iterable[Dot]
        Dots in draw order

    Returns
    -------
    str
        SHA-256 hex digest

    Notes
    -----
    Floats are hashed through repr(), which round-trips exactly, so the
    fingerprint changes with any bit of any coordinate.
    """
    sha256 = hashlib.sha256()
    for dot in dots:
        sha256.update(repr(astuple(dot)).encode('utf-8'))
        sha256.update(b'\n')
    return sha256.hexdigest()
