"""Cross-cutting utilities (lowest dependency layer).

This package provides shared primitives for:
    - Gray-scale darkness and hex colors (color)
    - Browser-compatible number formatting (formatting)
    - Atomic I/O (fs)
    - Hashing for provenance (hashing)
    - UTF-16 code unit views of text (text)
    - Unified logging (logging_config)

No module in utils/ may import from upper layers (pattern, export, configs).

Convenience imports:
    from eightsix.utils import color, fs, formatting
    from eightsix.utils.logging_config import setup_logging, push_context
"""

from . import color
from . import formatting
from . import fs
from . import hashing
from . import logging_config
from . import text

from .logging_config import push_context, setup_logging

__all__ = [
    # Modules
    'color',
    'formatting',
    'fs',
    'hashing',
    'logging_config',
    'text',
    # Direct exports
    'setup_logging',
    'push_context',
]
