"""
Clipboard Manager Module
Cut, copy, and paste files and text between named on-disk clipboards.
"""

from .conflicts import ConflictPolicy, ConflictResolver
from .copier import CopyStrategy, copy_batch, copy_item
from .errors import (
    ClipboardEmptyError,
    ClipboardError,
    ClipboardLockedError,
    EmptyMatchError,
    InvalidActionError,
    PatternCompileError,
)
from .paster import paste
from .results import Failure, ItemKind, ResultAggregator, Success
from .store import Clipboard

__all__ = [
    'Clipboard',
    'ClipboardEmptyError',
    'ClipboardError',
    'ClipboardLockedError',
    'ConflictPolicy',
    'ConflictResolver',
    'CopyStrategy',
    'EmptyMatchError',
    'Failure',
    'InvalidActionError',
    'ItemKind',
    'PatternCompileError',
    'ResultAggregator',
    'Success',
    'copy_batch',
    'copy_item',
    'paste',
]
__version__ = '1.0.0'
