"""Multi-phase preview engine and preview-sequence reader."""

from .preview_locomotion import PreviewContext, PreviewLocomotion
from .sequence_reader import parse_preview_sequence, read_preview_sequence

__all__ = [
    'PreviewContext',
    'PreviewLocomotion',
    'parse_preview_sequence',
    'read_preview_sequence',
]
