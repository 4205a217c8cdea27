"""Codec modules for the PCX codec."""

from .planes import RgbaImage, assemble_row, check_supported
from .decoder import PcxDecoder, DecodeTask, DecoderState, ProgressEvent

__all__ = [
    'RgbaImage',
    'assemble_row',
    'check_supported',
    'PcxDecoder',
    'DecodeTask',
    'DecoderState',
    'ProgressEvent',
]
