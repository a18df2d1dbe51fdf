"""Operator implementations for sprite-atlas.

This package contains the operations the tool provides:
- atlas: the atlas packing engine
- preprocess: chroma key removal and sheet splitting
- compress: palette quantization
- files: image and text file input/output
"""

from . import atlas, compress, files, preprocess

__all__ = ["atlas", "compress", "files", "preprocess"]
