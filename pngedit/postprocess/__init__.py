"""Pixel transforms applied by the edit pipeline."""

from pngedit.postprocess.convolve import BOX_BLUR, SHARPEN, Kernel, apply_kernel
from pngedit.postprocess.pointwise import grayscale, invert, scale_channels
from pngedit.postprocess.rotate import rotate

__all__ = [
    "BOX_BLUR",
    "SHARPEN",
    "Kernel",
    "apply_kernel",
    "grayscale",
    "invert",
    "scale_channels",
    "rotate",
]
