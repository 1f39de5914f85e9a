"""NoiseForge - Generate deterministic grayscale noise textures."""

from .errors import (ValidationError, InvalidDimensions, InvalidFrequency,
                     InvalidOctaves, InvalidNoiseKind, InvalidFractalParameters)
from .renderer import rasterize, validate, NoiseKind, NoiseRequest
from .sink import FileSink, to_image

__version__ = "0.1.0"
__all__ = [
    "generate", "rasterize", "validate", "NoiseKind", "NoiseRequest",
    "FileSink", "to_image", "ValidationError", "InvalidDimensions",
    "InvalidFrequency", "InvalidOctaves", "InvalidNoiseKind",
    "InvalidFractalParameters",
]


def generate(kind, width=256, height=256, seed=0, **kwargs):
    """Generate a noise texture image.

    Args:
        kind: Noise kind ('white', 'perlin', 'voronoi' or a NoiseKind).
        width: Output image width in pixels.
        height: Output image height in pixels.
        seed: Random seed; the same seed always yields the same image.
        **kwargs: Additional NoiseRequest parameters (octaves, frequency,
            persistence, lacunarity, workers).

    Returns:
        PIL Image in RGBA mode.
    """
    request = NoiseRequest(kind=kind, width=width, height=height, seed=seed,
                           **kwargs)
    return to_image(rasterize(request))
