"""Noise field rasterization pipeline.

Validates a request, builds the per-request random state (permutation
table or nuclei), evaluates the selected noise for every pixel and
quantizes the result into an RGBA byte buffer.
"""

import logging
import math
from dataclasses import dataclass
from enum import Enum
from functools import partial
from multiprocessing.pool import ThreadPool

import numpy as np

from .errors import (InvalidDimensions, InvalidFractalParameters,
                     InvalidFrequency, InvalidNoiseKind, InvalidOctaves)
from .noise import (LACUNARITY, PERSISTENCE, fractal, make_permutation,
                    noise_to_gray, perlin_layer, white_noise)
from .random_stream import RandomStream
from .voronoi import make_nuclei, voronoi_layer

logger = logging.getLogger(__name__)

DEFAULT_WIDTH = 256
DEFAULT_HEIGHT = 256
DEFAULT_FREQUENCY = 0.05
OPAQUE = 255


class NoiseKind(Enum):
    WHITE = "white"
    PERLIN = "perlin"
    VORONOI = "voronoi"

    @classmethod
    def parse(cls, value):
        """Accept a NoiseKind or a name such as 'Perlin' or 'voronoi_noise'."""
        if isinstance(value, cls):
            return value
        name = str(value).strip().lower().replace("-", "_")
        if name.endswith("_noise"):
            name = name[:-len("_noise")]
        elif name.endswith("noise"):
            name = name[:-len("noise")]
        try:
            return cls(name)
        except ValueError:
            choices = ", ".join(k.value for k in cls)
            raise InvalidNoiseKind(
                f"Unknown noise kind {value!r} (expected one of: {choices})"
            ) from None


@dataclass
class NoiseRequest:
    """Parameters for one noise field."""

    kind: NoiseKind = NoiseKind.WHITE
    width: int = DEFAULT_WIDTH
    height: int = DEFAULT_HEIGHT
    seed: int = 0
    octaves: int = 1
    frequency: float = DEFAULT_FREQUENCY

    # Fractal shape
    persistence: float = PERSISTENCE
    lacunarity: float = LACUNARITY

    # Row bands evaluated concurrently; output does not depend on it
    workers: int = 1

    def __post_init__(self):
        self.kind = NoiseKind.parse(self.kind)


def validate(request):
    """Raise a ValidationError subclass if the request cannot be generated."""
    for name in ("width", "height"):
        value = getattr(request, name)
        if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
            raise InvalidDimensions(f"{name} must be an integer, got {value!r}")
    if request.width <= 0 or request.height <= 0:
        raise InvalidDimensions(
            f"Invalid texture dimensions: width={request.width}, "
            f"height={request.height}"
        )
    if request.frequency == 0:
        raise InvalidFrequency("Invalid frequency: cannot be 0")
    if not math.isfinite(request.frequency):
        raise InvalidFrequency(
            f"Invalid frequency: must be finite, got {request.frequency!r}"
        )
    # Nuclei cell size is int(1 / frequency)
    if not math.isfinite(1.0 / float(request.frequency)):
        raise InvalidFrequency(
            f"Invalid frequency: {request.frequency!r} is too small"
        )
    if (isinstance(request.octaves, bool)
            or not isinstance(request.octaves, (int, np.integer))
            or request.octaves < 1):
        raise InvalidOctaves(
            f"Invalid octave count {request.octaves}: must be at least 1"
        )
    _validate_fractal(request)


def _validate_fractal(request):
    """Reject persistence and lacunarity that break the normalized sum."""
    persistence = request.persistence
    lacunarity = request.lacunarity
    if not math.isfinite(persistence) or persistence <= 0:
        raise InvalidFractalParameters(
            f"Invalid persistence {persistence!r}: must be finite and positive"
        )
    if not math.isfinite(lacunarity):
        raise InvalidFractalParameters(
            f"Invalid lacunarity {lacunarity!r}: must be finite"
        )

    # Amplitudes and coordinate scales of the last octave must stay finite
    amplitude = 1.0
    scale = float(request.frequency)
    for _ in range(request.octaves - 1):
        amplitude *= persistence
        scale *= lacunarity
    if not (math.isfinite(amplitude) and math.isfinite(scale)):
        raise InvalidFractalParameters(
            f"persistence={persistence!r} and lacunarity={lacunarity!r} "
            f"overflow over {request.octaves} octaves"
        )


def rasterize(request):
    """Generate the pixel buffer for a noise request.

    Args:
        request: NoiseRequest describing the field.

    Returns:
        uint8 array of shape (height, width, 4). R, G and B hold the gray
        value; alpha is 255.

    Raises:
        ValidationError: The request was rejected; nothing was allocated.
    """
    validate(request)
    logger.debug("Rasterizing %s noise %dx%d (seed=%d, octaves=%d, "
                 "frequency=%g)", request.kind.value, request.width,
                 request.height, request.seed, request.octaves,
                 request.frequency)

    stream = RandomStream(request.seed)
    buffer = np.empty((request.height, request.width, 4), dtype=np.uint8)
    buffer[:, :, 3] = OPAQUE

    if request.kind is NoiseKind.WHITE:
        values = white_noise(stream, (request.height, request.width))
        _write_gray(buffer, 0, values)
        return buffer

    layer = _LAYER_BUILDERS[request.kind](request, stream)
    bands = _row_bands(request.height, request.workers)
    evaluate = partial(_rasterize_band, buffer, layer, request)

    if len(bands) > 1:
        with ThreadPool(processes=len(bands)) as pool:
            pool.map(evaluate, bands)
    else:
        for band in bands:
            evaluate(band)

    return buffer


# ---------------------------------------------------------------------------
# Internal stages
# ---------------------------------------------------------------------------

def _perlin_layer_for(request, stream):
    permutation = make_permutation(stream)
    logger.debug("Built permutation table")
    return partial(perlin_layer, permutation=permutation)


def _voronoi_layer_for(request, stream):
    nuclei = make_nuclei(request.width, request.height, request.frequency,
                         stream)
    logger.debug("Scattered %d nuclei", len(nuclei))
    if len(nuclei) < 2:
        logger.warning(
            "Insufficient nuclei (%d) for %dx%d at frequency %g; "
            "filling with sentinel value", len(nuclei), request.width,
            request.height, request.frequency)
    return partial(voronoi_layer, nuclei=nuclei)


_LAYER_BUILDERS = {
    NoiseKind.PERLIN: _perlin_layer_for,
    NoiseKind.VORONOI: _voronoi_layer_for,
}


def _row_bands(height, workers):
    """Split [0, height) into at most ``workers`` contiguous row ranges."""
    count = max(1, min(int(workers), height))
    edges = np.linspace(0, height, count + 1).astype(int)
    return [(int(y0), int(y1)) for y0, y1 in zip(edges[:-1], edges[1:])
            if y1 > y0]


def _rasterize_band(buffer, layer, request, band):
    """Evaluate rows [y0, y1) and write them into their slice of buffer."""
    y0, y1 = band
    xs = np.arange(request.width, dtype=np.float64)
    ys = np.arange(y0, y1, dtype=np.float64)
    xv, yv = np.meshgrid(xs, ys)

    values = fractal(layer, xv, yv, request.octaves, request.frequency,
                     persistence=request.persistence,
                     lacunarity=request.lacunarity)
    _write_gray(buffer, y0, values)


def _write_gray(buffer, y0, values):
    gray = noise_to_gray(values)
    y1 = y0 + gray.shape[0]
    buffer[y0:y1, :, 0] = gray
    buffer[y0:y1, :, 1] = gray
    buffer[y0:y1, :, 2] = gray
