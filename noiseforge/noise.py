"""Gradient (Perlin) noise, white noise and fractal octave summation.

Every layer function works element-wise, so the same call evaluates a
single point or whole coordinate grids.
"""

import numpy as np

TABLE_SIZE = 256
TABLE_MASK = TABLE_SIZE - 1

PERSISTENCE = 0.5
LACUNARITY = 2.0

# Indexed by value & 3
_GRADIENTS = np.array([[1.0, 1.0], [-1.0, 1.0], [-1.0, -1.0], [1.0, -1.0]])


def smooth(t):
    """Quintic fade curve: 6t^5 - 15t^4 + 10t^3."""
    return t * t * t * (t * (t * 6.0 - 15.0) + 10.0)


def lerp(a, b, t):
    """Linear interpolation."""
    return a + t * (b - a)


def gradient_for(value):
    """Map an integer (or integer array) to one of four diagonal vectors.

    0 -> (1, 1), 1 -> (-1, 1), 2 -> (-1, -1), 3 -> (1, -1), repeating with
    period 4. Returns an array whose last axis holds (x, y).
    """
    return _GRADIENTS[np.asarray(value) & 3]


def make_permutation(stream):
    """Build a shuffled 0..255 table with a Fisher-Yates pass.

    Args:
        stream: RandomStream the swap indices are drawn from.

    Returns:
        int32 array of shape (256,) holding each value 0-255 exactly once.
    """
    table = np.arange(TABLE_SIZE, dtype=np.int32)
    for i in range(TABLE_SIZE - 1, 0, -1):
        j = stream.uniform_int(i + 1)
        table[i], table[j] = table[j], table[i]
    return table


def permute(table, x, y):
    """Double lookup ``table[(table[x] + y) % 256]`` with x and y masked."""
    x = np.asarray(x) & TABLE_MASK
    y = np.asarray(y) & TABLE_MASK
    return table[(table[x] + y) % TABLE_SIZE]


def _dot_gradient(hash_val, ox, oy):
    g = gradient_for(hash_val)
    return g[..., 0] * ox + g[..., 1] * oy


def perlin_layer(x, y, permutation):
    """Evaluate one octave of 2D gradient noise.

    Args:
        x, y: Sample coordinates (scalars or arrays of equal shape).
        permutation: Table from make_permutation().

    Returns:
        Noise value(s) in [-1, 1], same shape as x and y.
    """
    x = np.asarray(x, dtype=np.float64)
    y = np.asarray(y, dtype=np.float64)
    x_floor = np.floor(x)
    y_floor = np.floor(y)

    xi = x_floor.astype(np.int64) & TABLE_MASK
    yi = y_floor.astype(np.int64) & TABLE_MASK
    xi1 = (xi + 1) % TABLE_SIZE
    yi1 = (yi + 1) % TABLE_SIZE

    xf = x - x_floor
    yf = y - y_floor

    bottom_left = _dot_gradient(permute(permutation, xi, yi), xf, yf)
    bottom_right = _dot_gradient(permute(permutation, xi1, yi), xf - 1.0, yf)
    top_left = _dot_gradient(permute(permutation, xi, yi1), xf, yf - 1.0)
    top_right = _dot_gradient(permute(permutation, xi1, yi1), xf - 1.0, yf - 1.0)

    u = smooth(xf)
    v = smooth(yf)

    left = lerp(bottom_left, top_left, v)
    right = lerp(bottom_right, top_right, v)
    return lerp(left, right, u)[()]


def fractal(layer, x, y, octaves, frequency, persistence=PERSISTENCE,
            lacunarity=LACUNARITY):
    """Sum octaves of a layer function (fractal Brownian motion).

    The first octave is already scaled by ``frequency``. Each following
    octave multiplies the amplitude by ``persistence`` and the frequency
    by ``lacunarity``. The sum is divided by the total amplitude, so a
    layer bounded in [-1, 1] yields a result bounded in [-1, 1].

    Args:
        layer: Callable ``layer(x, y)`` returning values in [-1, 1].
        x, y: Sample coordinates (scalars or arrays).
        octaves: Number of layers to sum (>= 1).
        frequency: Coordinate scale of the first octave.
        persistence: Amplitude multiplier per octave.
        lacunarity: Frequency multiplier per octave.

    Returns:
        Normalized noise value(s).
    """
    total = 0.0
    max_amplitude = 0.0
    amplitude = 1.0
    scale = frequency

    for _ in range(octaves):
        total = total + layer(x * scale, y * scale) * amplitude
        max_amplitude += amplitude
        amplitude *= persistence
        scale *= lacunarity

    return total / max_amplitude


def white_noise(stream, shape=None):
    """Draw uniform noise in [-1, 1), row-major for array shapes."""
    return stream.uniform(-1.0, 1.0, shape)


def noise_to_gray(value):
    """Quantize noise in [-1, 1] to a byte, rounding half up.

    -1 -> 0, 0 -> 128, 1 -> 255.
    """
    gray = (np.asarray(value, dtype=np.float64) + 1.0) / 2.0 * 255.0
    return np.clip(np.floor(gray + 0.5), 0, 255).astype(np.uint8)[()]
