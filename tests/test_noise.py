"""Tests for the random stream, Perlin layer and octave compositor."""

import numpy as np
import pytest


def test_stream_same_seed_same_sequence():
    from noiseforge.random_stream import RandomStream
    a = RandomStream(42)
    b = RandomStream(42)
    draws_a = [a.uniform(-1, 1) for _ in range(10)] + [a.uniform_int(7)]
    draws_b = [b.uniform(-1, 1) for _ in range(10)] + [b.uniform_int(7)]
    assert draws_a == draws_b


def test_stream_reseed_restarts_sequence():
    from noiseforge.random_stream import RandomStream
    stream = RandomStream(5)
    first = stream.uniform(0, 1, 8)
    stream.seed(5)
    np.testing.assert_array_equal(first, stream.uniform(0, 1, 8))


def test_stream_accepts_negative_seed():
    from noiseforge.random_stream import RandomStream
    a = RandomStream(-1).uniform(0, 1, 4)
    b = RandomStream(-1).uniform(0, 1, 4)
    np.testing.assert_array_equal(a, b)


def test_stream_ranges():
    from noiseforge.random_stream import RandomStream
    stream = RandomStream(3)
    values = stream.uniform(2.0, 3.0, 1000)
    assert values.min() >= 2.0
    assert values.max() < 3.0
    ints = [stream.uniform_int(4) for _ in range(200)]
    assert set(ints) <= {0, 1, 2, 3}


@pytest.mark.parametrize("seed", [0, 1, 42, 1337, 2**31])
def test_permutation_is_deterministic(seed):
    from noiseforge.noise import make_permutation
    from noiseforge.random_stream import RandomStream
    p1 = make_permutation(RandomStream(seed))
    p2 = make_permutation(RandomStream(seed))
    np.testing.assert_array_equal(p1, p2)


@pytest.mark.parametrize("seed", [0, 7, 99, 123456])
def test_permutation_is_bijection(seed):
    from noiseforge.noise import make_permutation
    from noiseforge.random_stream import RandomStream
    p = make_permutation(RandomStream(seed))
    assert p.shape == (256,)
    np.testing.assert_array_equal(np.sort(p), np.arange(256))


def test_permutation_differs_between_seeds():
    from noiseforge.noise import make_permutation
    from noiseforge.random_stream import RandomStream
    p1 = make_permutation(RandomStream(1))
    p2 = make_permutation(RandomStream(2))
    assert not np.array_equal(p1, p2)


def test_permute_wraps_indices():
    from noiseforge.noise import permute
    table = np.arange(256)[::-1].copy()
    assert permute(table, 256, 0) == permute(table, 0, 0)
    assert permute(table, 3, 259) == permute(table, 3, 3)
    # table[(table[1] + 2) % 256] = table[(254 + 2) % 256] = table[0]
    assert permute(table, 1, 2) == 255


def test_smooth_endpoints_and_monotonic():
    from noiseforge.noise import smooth
    assert smooth(0.0) == 0.0
    assert smooth(1.0) == 1.0
    assert smooth(0.5) == pytest.approx(0.5)
    t = np.linspace(0.0, 1.0, 1001)
    assert np.all(np.diff(smooth(t)) >= 0)


def test_gradient_table():
    from noiseforge.noise import gradient_for
    expected = [(1, 1), (-1, 1), (-1, -1), (1, -1)]
    for value, vec in enumerate(expected):
        np.testing.assert_array_equal(gradient_for(value), vec)


@pytest.mark.parametrize("value", range(-8, 24))
def test_gradient_cycles_with_period_four(value):
    from noiseforge.noise import gradient_for
    g = gradient_for(value)
    np.testing.assert_array_equal(np.abs(g), [1.0, 1.0])
    np.testing.assert_array_equal(g, gradient_for(value + 4))
    np.testing.assert_array_equal(g, gradient_for(value % 4))


def test_perlin_known_value_with_identity_table():
    from noiseforge.noise import perlin_layer
    identity = np.arange(256, dtype=np.int32)
    # Corners hash to 0, 1, 1, 2 -> dots 1, 1, -1, 1 -> 0.5 at the centre
    assert perlin_layer(0.5, 0.5, identity) == pytest.approx(0.5)


def test_perlin_zero_on_lattice():
    from noiseforge.noise import make_permutation, perlin_layer
    from noiseforge.random_stream import RandomStream
    perm = make_permutation(RandomStream(11))
    xs, ys = np.meshgrid(np.arange(-3.0, 300.0, 17.0), np.arange(0.0, 40.0))
    np.testing.assert_array_equal(perlin_layer(xs, ys, perm), 0.0)


def test_perlin_wraps_at_table_edge():
    from noiseforge.noise import make_permutation, perlin_layer
    from noiseforge.random_stream import RandomStream
    perm = make_permutation(RandomStream(4))
    assert perlin_layer(255.25, 3.75, perm) == perlin_layer(-0.75, 3.75, perm)
    assert perlin_layer(0.25, 255.5, perm) == perlin_layer(256.25, 255.5, perm)


def test_perlin_bounded_and_elementwise():
    from noiseforge.noise import make_permutation, perlin_layer
    from noiseforge.random_stream import RandomStream
    perm = make_permutation(RandomStream(8))
    rng = np.random.RandomState(0)
    xs = rng.uniform(-50, 50, 500)
    ys = rng.uniform(-50, 50, 500)
    values = perlin_layer(xs, ys, perm)
    assert values.shape == (500,)
    assert np.all(np.abs(values) <= 1.0)
    for i in range(0, 500, 50):
        assert values[i] == perlin_layer(xs[i], ys[i], perm)


def test_fractal_scales_each_octave():
    from noiseforge.noise import fractal
    seen = []

    def layer(x, y):
        seen.append((x, y))
        return 0.0

    fractal(layer, 1.0, 2.0, octaves=3, frequency=0.05)
    assert seen == [pytest.approx((0.05, 0.1)), pytest.approx((0.1, 0.2)),
                    pytest.approx((0.2, 0.4))]


def test_fractal_normalizes_by_total_amplitude():
    from noiseforge.noise import fractal
    values = iter([1.0, -1.0])
    # (1 * 1 + 0.5 * -1) / 1.5
    result = fractal(lambda x, y: next(values), 0.0, 0.0, octaves=2,
                     frequency=1.0)
    assert result == pytest.approx(1.0 / 3.0)


@pytest.mark.parametrize("octaves", range(1, 9))
def test_fractal_stays_in_unit_range(octaves):
    from noiseforge.noise import fractal, make_permutation, perlin_layer
    from noiseforge.random_stream import RandomStream
    perm = make_permutation(RandomStream(octaves))
    xs, ys = np.meshgrid(np.arange(64.0), np.arange(64.0))
    values = fractal(lambda x, y: perlin_layer(x, y, perm), xs, ys,
                     octaves=octaves, frequency=0.07)
    assert np.all(values >= -1.0)
    assert np.all(values <= 1.0)

    assert fractal(lambda x, y: 1.0, 0.0, 0.0, octaves, 0.3) == \
        pytest.approx(1.0)
    assert fractal(lambda x, y: -1.0, 0.0, 0.0, octaves, 0.3) == \
        pytest.approx(-1.0)


def test_fractal_custom_persistence():
    from noiseforge.noise import fractal
    values = iter([1.0, 0.0])
    result = fractal(lambda x, y: next(values), 0.0, 0.0, octaves=2,
                     frequency=1.0, persistence=0.25, lacunarity=3.0)
    assert result == pytest.approx(1.0 / 1.25)


@pytest.mark.parametrize("value,gray", [(-1.0, 0), (1.0, 255), (0.0, 128),
                                        (-0.5, 64), (0.5, 191)])
def test_noise_to_gray(value, gray):
    from noiseforge.noise import noise_to_gray
    assert noise_to_gray(value) == gray


def test_noise_to_gray_array():
    from noiseforge.noise import noise_to_gray
    out = noise_to_gray(np.array([[-1.0, 0.0], [1.0, 1.0]]))
    assert out.dtype == np.uint8
    np.testing.assert_array_equal(out, [[0, 128], [255, 255]])


def test_white_noise_range_and_determinism():
    from noiseforge.noise import white_noise
    from noiseforge.random_stream import RandomStream
    a = white_noise(RandomStream(42), (16, 16))
    b = white_noise(RandomStream(42), (16, 16))
    np.testing.assert_array_equal(a, b)
    assert a.min() >= -1.0
    assert a.max() < 1.0
