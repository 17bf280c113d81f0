import numpy as np
import pytest

from detectors.orientation import Orientation, orient, oriented_size, swaps_axes


@pytest.fixture
def image():
    return np.arange(2 * 3 * 3, dtype=np.uint8).reshape(2, 3, 3)


def test_left_mirrored_is_transpose(image):
    out = orient(image, Orientation.LEFT_MIRRORED)
    assert out.shape == (3, 2, 3)
    assert np.array_equal(out, np.transpose(image, (1, 0, 2)))


def test_right_mirrored_is_transverse(image):
    out = orient(image, Orientation.RIGHT_MIRRORED)
    assert np.array_equal(out, np.transpose(image, (1, 0, 2))[::-1, ::-1])


@pytest.mark.parametrize("o,expected", [
    (Orientation.UP_MIRRORED, lambda a: a[:, ::-1]),
    (Orientation.DOWN, lambda a: a[::-1, ::-1]),
    (Orientation.DOWN_MIRRORED, lambda a: a[::-1, :]),
    (Orientation.LEFT, lambda a: np.rot90(a, 1)),
    (Orientation.RIGHT, lambda a: np.rot90(a, -1)),
])
def test_other_orientations(image, o, expected):
    assert np.array_equal(orient(image, o), expected(image))


def test_up_returns_a_copy(image):
    out = orient(image, Orientation.UP)
    assert np.array_equal(out, image)
    out[0, 0, 0] = 255
    assert image[0, 0, 0] == 0


def test_parse():
    assert Orientation.parse("Left-Mirrored") is Orientation.LEFT_MIRRORED
    assert Orientation.parse(Orientation.UP) is Orientation.UP
    with pytest.raises(ValueError):
        Orientation.parse("sideways")


def test_oriented_size():
    assert oriented_size(640, 480, Orientation.LEFT_MIRRORED) == (480, 640)
    assert oriented_size(640, 480, Orientation.UP_MIRRORED) == (640, 480)
    assert oriented_size(640, 480, None) == (640, 480)
    assert swaps_axes("right")
