import numpy as np
import pytest

from trackhelix.errors import DegenerateGeometryError
from trackhelix.line import Line

def test_direction_is_normalized():
    line = Line((1.0, 2.0, 3.0), (0.0, 3.0, 4.0))
    assert np.allclose(line.direction, (0.0, 0.6, 0.8))
    assert np.allclose(line.pointAt(5.0), (1.0, 5.0, 7.0))

def test_zero_direction_raises():
    with pytest.raises(DegenerateGeometryError):
        Line((0.0, 0.0, 0.0), (0.0, 0.0, 0.0))

def test_distance_to_point():
    line = Line((0.0, 0.0, 0.0), (0.0, 0.0, 2.0))
    assert line.getDistanceToPoint((3.0, 4.0, -7.0)) == pytest.approx(5.0)
    assert line.projectionParameter((3.0, 4.0, -7.0)) == pytest.approx(-7.0)

def test_line_is_immutable():
    point = np.array([1.0, 1.0, 1.0])
    line = Line(point, (1.0, 0.0, 0.0))
    point[0] = 10.0
    assert line.point[0] == 1.0
    with pytest.raises(ValueError):
        line.direction[0] = 0.0
    assert "Line(point=[1.0, 1.0, 1.0]" in repr(line)
