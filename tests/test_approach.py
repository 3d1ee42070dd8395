import io

import numpy as np
import pytest

from trackhelix.approach import ApproachFinder
from trackhelix.errors import NonConvergenceError
from trackhelix.helix import Helix, FCT
from trackhelix.line import Line

VERTEX = np.array([5.0, -3.0, 12.0])

@pytest.fixture
def vertex_pair(b_field):
    first = Helix.from_vp(VERTEX, (1.0, 0.4, 0.6), 1.0, b_field)
    second = Helix.from_vp(VERTEX, (-0.3, 0.9, -0.2), -1.0, b_field)
    return first, second

def test_tracks_from_common_vertex(vertex_pair):
    first, second = vertex_pair
    approach = first.getDistanceToHelix(second)
    assert approach.distance < 1e-6
    assert np.allclose(approach.position, VERTEX, atol=1e-6)
    assert np.allclose(approach.momentum, first.momentum + second.momentum, atol=1e-9)
    assert approach.time == pytest.approx(0.0, abs=1e-6)
    assert approach.other_time == pytest.approx(0.0, abs=1e-6)
    reverse = second.getDistanceToHelix(first)
    assert reverse.distance < 1e-6
    assert np.allclose(reverse.position, VERTEX, atol=1e-6)

def test_common_vertex_away_from_reference_point(vertex_pair, b_field):
    first, second = vertex_pair
    moved = Helix.from_vp(second.positionAt(50.0), second.momentumAt(50.0), -1.0, b_field)
    approach = first.getDistanceToHelix(moved)
    assert approach.distance < 1e-6
    assert np.allclose(approach.position, VERTEX, atol=1e-6)
    assert approach.other_time == pytest.approx(-50.0, abs=1e-6)
    assert np.allclose(approach.momentum, first.momentum + second.momentum, atol=1e-9)

def test_separated_circles(flat_circle):
    helix, radius = flat_circle
    distance = 3 * radius
    # same radius, center at (distance, 0)
    other = Helix.from_vp((distance - radius, 0.0, 0.0), (0.0, 1.0, 0.0), 1.0, 2.0)
    assert other.x_centre == pytest.approx(distance)
    approach = helix.getDistanceToHelix(other)
    assert approach.distance == pytest.approx(distance - 2 * radius)
    assert np.allclose(approach.position, (0.5 * distance, 0.0, 0.0), atol=1e-6)
    assert np.allclose(approach.momentum, (0.0, 0.0, 0.0), atol=1e-9)
    reverse = other.getDistanceToHelix(helix)
    assert reverse.distance == pytest.approx(approach.distance)

def test_nested_circles(flat_circle):
    helix, radius = flat_circle
    inner = Helix.from_vp((0.5 * radius, 0.0, 0.0), (0.0, -0.25, 0.0), 1.0, 2.0)
    assert inner.radius == pytest.approx(0.25 * radius)
    assert inner.x_centre == pytest.approx(0.25 * radius)
    approach = helix.getDistanceToHelix(inner)
    assert approach.distance == pytest.approx(0.5 * radius)
    assert np.allclose(approach.position, (0.75 * radius, 0.0, 0.0), atol=1e-6)
    reverse = inner.getDistanceToHelix(helix)
    assert reverse.distance == pytest.approx(0.5 * radius)

def test_concentric_circles(flat_circle):
    helix, radius = flat_circle
    inner = Helix.from_vp((0.25 * radius, 0.0, 10.0), (0.0, -0.25, 0.0), 1.0, 2.0)
    approach = helix.getDistanceToHelix(inner)
    assert approach.distance == pytest.approx(np.hypot(0.75 * radius, 10.0))

def test_straight_track_and_helix(b_field):
    straight = Helix.from_vp(VERTEX, (0.5, -0.2, 0.1), 0.0, b_field)
    curved = Helix.from_vp(VERTEX, (1.0, 0.4, 0.6), 1.0, b_field)
    approach = straight.getDistanceToHelix(curved)
    assert approach.distance < 1e-6
    assert np.allclose(approach.position, VERTEX, atol=1e-6)
    assert approach.time == pytest.approx(0.0, abs=1e-6)
    reverse = curved.getDistanceToHelix(straight)
    assert reverse.distance < 1e-6
    assert reverse.other_time == pytest.approx(0.0, abs=1e-6)

def test_two_straight_tracks():
    first = Helix.from_vp((0.0, 0.0, 0.0), (2.0, 0.0, 0.0), 0.0, 1.0)
    second = Helix.from_vp((0.0, 5.0, 3.0), (0.0, 0.0, 1.0), 0.0, 1.0)
    approach = first.getDistanceToHelix(second)
    assert approach.distance == pytest.approx(5.0)
    assert np.allclose(approach.position, (0.0, 2.5, 0.0))
    assert np.allclose(approach.momentum, (2.0, 0.0, 1.0))
    assert approach.time == pytest.approx(0.0)
    assert approach.other_time == pytest.approx(-3.0)

def test_line_along_field_through_helix(helix):
    point = helix.positionAt(30.0)
    approach = helix.getClosestApproachToLine(Line(point, (0.0, 0.0, 1.0)))
    assert approach.distance < 1e-6
    assert approach.time == pytest.approx(30.0, abs=1e-6)
    assert np.allclose(approach.point, point, atol=1e-6)
    assert np.allclose(approach.line_point, point, atol=1e-6)

def test_line_crossing_helix(helix):
    point = helix.positionAt(30.0)
    momentum = helix.momentumAt(30.0)
    direction = np.cross(momentum, (0.0, 0.0, 1.0)) + (0.0, 0.0, 0.3)
    approach = helix.getClosestApproachToLine(Line(point + 7.0 * direction, direction))
    assert approach.distance < 1e-6
    assert approach.time == pytest.approx(30.0, abs=1e-6)

def test_line_on_helix_axis(helix):
    line = Line((helix.x_centre, helix.y_centre, -40.0), (0.0, 0.0, -2.0))
    assert helix.getDistanceToLine(line) == pytest.approx(helix.radius)

def test_line_parallel_to_axis_outside_helix(helix):
    outside = helix.positionAt(200.0)
    radial = outside[:2] - (helix.x_centre, helix.y_centre)
    anchor = outside[:2] + 5.0 * radial / np.linalg.norm(radial)
    line = Line((anchor[0], anchor[1], 0.0), (0.0, 0.0, 1.0))
    approach = helix.getClosestApproachToLine(line)
    assert approach.distance == pytest.approx(5.0)
    assert np.allclose(approach.point[:2], outside[:2], atol=1e-5)
    assert approach.line_point[:2] == pytest.approx(anchor)

def test_skew_line_matches_dense_sampling(positive_helix, sample):
    line = Line((300.0, -800.0, 150.0), (0.2, 0.5, -1.0))
    approach = positive_helix.getClosestApproachToLine(line)
    times = np.linspace(-positive_helix.turn_period, positive_helix.turn_period, 200001)
    samples = sample(positive_helix, times)
    offsets = samples - line.point
    perpendicular = offsets - np.outer(offsets @ line.direction, line.direction)
    sampled = np.min(np.linalg.norm(perpendicular, axis=1))
    assert approach.distance <= sampled + 1e-9
    assert approach.distance == pytest.approx(line.getDistanceToPoint(approach.point))

def test_straight_track_and_line():
    helix = Helix.from_vp((0.0, 0.0, 0.0), (2.0, 0.0, 0.0), 0.0, 1.0)
    approach = helix.getClosestApproachToLine(Line((0.0, 5.0, 3.0), (0.0, 0.0, 1.0)))
    assert approach.distance == pytest.approx(5.0)
    assert approach.time == pytest.approx(0.0)
    assert np.allclose(approach.point, (0.0, 0.0, 0.0))
    assert np.allclose(approach.line_point, (0.0, 5.0, 0.0))

def test_evaluation_cap_raises(positive_helix):
    finder = ApproachFinder(params={'refine__max_nfev': 1})
    point = positive_helix.positionAt(30.0)
    radial = point[:2] - (positive_helix.x_centre, positive_helix.y_centre)
    radial /= np.linalg.norm(radial)
    line = Line(point + (0.0, 0.0, 5.0), (radial[0], radial[1], 0.5))
    with pytest.raises(NonConvergenceError) as excinfo:
        positive_helix.getDistanceToLine(line, finder=finder)
    assert excinfo.value.nfev is not None
    # the default cap suffices
    assert positive_helix.getDistanceToLine(line) > 0

def test_finder_params():
    finder = ApproachFinder(params={'refine__max_nfev': 5})
    assert finder.params['refine__max_nfev'] == 5
    assert ApproachFinder.default_params['refine__max_nfev'] == 200
    assert list(finder.params) == list(ApproachFinder.default_params)
    with pytest.raises(KeyError):
        ApproachFinder(params={'refine__maxiter': 5})

def test_finder_logging(flat_circle):
    helix, radius = flat_circle
    other = Helix.from_vp((2 * radius, 0.0, 0.0), (0.0, 1.0, 0.0), 1.0, 2.0)
    stream = io.StringIO()
    finder = ApproachFinder(max_log_indent=None, file=stream)
    helix.getDistanceToHelix(other, finder=finder)
    output = stream.getvalue()
    assert output.startswith("closest approach of two helices:\n")
    assert "    helix-helix refinement: start" in output
    assert "done closest approach of two helices:" in output

def test_default_finder_is_silent(vertex_pair, capsys):
    first, second = vertex_pair
    first.getDistanceToHelix(second)
    assert capsys.readouterr().out == ""

def test_curvature_constant():
    # 1 GeV transverse momentum in 1 T bends with a radius of about 3.3 m
    helix = Helix.from_vp((0.0, 0.0, 0.0), (1.0, 0.0, 0.0), 1.0, 1.0)
    assert helix.radius == pytest.approx(1.0 / FCT)
    assert helix.radius == pytest.approx(3335.64, rel=1e-5)
