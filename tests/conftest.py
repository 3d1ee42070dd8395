import numpy as np
import pytest

from trackhelix.helix import Helix, FCT

B_FIELD = 3.5

@pytest.fixture
def b_field():
    return B_FIELD

@pytest.fixture
def positive_helix():
    """Positive track, rotating clockwise, with moderate pitch."""
    return Helix.from_vp((10.0, -5.0, 20.0), (1.2, 0.7, 0.9), 1.0, B_FIELD)

@pytest.fixture
def negative_helix():
    """Negative track, rotating counter-clockwise, moving towards -z."""
    return Helix.from_vp((3.0, 4.0, -15.0), (-0.5, 0.8, -0.3), -1.0, B_FIELD)

@pytest.fixture(params=['positive', 'negative'])
def helix(request, positive_helix, negative_helix):
    return positive_helix if request.param == 'positive' else negative_helix

@pytest.fixture
def flat_circle():
    """Helix with pz == 0 whose circle is centered on the z axis.
    Returns:
        (Helix, float): the helix and its radius
    """
    b_field = 2.0
    radius = 1.0 / (FCT * b_field)
    helix = Helix.from_vp((radius, 0.0, 0.0), (0.0, -1.0, 0.0), 1.0, b_field)
    return helix, radius

@pytest.fixture
def rng():
    return np.random.default_rng(20180919)

def sampleHelix(helix, times):
    """Evaluate the helix at the given generic times from the explicit parameterization."""
    phi = helix.phi_ref_point + helix.rotation_sign * helix.pxy * times / helix.radius
    x = helix.x_centre + helix.radius * np.cos(phi)
    y = helix.y_centre + helix.radius * np.sin(phi)
    z = helix.reference_point[2] + helix.momentum[2] * times
    return np.column_stack([x, y, z])

@pytest.fixture
def sample():
    return sampleHelix
