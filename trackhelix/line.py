"""Straight lines in 3D space.

---

Copyright 2018 Edwin Steiner

Redistribution and use in source and binary forms, with or without
modification, are permitted provided that the following conditions are met:

1. Redistributions of source code must retain the above copyright notice, this
list of conditions and the following disclaimer.

2. Redistributions in binary form must reproduce the above copyright notice,
this list of conditions and the following disclaimer in the documentation
and/or other materials provided with the distribution.

THIS SOFTWARE IS PROVIDED BY THE COPYRIGHT HOLDERS AND CONTRIBUTORS "AS IS" AND
ANY EXPRESS OR IMPLIED WARRANTIES, INCLUDING, BUT NOT LIMITED TO, THE IMPLIED
WARRANTIES OF MERCHANTABILITY AND FITNESS FOR A PARTICULAR PURPOSE ARE
DISCLAIMED. IN NO EVENT SHALL THE COPYRIGHT HOLDER OR CONTRIBUTORS BE LIABLE
FOR ANY DIRECT, INDIRECT, INCIDENTAL, SPECIAL, EXEMPLARY, OR CONSEQUENTIAL
DAMAGES (INCLUDING, BUT NOT LIMITED TO, PROCUREMENT OF SUBSTITUTE GOODS OR
SERVICES; LOSS OF USE, DATA, OR PROFITS; OR BUSINESS INTERRUPTION) HOWEVER
CAUSED AND ON ANY THEORY OF LIABILITY, WHETHER IN CONTRACT, STRICT LIABILITY,
OR TORT (INCLUDING NEGLIGENCE OR OTHERWISE) ARISING IN ANY WAY OUT OF THE USE
OF THIS SOFTWARE, EVEN IF ADVISED OF THE POSSIBILITY OF SUCH DAMAGE.
"""

import numpy as np

from trackhelix.errors import DegenerateGeometryError
from trackhelix.geometry import vector3

class Line:
    """An infinite straight line given by a point and a unit direction.
    Lines are immutable; the `point` and `direction` arrays are read-only.
    """
    def __init__(self, point, direction):
        """
        Args:
            point (array-like (3,)): a point on the line
            direction (array-like (3,)): direction of the line, need not be normalized
        Raises:
            DegenerateGeometryError: if the direction vector is zero.
        """
        point = np.asarray(point, dtype=np.float64)
        direction = np.asarray(direction, dtype=np.float64)
        assert point.shape == (3,) and direction.shape == (3,)
        norm = np.linalg.norm(direction)
        if not norm > 0:
            raise DegenerateGeometryError("line direction must be a non-zero vector")
        self._point = vector3(point)
        self._direction = vector3(direction / norm)

    @property
    def point(self):
        return self._point

    @property
    def direction(self):
        """Unit direction vector."""
        return self._direction

    def pointAt(self, s):
        """Return the point at signed distance s from `point` along the line."""
        return self._point + s * self._direction

    def projectionParameter(self, point):
        """Return the line parameter of the foot of the perpendicular from `point`."""
        return float(np.dot(np.asarray(point, dtype=np.float64) - self._point, self._direction))

    def getDistanceToPoint(self, point):
        """Return the perpendicular distance of `point` from the line."""
        point = np.asarray(point, dtype=np.float64)
        foot = self.pointAt(self.projectionParameter(point))
        return float(np.linalg.norm(point - foot))

    def __repr__(self):
        return "Line(point=%s, direction=%s)" % (self._point.tolist(), self._direction.tolist())
