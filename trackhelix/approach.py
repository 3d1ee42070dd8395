"""Closest-approach computations between helices, lines and space points.

The `ApproachFinder` holds the solver settings for the iterative parts of the
helix distance queries. It first constructs start values from the exact
geometry of the circles in the x,y-plane and then refines them in 3D with a
Levenberg-Marquardt least squares fit (scipy.optimize.least_squares) over
the generic times of the closest points.

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

from collections import OrderedDict

import numpy as np
from scipy.optimize import least_squares

from trackhelix.errors import NonConvergenceError
from trackhelix.geometry import (TANGENT_TOLERANCE, normalizePhase, wrapPhase, circleLineIntersections,
                                 circleCircleIntersections, helixNearestPhase, lineLineClosestPoints)
from trackhelix.logging import Logger
from trackhelix.results import HelixApproach, LineApproach

class ApproachFinder(Logger):
    """Solver for the closest approach of a helix to points, lines and other helices.
    The finder does not keep any state between calls apart from its parameters,
    so a single instance may be shared by any number of helices.
    """
    default_params = OrderedDict([
        # params for the nearest point of a helix to a space point
        ('nearest__xtol'        , 1e-12   ), # absolute tolerance in phase of the bracketing root finder
        ('nearest__maxiter'     , 100     ), # iteration cap of the bracketing root finder

        # params for the least squares refinement of closest approaches
        ('refine__xtol'         , 1e-12   ), # relative tolerance on the generic times
        ('refine__ftol'         , 1e-12   ), # relative tolerance on the squared distance
        ('refine__gtol'         , 1e-12   ), # tolerance on the gradient
        ('refine__max_nfev'     , 200     ), # maximum number of residual evaluations per start value
        ('refine__atol'         , 1e-6    ), # distance [mm] at which a start value is accepted as touching
    ])

    def __init__(self, params={}, max_log_indent=-1, file=None):
        """
        Create an ApproachFinder.
        Args:
            params (dict or OrderedDict): solver parameters to override defaults.
            max_log_indent (None or int): maximum log indent level to show.
                The default of -1 keeps the finder silent.
            file (None or file-like): stream for log messages.
        """
        super(ApproachFinder, self).__init__(max_log_indent=max_log_indent, file=file)
        self.params = OrderedDict(self.default_params)
        unknown = set(params) - set(self.default_params)
        if unknown:
            raise KeyError("unknown ApproachFinder params: %s" % ", ".join(sorted(unknown)))
        self.params.update(params)

    def nearestTime(self, helix, point):
        """Return the generic time from the reference point of the helix to its point
        nearest to the given space point."""
        ref = helix.reference_point
        if helix.is_straight:
            mom = helix.momentum
            return float(np.dot(point - ref, mom) / np.dot(mom, mom))
        radius = helix.radius
        sign = helix.rotation_sign
        dx = point[0] - helix.x_centre
        dy = point[1] - helix.y_centre
        rho = np.hypot(dx, dy)
        alpha = float(normalizePhase(sign * (np.arctan2(dy, dx) - helix.phi_ref_point)))
        t = helixNearestPhase(radius, radius * helix.tan_lambda, rho, alpha, point[2] - ref[2],
                              xtol=self.params['nearest__xtol'], maxiter=self.params['nearest__maxiter'])
        return t * radius / helix.pxy

    def _turnTime(self, helix, phi, z=None):
        """Generic time at which the helix passes azimuth phi about its axis.
        Args:
            helix (Helix): a helix with non-zero radius
            phi (float): azimuth about the helix axis
            z (None or float): if given, choose the turn whose height is nearest to z,
                otherwise the turn nearest to the reference point.
        """
        radius = helix.radius
        t = float(wrapPhase(helix.rotation_sign * (phi - helix.phi_ref_point)))
        hel_h = radius * helix.tan_lambda
        if z is not None and hel_h != 0:
            dz = z - helix.reference_point[2]
            t += 2 * np.pi * np.round((dz / hel_h - t) / (2 * np.pi))
        return t * radius / helix.pxy

    def _refine(self, fun, jac, x0, caption):
        """Run the Levenberg-Marquardt least squares refinement.
        Returns:
            x (array): refined generic times
            cost (float): half the squared residual norm at x
        Raises:
            NonConvergenceError: if the solver stops without meeting a tolerance.
        """
        x0 = np.asarray(x0, dtype=np.float64)
        f0 = fun(x0)
        if np.linalg.norm(f0) <= self.params['refine__atol']:
            # start value already touches the other trajectory
            self.log(caption, ": start ", x0.tolist(), " already touching")
            return (x0, 0.5 * float(np.dot(f0, f0)))
        res = least_squares(fun, x0, jac=jac, method='lm', x_scale='jac',
                            xtol=self.params['refine__xtol'], ftol=self.params['refine__ftol'],
                            gtol=self.params['refine__gtol'], max_nfev=self.params['refine__max_nfev'])
        self.log(caption, ": start ", x0.tolist(), " -> ", res.x.tolist(),
                 " (nfev ", res.nfev, ", status ", res.status, ")")
        if res.status <= 0:
            raise NonConvergenceError("%s did not converge: %s" % (caption, res.message), nfev=res.nfev)
        return (res.x, float(res.cost))

    def _makeApproach(self, h1, h2, time1, time2):
        p1 = h1.positionAt(time1)
        p2 = h2.positionAt(time2)
        return HelixApproach(distance=float(np.linalg.norm(p1 - p2)),
                             position=0.5 * (p1 + p2),
                             momentum=h1.momentumAt(time1) + h2.momentumAt(time2),
                             time=float(time1), other_time=float(time2))

    def _circleCandidates(self, h1, h2):
        """Return pairs of (x, y) points on the circles of h1 and h2 which are
        nearest to each other in the x,y-plane."""
        c1 = np.array([h1.x_centre, h1.y_centre])
        c2 = np.array([h2.x_centre, h2.y_centre])
        r1, r2 = h1.radius, h2.radius
        d = np.linalg.norm(c2 - c1)
        if d <= TANGENT_TOLERANCE * max(r1, r2):
            # concentric circles: every azimuth is equally good
            phi = h1.phi_ref_point
            e = np.array([np.cos(phi), np.sin(phi)])
            return [(c1 + r1 * e, c2 + r2 * e)]
        x1, y1, x2, y2 = circleCircleIntersections(c1[0], c1[1], r1, c2[0], c2[1], r2)
        if not np.isnan(x1):
            first = np.array([x1, y1], dtype=np.float64)
            second = np.array([x2, y2], dtype=np.float64)
            if np.array_equal(first, second):
                return [(first, first)]
            return [(first, first), (second, second)]
        e = (c2 - c1) / d
        if d > r1 + r2:
            return [(c1 + r1 * e, c2 - r2 * e)]
        if r1 > r2:
            # second circle inside the first one
            return [(c1 + r1 * e, c2 + r2 * e)]
        return [(c1 - r1 * e, c2 - r2 * e)]

    def helixToHelix(self, h1, h2):
        """Find the closest approach of two helices.
        Returns:
            (HelixApproach): see `Helix.getDistanceToHelix`.
        """
        with self.timed("closest approach of two helices"):
            if h1.is_straight and h2.is_straight:
                line1, line2 = h1.tangentLine(), h2.tangentLine()
                s1, s2 = lineLineClosestPoints(line1.point, line1.direction, line2.point, line2.direction)
                self.log("both tracks straight: s1 = ", s1, ", s2 = ", s2)
                return self._makeApproach(h1, h2, s1 / np.linalg.norm(h1.momentum),
                                          s2 / np.linalg.norm(h2.momentum))
            if h1.is_straight:
                line1 = h1.tangentLine()
                approach = self.helixToLine(h2, line1)
                time1 = line1.projectionParameter(approach.line_point) / np.linalg.norm(h1.momentum)
                return self._makeApproach(h1, h2, time1, approach.time)
            if h2.is_straight:
                line2 = h2.tangentLine()
                approach = self.helixToLine(h1, line2)
                time2 = line2.projectionParameter(approach.line_point) / np.linalg.norm(h2.momentum)
                return self._makeApproach(h1, h2, approach.time, time2)

            def residual(x):
                return h1.positionAt(x[0]) - h2.positionAt(x[1])
            def jacobian(x):
                return np.column_stack([h1.momentumAt(x[0]), -h2.momentumAt(x[1])])

            best = None
            for xy1, xy2 in self._circleCandidates(h1, h2):
                time1 = self._turnTime(h1, np.arctan2(xy1[1] - h1.y_centre, xy1[0] - h1.x_centre))
                z1 = h1.positionAt(time1)[2]
                time2 = self._turnTime(h2, np.arctan2(xy2[1] - h2.y_centre, xy2[0] - h2.x_centre), z=z1)
                x, cost = self._refine(residual, jacobian, [time1, time2], "helix-helix refinement")
                if best is None or cost < best[1]:
                    best = (x, cost)
            return self._makeApproach(h1, h2, best[0][0], best[0][1])

    def _lineStartTimes(self, helix, line):
        """Generic times on the helix from which to refine the approach to a line."""
        u = line.direction
        uxy = np.hypot(u[0], u[1])
        if uxy <= TANGENT_TOLERANCE:
            # line parallel to z: it has the same distance from every turn
            dz = helix.reference_point[2] - line.point[2]
            return [self.nearestTime(helix, line.point + dz * u / u[2])]
        ux, uy = u[0] / uxy, u[1] / uxy
        s1, s2 = circleLineIntersections(helix.x_centre, helix.y_centre, helix.radius,
                                         line.point[0], line.point[1], ux, uy)
        if np.isnan(s1):
            # closest point of the trace to the helix axis
            s = -((line.point[0] - helix.x_centre) * ux + (line.point[1] - helix.y_centre) * uy)
            candidates = [s]
        else:
            candidates = sorted(set((float(s1), float(s2))))
        times = []
        for s in candidates:
            time = self.nearestTime(helix, line.pointAt(s / uxy))
            times.append(time)
            if helix.momentum[2] != 0:
                # neighboring turns may pass closer to an inclined line
                times.extend([time - helix.turn_period, time + helix.turn_period])
        return times

    def helixToLine(self, helix, line):
        """Find the closest approach of a helix to a straight line.
        Returns:
            (LineApproach): see `Helix.getClosestApproachToLine`.
        """
        with self.timed("closest approach of helix and line"):
            if helix.is_straight:
                track = helix.tangentLine()
                s1, s2 = lineLineClosestPoints(track.point, track.direction, line.point, line.direction)
                time = s1 / np.linalg.norm(helix.momentum)
                point = helix.positionAt(time)
                line_point = line.pointAt(line.projectionParameter(point))
                return LineApproach(float(np.linalg.norm(point - line_point)), point, line_point, float(time))

            u = line.direction
            projector = np.eye(3) - np.outer(u, u)
            def residual(x):
                return projector @ (helix.positionAt(x[0]) - line.point)
            def jacobian(x):
                return (projector @ helix.momentumAt(x[0])).reshape(3, 1)

            best = None
            for time in self._lineStartTimes(helix, line):
                x, cost = self._refine(residual, jacobian, [time], "helix-line refinement")
                if best is None or cost < best[1]:
                    best = (x, cost)
            time = float(best[0][0])
            point = helix.positionAt(time)
            line_point = line.pointAt(line.projectionParameter(point))
            return LineApproach(float(np.linalg.norm(point - line_point)), point, line_point, time)

DEFAULT_FINDER = ApproachFinder()
