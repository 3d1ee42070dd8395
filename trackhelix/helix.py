"""Helical trajectories of charged particles in a uniform magnetic field.

A `Helix` describes the trajectory of a particle with a given momentum,
position and charge in a magnetic field (0, 0, B). It can be initialized in
three equivalent ways:

    1) initializeVP: position of a reference point, momentum at that point,
       charge and field,
    2) initializeBZ: circle center and radius in the x,y-plane and the
       phase slope bz of the parameterization
           x = xCentre + radius * cos(bz * z + phi0)
           y = yCentre + radius * sin(bz * z + phi0),
    3) initializeCanonical: the canonical (LEP-wise) track parameters
       phi0, d0, z0, omega and tan(lambda).

Calling a second initializer replaces the whole state of the helix (last
initializer wins).

Conventions:
    - kappa = sign(charge) * sign(B). Tracks with kappa == +1 rotate clockwise
      in the x,y-plane. The circle center lies at azimuth phiMom - kappa*pi/2
      seen from the track, and omega = kappa / radius.
    - Positions along the track are parameterized by a "generic time"
      tau = (path length) / |p|, i.e. dP/dtau = p. Hence z changes by pz*tau and
      the phase about the helix axis by -kappa * pxy * tau / radius.
    - Tracks with vanishing transverse momentum, charge or field are straight
      lines through the reference point along the momentum. They report
      radius == 0 and omega == 0, and all queries fall back to straight-line
      formulas.

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

from trackhelix.approach import DEFAULT_FINDER
from trackhelix.errors import UninitializedStateError, DegenerateGeometryError, NoIntersectionError
from trackhelix.geometry import (TANGENT_TOLERANCE, vector3, normalizePhase, wrapPhase,
                                 circleLineIntersections, circleCircleIntersections, helixRotate)
from trackhelix.line import Line
from trackhelix.results import TrackPoint, PointDistance

# curvature constant: radius [mm] = pxy [GeV] / (FCT * |B| [T])
FCT = 2.99792458e-4
TWO_PI = 2 * np.pi
HALF_PI = 0.5 * np.pi

# transverse momenta below this fraction of |p| count as zero
PXY_TOLERANCE = 1e-12
# tracks closer than this [mm] to a plane or cylinder lie on it
ON_SURFACE_TOLERANCE = 1e-9

def _sign(x):
    return 1.0 if x > 0 else (-1.0 if x < 0 else 0.0)

def _stateProperty(name, doc):
    def getter(self):
        self._checkInitialized()
        return getattr(self, name)
    return property(getter, doc=doc)

class Helix:
    """Helical trajectory of a charged particle in a uniform magnetic field
    along the z axis. See the module documentation for the conventions used.
    """
    def __init__(self):
        """Create an empty helix. Call one of the initializers before use."""
        self._initialized = False
        self._xStart = None
        self._xEnd = None

    @classmethod
    def from_vp(cls, position, momentum, charge, b_field):
        helix = cls()
        helix.initializeVP(position, momentum, charge, b_field)
        return helix

    @classmethod
    def from_bz(cls, x_centre, y_centre, radius, bz, phi0, b_field, sign_pz, z_begin):
        helix = cls()
        helix.initializeBZ(x_centre, y_centre, radius, bz, phi0, b_field, sign_pz, z_begin)
        return helix

    @classmethod
    def from_canonical(cls, phi0, d0, z0, omega, tan_lambda, b_field):
        helix = cls()
        helix.initializeCanonical(phi0, d0, z0, omega, tan_lambda, b_field)
        return helix

    def initializeVP(self, position, momentum, charge, b_field):
        """Initialize the helix from the state of the particle at a reference point.
        Args:
            position (array-like (3,)): reference point [mm]
            momentum (array-like (3,)): momentum at the reference point [GeV]
            charge (float): particle charge; only its sign matters
            b_field (float): magnetic field along z [T]
        Raises:
            DegenerateGeometryError: if the momentum is zero.
        """
        self._setState(vector3(position), vector3(momentum), float(charge), float(b_field))

    def initializeBZ(self, x_centre, y_centre, radius, bz, phi0, b_field, sign_pz, z_begin):
        """Initialize the helix from the parameterization
            x = x_centre + radius * cos(bz * z + phi0)
            y = y_centre + radius * sin(bz * z + phi0)
        Args:
            x_centre, y_centre (float): circle center in the x,y-plane [mm]
            radius (float): circle radius [mm]
            bz (float): phase slope d(phase)/dz [1/mm]
            phi0 (float): phase at z == 0
            b_field (float): magnetic field along z [T]
            sign_pz (float): sign of the z component of the momentum
            z_begin (float): z coordinate of the reference point; it selects
                the turn of the helix the reference point is placed on.
        Raises:
            DegenerateGeometryError: for non-positive radius, zero bz, zero field
                or zero sign_pz, since the momentum is undefined in these cases.
        """
        if not radius > 0:
            raise DegenerateGeometryError("radius must be positive, got %r" % radius)
        if bz == 0 or b_field == 0 or sign_pz == 0:
            raise DegenerateGeometryError("bz, b_field and sign_pz must be non-zero")
        kappa = -_sign(bz) * _sign(sign_pz)
        pxy = FCT * abs(b_field) * radius
        pz = -kappa * pxy / (radius * bz)
        phi = bz * z_begin + phi0
        phi_mom = phi - kappa * HALF_PI
        position = (x_centre + radius * np.cos(phi), y_centre + radius * np.sin(phi), z_begin)
        momentum = (pxy * np.cos(phi_mom), pxy * np.sin(phi_mom), pz)
        self._setState(vector3(position), vector3(momentum), kappa * _sign(b_field), float(b_field))
        # keep the given circle exactly
        self._xCentre = float(x_centre)
        self._yCentre = float(y_centre)
        self._radius = float(radius)
        self._omega = kappa / self._radius
        self._bZ = float(bz)
        self._phiZ = float(phi0)

    def initializeCanonical(self, phi0, d0, z0, omega, tan_lambda, b_field):
        """Initialize the helix from canonical track parameters. The reference
        point is set to the point of closest approach (PCA) to the z axis.
        Args:
            phi0 (float): azimuth of the momentum at the PCA
            d0 (float): signed distance of the PCA from the z axis [mm]
            z0 (float): z coordinate of the PCA [mm]
            omega (float): signed curvature [1/mm]
            tan_lambda (float): tangent of the dip angle, pz / pxy
            b_field (float): magnetic field along z [T]
        Raises:
            DegenerateGeometryError: if omega or b_field is zero.
        """
        if omega == 0:
            raise DegenerateGeometryError("omega == 0 describes a track of infinite momentum")
        if b_field == 0:
            raise DegenerateGeometryError("the momentum is undefined for zero magnetic field")
        radius = 1.0 / abs(omega)
        pxy = FCT * abs(b_field) * radius
        position = (-d0 * np.sin(phi0), d0 * np.cos(phi0), z0)
        momentum = (pxy * np.cos(phi0), pxy * np.sin(phi0), tan_lambda * pxy)
        self._setState(vector3(position), vector3(momentum), _sign(omega) * _sign(b_field), float(b_field))
        # keep the given parameters exactly
        self._phi0 = float(normalizePhase(phi0))
        self._d0 = float(d0)
        self._z0 = float(z0)
        self._omega = float(omega)
        self._tanLambda = float(tan_lambda)

    def _setState(self, position, momentum, charge, b_field):
        """Derive all parameters from the particle state at the reference point."""
        px, py, pz = momentum
        x, y, z = position
        p = np.linalg.norm(momentum)
        if not p > 0:
            raise DegenerateGeometryError("zero momentum does not define a trajectory")
        pxy = float(np.hypot(px, py))
        if pxy <= PXY_TOLERANCE * p:
            pxy = 0.0
        kappa = _sign(charge) * _sign(b_field)
        self._referencePoint = position
        self._momentum = momentum
        self._charge = charge
        self._bField = b_field
        self._kappa = kappa
        self._pxy = pxy
        self._tanLambda = float(pz / pxy) if pxy > 0 else float(np.copysign(np.inf, pz))
        self._phiMomRefPoint = float(np.arctan2(py, px))
        self._straight = (pxy == 0 or kappa == 0)
        if self._straight:
            self._radius = 0.0
            self._omega = 0.0
            self._xCentre, self._yCentre = float(x), float(y)
            if pxy > 0:
                # PCA of the x,y-projection of the line
                ux, uy = px / pxy, py / pxy
                s_pca = -(x * ux + y * uy)
                xAtPCA, yAtPCA = x + s_pca * ux, y + s_pca * uy
                phi0 = self._phiMomRefPoint
                self._z0 = float(z + self._tanLambda * s_pca)
            else:
                # parallel to z: choose phi0 such that (-d0 sin(phi0), d0 cos(phi0)) == (x, y)
                xAtPCA, yAtPCA = x, y
                phi0 = np.arctan2(y, x) - HALF_PI
                self._z0 = float(z)
            # phases about the (non-existing) helix axis are replaced by the momentum azimuth
            self._phiRefPoint = self._phiAtPCA = self._phiMomRefPoint
            self._bZ = 0.0
            self._phiZ = self._phiMomRefPoint
        else:
            radius = pxy / (FCT * abs(b_field))
            xc = x + radius * np.cos(self._phiMomRefPoint - kappa * HALF_PI)
            yc = y + radius * np.sin(self._phiMomRefPoint - kappa * HALF_PI)
            phiRefPoint = np.arctan2(y - yc, x - xc)
            if np.hypot(xc, yc) <= TANGENT_TOLERANCE * radius:
                # circle centered on the z axis: every point is a PCA
                phiAtPCA = phiRefPoint
            else:
                phiAtPCA = np.arctan2(-yc, -xc)
            xAtPCA = xc + radius * np.cos(phiAtPCA)
            yAtPCA = yc + radius * np.sin(phiAtPCA)
            phi0 = phiAtPCA - kappa * HALF_PI
            # z0 is taken on the turn nearest to the reference point
            self._z0 = float(z + radius * self._tanLambda * kappa * wrapPhase(phiRefPoint - phiAtPCA))
            self._radius = float(radius)
            self._omega = kappa / radius
            self._xCentre, self._yCentre = float(xc), float(yc)
            self._phiRefPoint = float(phiRefPoint)
            self._phiAtPCA = float(phiAtPCA)
            if pz != 0:
                self._bZ = -kappa * FCT * abs(b_field) / pz
                self._phiZ = float(phiRefPoint - self._bZ * z)
            else:
                self._bZ = float(np.copysign(np.inf, -kappa))
                self._phiZ = float(phiRefPoint)
        self._phi0 = float(normalizePhase(phi0))
        self._xAtPCA, self._yAtPCA = float(xAtPCA), float(yAtPCA)
        self._d0 = float(-xAtPCA * np.sin(phi0) + yAtPCA * np.cos(phi0))
        self._pxAtPCA = pxy * np.cos(phi0)
        self._pyAtPCA = pxy * np.sin(phi0)
        # edges belong to the previous trajectory
        self._xStart = None
        self._xEnd = None
        self._initialized = True

    def _checkInitialized(self):
        if not self._initialized:
            raise UninitializedStateError("helix used before initialization")

    momentum = _stateProperty('_momentum', "Momentum at the reference point (read-only array (3,)).")
    reference_point = _stateProperty('_referencePoint', "Reference point (read-only array (3,)).")
    phi0 = _stateProperty('_phi0', "Azimuth of the momentum at the PCA, in [0, 2*pi).")
    d0 = _stateProperty('_d0', "Signed distance of closest approach to the z axis.")
    z0 = _stateProperty('_z0', "z coordinate of the PCA.")
    omega = _stateProperty('_omega', "Signed curvature kappa / radius.")
    tan_lambda = _stateProperty('_tanLambda', "Tangent of the dip angle, pz / pxy.")
    pxy = _stateProperty('_pxy', "Transverse momentum.")
    charge = _stateProperty('_charge', "Particle charge.")
    b_field = _stateProperty('_bField', "Magnetic field along z.")
    radius = _stateProperty('_radius', "Radius of the circle in the x,y-plane (0 for straight tracks).")
    x_centre = _stateProperty('_xCentre', "x coordinate of the circle center.")
    y_centre = _stateProperty('_yCentre', "y coordinate of the circle center.")
    bz = _stateProperty('_bZ', "Phase slope d(phase)/dz of the second parameterization.")
    phi_z = _stateProperty('_phiZ', "Phase at z == 0 of the second parameterization.")
    phi_ref_point = _stateProperty('_phiRefPoint', "Azimuth of the reference point about the helix axis.")
    phi_at_pca = _stateProperty('_phiAtPCA', "Azimuth of the PCA about the helix axis.")
    phi_mom_ref_point = _stateProperty('_phiMomRefPoint', "Azimuth of the momentum at the reference point.")
    is_straight = _stateProperty('_straight', "True if the track is a straight line.")

    @property
    def pca(self):
        """(x, y) of the point of closest approach to the z axis."""
        self._checkInitialized()
        return (self._xAtPCA, self._yAtPCA)

    @property
    def momentum_at_pca(self):
        """(px, py) at the point of closest approach to the z axis."""
        self._checkInitialized()
        return (self._pxAtPCA, self._pyAtPCA)

    @property
    def rotation_sign(self):
        """+1 if the phase about the helix axis grows along the track, -1 if it
        decreases, 0 for straight tracks."""
        self._checkInitialized()
        return -self._kappa if not self._straight else 0.0

    @property
    def turn_period(self):
        """Generic time for one full turn (np.inf for straight tracks)."""
        self._checkInitialized()
        if self._straight:
            return np.inf
        return TWO_PI * self._radius / self._pxy

    def tangentLine(self):
        """Return the line tangent to the trajectory at the reference point.
        For straight tracks this is the trajectory itself."""
        self._checkInitialized()
        return Line(self._referencePoint, self._momentum)

    def _refPoint(self, ref):
        self._checkInitialized()
        if ref is None:
            return self._referencePoint
        return vector3(ref)

    def _phaseOf(self, x, y):
        """Azimuth of (x, y) about the helix axis; the reference point's azimuth for points on the axis."""
        dx = x - self._xCentre
        dy = y - self._yCentre
        if np.hypot(dx, dy) <= TANGENT_TOLERANCE * self._radius:
            return self._phiRefPoint
        return float(np.arctan2(dy, dx))

    def _forwardTime(self, phi, phi_start):
        """Generic time of the first passage through azimuth phi, starting at phi_start."""
        dphi = normalizePhase(-self._kappa * (phi - phi_start))
        return float(dphi * self._radius / self._pxy)

    def _momentumAtPhase(self, phi):
        phi_mom = phi - self._kappa * HALF_PI
        return np.array([self._pxy * np.cos(phi_mom), self._pxy * np.sin(phi_mom), self._momentum[2]])

    def _move(self, ref, time):
        """Move the point ref (projected onto the trajectory) along the track by the given generic time."""
        if self._straight:
            return ref + time * self._momentum
        phi = self._phaseOf(ref[0], ref[1])
        x_on = self._xCentre + self._radius * np.cos(phi)
        y_on = self._yCentre + self._radius * np.sin(phi)
        dphi = -self._kappa * self._pxy * time / self._radius
        x, y = helixRotate(x_on, y_on, self._xCentre, self._yCentre, dphi)
        return np.array([x, y, ref[2] + time * self._momentum[2]])

    def positionAt(self, time):
        """Return the position at the given generic time from the reference point."""
        self._checkInitialized()
        return self._move(self._referencePoint, time)

    def momentumAt(self, time):
        """Return the momentum at the given generic time from the reference point."""
        self._checkInitialized()
        if self._straight:
            return self._momentum.copy()
        return self._momentumAtPhase(self._phiRefPoint - self._kappa * self._pxy * time / self._radius)

    def getTimeToXY(self, x, y, ref=None):
        """Return the generic time from ref (default: the reference point) until the
        track first passes the azimuth of (x, y) about the helix axis.
        For straight tracks, return the time of the point whose x,y-projection
        is nearest to (x, y), which may be negative (0 for tracks parallel to z).
        """
        ref = self._refPoint(ref)
        if self._straight:
            if self._pxy == 0:
                return 0.0
            px, py = self._momentum[0], self._momentum[1]
            return float(((x - ref[0]) * px + (y - ref[1]) * py) / self._pxy**2)
        return self._forwardTime(self._phaseOf(x, y), self._phaseOf(ref[0], ref[1]))

    def getPointInXY(self, x0, y0, ax, ay, ref=None):
        """Intersect the helix with a plane parallel to the z axis.
        Args:
            x0, y0 (float): a point of the plane in the x,y-plane
            ax, ay (float): normal vector of the plane
            ref (None or array-like (3,)): point on the helix to start from
                (default: the reference point)
        Returns:
            (TrackPoint): the first intersection reached moving forward from ref,
                and its generic time from ref. Straight tracks may return
                negative times for intersections behind ref.
        Raises:
            DegenerateGeometryError: if the normal vector is zero.
            NoIntersectionError: if the trajectory does not cross the plane.
        """
        ref = self._refPoint(ref)
        norm = np.hypot(ax, ay)
        if not norm > 0:
            raise DegenerateGeometryError("plane normal must be non-zero in the x,y-plane")
        nx, ny = ax / norm, ay / norm
        if self._straight:
            dist = nx * (x0 - ref[0]) + ny * (y0 - ref[1])
            speed = nx * self._momentum[0] + ny * self._momentum[1]
            if speed == 0:
                if abs(dist) <= ON_SURFACE_TOLERANCE:
                    return TrackPoint(ref.copy(), 0.0)
                raise NoIntersectionError("straight track runs parallel to the plane")
            time = float(dist / speed)
            return TrackPoint(ref + time * self._momentum, time)
        # trace of the plane in the x,y-plane: (x0, y0) + s * (-ny, nx)
        s1, s2 = circleLineIntersections(self._xCentre, self._yCentre, self._radius, x0, y0, -ny, nx)
        if np.isnan(s1):
            raise NoIntersectionError("helix does not reach the plane")
        phi_ref = self._phaseOf(ref[0], ref[1])
        crossings = []
        for s in (s1, s2):
            x, y = x0 - s * ny, y0 + s * nx
            time = self._forwardTime(self._phaseOf(x, y), phi_ref)
            crossings.append(TrackPoint(np.array([x, y, ref[2] + time * self._momentum[2]]), time))
        return min(crossings, key=lambda crossing: crossing.time)

    def getPointInZ(self, z, ref=None):
        """Intersect the helix with the plane perpendicular to z at height z.
        Args:
            z (float): height of the plane
            ref (None or array-like (3,)): point on the helix to start from
                (default: the reference point)
        Returns:
            (TrackPoint): intersection point and its (signed) generic time from ref
        Raises:
            NoIntersectionError: if pz == 0 and ref does not lie in the plane.
        """
        ref = self._refPoint(ref)
        pz = self._momentum[2]
        if pz == 0:
            if abs(z - ref[2]) <= ON_SURFACE_TOLERANCE:
                return TrackPoint(self._move(ref, 0.0), 0.0)
            raise NoIntersectionError("track with pz == 0 never reaches z = %g" % z)
        time = float((z - ref[2]) / pz)
        point = self._move(ref, time)
        point[2] = z
        return TrackPoint(point, time)

    def getPointsOnCircle(self, radius, ref=None):
        """Intersect the helix with a cylinder about the z axis.
        Args:
            radius (float): cylinder radius
            ref (None or array-like (3,)): point on the helix to start from
                (default: the reference point)
        Returns:
            (list of TrackPoint): the distinct crossings of the cylinder within one
                turn, in order of generic time from ref. For straight tracks,
                forward crossings come first, followed by crossings behind ref.
        Raises:
            DegenerateGeometryError: if radius is negative.
            NoIntersectionError: if the trajectory does not reach the cylinder.
        """
        ref = self._refPoint(ref)
        if radius < 0:
            raise DegenerateGeometryError("cylinder radius must not be negative")
        if self._straight:
            return self._straightPointsOnCircle(radius, ref)
        if np.hypot(self._xCentre, self._yCentre) <= TANGENT_TOLERANCE * self._radius:
            # helix axis coincides with the cylinder axis
            if abs(self._radius - radius) <= TANGENT_TOLERANCE * max(radius, self._radius):
                return [TrackPoint(self._move(ref, 0.0), 0.0)]
            raise NoIntersectionError("helix is coaxial with the cylinder and has a different radius")
        x1, y1, x2, y2 = circleCircleIntersections(0.0, 0.0, radius,
                                                   self._xCentre, self._yCentre, self._radius)
        if np.isnan(x1):
            raise NoIntersectionError("helix does not reach the cylinder of radius %g" % radius)
        phi_ref = self._phaseOf(ref[0], ref[1])
        crossings = []
        for x, y in ((x1, y1), (x2, y2)):
            time = self._forwardTime(self._phaseOf(x, y), phi_ref)
            crossings.append(TrackPoint(np.array([x, y, ref[2] + time * self._momentum[2]]), time))
        if x1 == x2 and y1 == y2:
            crossings = crossings[:1] # tangent
        return sorted(crossings, key=lambda crossing: crossing.time)

    def _straightPointsOnCircle(self, radius, ref):
        if self._pxy == 0:
            if abs(np.hypot(ref[0], ref[1]) - radius) <= ON_SURFACE_TOLERANCE:
                return [TrackPoint(ref.copy(), 0.0)]
            raise NoIntersectionError("track parallel to z does not lie on the cylinder")
        ux, uy = self._momentum[0] / self._pxy, self._momentum[1] / self._pxy
        s1, s2 = circleLineIntersections(0.0, 0.0, radius, ref[0], ref[1], ux, uy)
        if np.isnan(s1):
            raise NoIntersectionError("straight track does not reach the cylinder of radius %g" % radius)
        times = sorted(set((float(s1 / self._pxy), float(s2 / self._pxy))),
                       key=lambda time: (time < 0, abs(time)))
        return [TrackPoint(ref + time * self._momentum, time) for time in times]

    def getPointOnCircle(self, radius, ref=None):
        """Return the first crossing of the cylinder of the given radius about the
        z axis reached from ref, as a TrackPoint. See `getPointsOnCircle`."""
        return self.getPointsOnCircle(radius, ref=ref)[0]

    def getDistanceToPoint(self, point, finder=None):
        """Calculate distances of the helix to a space point.
        Args:
            point (array-like (3,)): the space point
            finder (None or ApproachFinder): solver settings for the 3D distance
        Returns:
            (PointDistance): with
                rphi...distance of the point from the circle in the x,y-plane
                z......z distance to the helix point with the same azimuth on the
                       turn nearest in z (0 if the point lies on the helix axis)
                full...3D distance of closest approach
        """
        self._checkInitialized()
        point = vector3(point)
        finder = finder if finder is not None else DEFAULT_FINDER
        ref = self._referencePoint
        if self._straight:
            full = self.tangentLine().getDistanceToPoint(point)
            if self._pxy == 0:
                return PointDistance(float(np.hypot(point[0] - ref[0], point[1] - ref[1])), 0.0, full)
            ux, uy = self._momentum[0] / self._pxy, self._momentum[1] / self._pxy
            dx, dy = point[0] - ref[0], point[1] - ref[1]
            rphi = abs(dx * uy - dy * ux)
            dz = abs(ref[2] + self._tanLambda * (dx * ux + dy * uy) - point[2])
            return PointDistance(float(rphi), float(dz), full)
        rho = np.hypot(point[0] - self._xCentre, point[1] - self._yCentre)
        rphi = abs(rho - self._radius)
        hel_h = self._radius * self._tanLambda
        dz = point[2] - ref[2]
        if rho <= TANGENT_TOLERANCE * self._radius:
            zdist = 0.0 if hel_h != 0 else abs(dz)
        else:
            alpha = normalizePhase(-self._kappa * (self._phaseOf(point[0], point[1]) - self._phiRefPoint))
            turn = np.round((dz / hel_h - alpha) / TWO_PI) if hel_h != 0 else 0.0
            zdist = abs(hel_h * (alpha + TWO_PI * turn) - dz)
        time = finder.nearestTime(self, point)
        full = np.linalg.norm(self.positionAt(time) - point)
        return PointDistance(float(rphi), float(zdist), float(full))

    def getNearestPoint(self, point, finder=None):
        """Return the point of the helix nearest to a space point, as a TrackPoint
        with the generic time from the reference point."""
        self._checkInitialized()
        finder = finder if finder is not None else DEFAULT_FINDER
        time = finder.nearestTime(self, vector3(point))
        return TrackPoint(self.positionAt(time), time)

    def getDistanceToHelix(self, other, finder=None):
        """Find the closest approach of this helix to another one.
        Args:
            other (Helix): the other trajectory
            finder (None or ApproachFinder): solver settings
        Returns:
            (HelixApproach): distance, midpoint of the closest points (vertex
                estimate), momentum sum at the closest points, and the
                generic times of the closest points on both helices.
        Raises:
            NonConvergenceError: if the refinement exceeds its evaluation cap.
        """
        self._checkInitialized()
        other._checkInitialized()
        finder = finder if finder is not None else DEFAULT_FINDER
        return finder.helixToHelix(self, other)

    def getClosestApproachToLine(self, line, finder=None):
        """Find the closest approach of this helix to a straight line, as a LineApproach.
        Raises:
            NonConvergenceError: if the refinement exceeds its evaluation cap.
        """
        self._checkInitialized()
        finder = finder if finder is not None else DEFAULT_FINDER
        return finder.helixToLine(self, line)

    def getDistanceToLine(self, line, finder=None):
        """Return the 3D distance of closest approach of this helix to a straight line."""
        return self.getClosestApproachToLine(line, finder=finder).distance

    def getExtrapolatedMomentum(self, point):
        """Return the momentum the particle has when passing the azimuth of the
        given point about the helix axis. pz and pxy do not change.
        Straight tracks and points on the helix axis give the reference momentum.
        """
        self._checkInitialized()
        point = vector3(point)
        if self._straight:
            return self._momentum.copy()
        if np.hypot(point[0] - self._xCentre, point[1] - self._yCentre) <= TANGENT_TOLERANCE * self._radius:
            return self._momentum.copy()
        return self._momentumAtPhase(self._phaseOf(point[0], point[1]))

    def setHelixEdges(self, x_start, x_end):
        """Store the start and end points of the valid track segment."""
        self._checkInitialized()
        self._xStart = vector3(x_start)
        self._xEnd = vector3(x_end)

    def getStartingPoint(self):
        """Return the start point of the track segment, or None if not set."""
        return self._xStart

    def getEndPoint(self):
        """Return the end point of the track segment, or None if not set."""
        return self._xEnd

    def __repr__(self):
        if not self._initialized:
            return "Helix(<uninitialized>)"
        return ("Helix(phi0=%.6g, d0=%.6g, z0=%.6g, omega=%.6g, tan_lambda=%.6g, b_field=%.6g)"
                % (self._phi0, self._d0, self._z0, self._omega, self._tanLambda, self._bField))
