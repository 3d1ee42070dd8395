"""Euclidean geometry kernels for idealized helices, circles and lines.

The functions in this file are the low-level building blocks used by the
`Helix` class: intersections of circles with lines and with other circles in
the x,y-plane, rotation of points about a helix axis, the point of a helix
nearest to a space point, and the closest points of two straight lines.

The circle functions work element-wise on numpy arrays (or scalars) and
return np.nan where no solution exists, so that callers can decide how to
report missing intersections.

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
from scipy.optimize import brentq

from trackhelix.errors import NonConvergenceError

# relative tolerance for accepting near-tangent configurations as touching
TANGENT_TOLERANCE = 1e-9

def vector3(v):
    """Return a read-only float64 copy of the 3-vector v."""
    a = np.array(v, dtype=np.float64)
    assert a.shape == (3,)
    a.flags.writeable = False
    return a

def normalizePhase(phi):
    """Map phase angles to the range [0, 2*pi)."""
    phi = np.mod(phi, 2 * np.pi)
    # np.mod may round tiny negative angles up to exactly 2*pi
    return np.where(phi >= 2 * np.pi, phi - 2 * np.pi, phi)

def wrapPhase(dphi):
    """Map phase differences to the range [-pi, pi)."""
    return np.mod(dphi + np.pi, 2 * np.pi) - np.pi

def circleLineIntersections(hel_xm, hel_ym, hel_r, x0, y0, ux, uy, tangent_tol=TANGENT_TOLERANCE):
    """Intersect circles in the x,y-plane with straight lines.
    Args:
        hel_xm, hel_ym (array (N,) or scalar): circle centers
        hel_r (array (N,) or scalar): circle radii
        x0, y0 (array (N,) or scalar): a point on each line
        ux, uy (array (N,) or scalar): unit direction vector of each line
        tangent_tol (float): lines missing the circle by less than
            tangent_tol * hel_r**2 in the discriminant are treated as tangents.
    Returns:
        s1, s2 (array (N,) or scalar): line parameters of the intersection points
            (x0 + s*ux, y0 + s*uy), s1 <= s2, or np.nan if the line misses the circle.
    """
    dx = x0 - hel_xm
    dy = y0 - hel_ym
    # quadratic equation s^2 + 2*b*s + c = 0
    b = dx * ux + dy * uy
    c = np.square(dx) + np.square(dy) - np.square(hel_r)
    disc = np.square(b) - c
    is_tangent = (disc < 0) & (disc > -tangent_tol * np.square(hel_r))
    disc = np.where(is_tangent, 0.0, disc)
    has_intersection = (disc >= 0)
    sqrt_disc = np.sqrt(np.where(has_intersection, disc, 0.0))
    s1 = np.where(has_intersection, -b - sqrt_disc, np.nan)
    s2 = np.where(has_intersection, -b + sqrt_disc, np.nan)
    return (s1, s2)

def circleCircleIntersections(xm1, ym1, r1, xm2, ym2, r2, tangent_tol=TANGENT_TOLERANCE):
    """Intersect pairs of circles in the x,y-plane.
    The intersection points are constructed on the radical line of the two
    circles, so they lie on the first circle up to rounding.
    Args:
        xm1, ym1, r1 (array (N,) or scalar): centers and radii of the first circles
        xm2, ym2, r2 (array (N,) or scalar): centers and radii of the second circles
        tangent_tol (float): circles missing each other by less than
            tangent_tol * max(r1, r2)**2 (in squared distance) are treated as touching.
    Returns:
        x1, y1, x2, y2 (array (N,) or scalar): the two intersection points,
            or np.nan for circles which do not intersect or are concentric.
            For touching circles both points coincide.
    """
    dx = xm2 - xm1
    dy = ym2 - ym1
    d = np.sqrt(np.square(dx) + np.square(dy))
    concentric = (d == 0)
    d_safe = np.where(concentric, 1.0, d) # dummy value to avoid dividing by zero
    ex = dx / d_safe
    ey = dy / d_safe
    # distance of the radical line from the first center, and half chord length squared
    a = (np.square(r1) - np.square(r2) + np.square(d)) / (2 * d_safe)
    hsqr = np.square(r1) - np.square(a)
    is_tangent = (hsqr < 0) & (hsqr > -tangent_tol * np.square(np.maximum(r1, r2)))
    hsqr = np.where(is_tangent, 0.0, hsqr)
    has_intersection = ~concentric & (hsqr >= 0)
    h = np.sqrt(np.where(has_intersection, hsqr, 0.0))
    xr = xm1 + a * ex
    yr = ym1 + a * ey
    x1 = np.where(has_intersection, xr - h * ey, np.nan)
    y1 = np.where(has_intersection, yr + h * ex, np.nan)
    x2 = np.where(has_intersection, xr + h * ey, np.nan)
    y2 = np.where(has_intersection, yr - h * ex, np.nan)
    return (x1, y1, x2, y2)

def helixRotate(x0, y0, hel_xm, hel_ym, dphi):
    """Rotate points in the x,y-plane about the helix axis.
    Args:
        x0, y0 (array (N,) or scalar): coordinates of the points
        hel_xm, hel_ym (array (N,) or scalar): center coordinates of helices in the x,y-plane
        dphi (array (N,) or scalar): phase difference to rotate by
            (positive values rotate counter-clockwise)
    Returns:
        xf, yf (array (N,) or scalar): rotated coordinates
    """
    dx = x0 - hel_xm
    dy = y0 - hel_ym
    cos_dphi = np.cos(dphi)
    sin_dphi = np.sin(dphi)
    xf = hel_xm + cos_dphi * dx - sin_dphi * dy
    yf = hel_ym + sin_dphi * dx + cos_dphi * dy
    return (xf, yf)

def helixNearestPhase(hel_r, hel_h, rho, alpha, dz, xtol=1e-12, maxiter=100):
    """Find the phase advance along a helix to its point nearest to a space point.
    The helix is described relative to its reference point: advancing the
    phase by t (in the direction of motion) moves the helix point to the
    azimuth phi_ref + sign * t about the helix axis and changes its height by
    hel_h * t.
    Args:
        hel_r (float): helix radius in the x,y-plane (> 0)
        hel_h (float): height gained per radian of phase advance,
            i.e. hel_r * tan(lambda)
        rho (float): distance of the space point from the helix axis
        alpha (float): phase advance in [0, 2*pi) to the azimuth of the space point
        dz (float): height of the space point above the reference point
        xtol (float): absolute tolerance of the phase root finder
        maxiter (int): iteration cap of the phase root finder
    Returns:
        t (float): phase advance to the nearest point (may be negative)
    """
    # The squared distance as a function of the phase advance t is
    #     dist2(t) = hel_r^2 + rho^2 - 2*hel_r*rho*cos(t - alpha) + (hel_h*t - dz)^2
    # and half of its derivative
    #     f(t) = hel_r*rho*sin(t - alpha) + hel_h*(hel_h*t - dz)
    # is strictly increasing on the windows |t - t_k| < u0 around the phases
    # t_k = alpha + 2*k*np.pi at which the helix passes the azimuth of the point,
    # where cos(u0) = -hel_h^2 / (hel_r*rho). Every local minimum lies in one of
    # these windows, and dist2(t) >= (hel_r - rho)^2 + (hel_h*t - dz)^2 confines
    # the global minimum to the three windows nearest the height of the point.
    if rho <= TANGENT_TOLERANCE * hel_r:
        # point on the axis: all phases are equally far away in the x,y-plane
        return dz / hel_h if hel_h != 0 else 0.0
    if hel_h == 0:
        # no motion along z: the nearest turn to the reference phase wins
        return alpha if alpha <= np.pi else alpha - 2 * np.pi
    rr = hel_r * rho
    hh = hel_h * hel_h
    def dist2(t):
        return hel_r**2 + rho**2 - 2 * rr * np.cos(t - alpha) + (hel_h * t - dz)**2
    def half_deriv(t):
        return rr * np.sin(t - alpha) + hel_h * (hel_h * t - dz)
    u0 = np.arccos(max(-1.0, -hh / rr))
    k0 = np.round((dz / hel_h - alpha) / (2 * np.pi))
    best_t = alpha + 2 * np.pi * k0
    best_dist2 = dist2(best_t)
    for k in (k0 - 1, k0, k0 + 1):
        t_k = alpha + 2 * np.pi * k
        lo, hi = t_k - u0, t_k + u0
        f_lo, f_hi = half_deriv(lo), half_deriv(hi)
        if f_lo > 0 or f_hi < 0:
            continue # dist2 is monotonic in this window
        try:
            t = brentq(half_deriv, lo, hi, xtol=xtol, maxiter=maxiter)
        except RuntimeError as err:
            raise NonConvergenceError("nearest helix phase: %s" % err) from err
        d2 = dist2(t)
        if d2 < best_dist2:
            best_t, best_dist2 = t, d2
    return float(best_t)

def lineLineClosestPoints(p1, u1, p2, u2, parallel_tol=1e-12):
    """Find the points of closest approach of two straight lines.
    Args:
        p1, u1 (array (3,)): point on and unit direction of the first line
        p2, u2 (array (3,)): point on and unit direction of the second line
        parallel_tol (float): lines with 1 - (u1.u2)^2 below this value are treated
            as parallel. For parallel lines, p1 is used as the closest point on
            the first line.
    Returns:
        s1, s2 (float): line parameters of the closest points p1 + s1*u1, p2 + s2*u2
    """
    w = p1 - p2
    b = np.dot(u1, u2)
    d = np.dot(u1, w)
    e = np.dot(u2, w)
    denom = 1.0 - b * b
    if denom < parallel_tol:
        return (0.0, float(e))
    s1 = (b * e - d) / denom
    s2 = (e - b * d) / denom
    return (float(s1), float(s2))
