"""Exceptions raised by helix construction and geometric queries.

Degenerate but meaningful configurations (zero curvature, a point on the
helix axis, coincident circle centres) are handled with fallback formulas in
the geometry code. The exceptions below are reserved for cases without a
sensible answer.

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

class HelixError(RuntimeError):
    """Base class of all errors raised by trackhelix."""

class UninitializedStateError(HelixError):
    """A helix was queried before one of its initializers was called."""

class DegenerateGeometryError(HelixError, ValueError):
    """The given geometry does not define a trajectory, plane or line
    (zero momentum, zero direction vector, infinite curvature radius, ...)."""

class NoIntersectionError(HelixError):
    """A plane, cylinder or line query has no real solution."""

class NonConvergenceError(HelixError):
    """An iterative solver hit its iteration cap without meeting its tolerance.
    Attributes:
        nfev (None or int): number of function evaluations spent, if known
    """
    def __init__(self, message, nfev=None):
        super(NonConvergenceError, self).__init__(message)
        self.nfev = nfev
