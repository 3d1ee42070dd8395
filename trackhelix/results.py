"""Small value types returned by the helix queries.

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

from collections import namedtuple

# point (array (3,)): position on the trajectory
# time (float): generic time from the reference point, i.e. path length / |p|
TrackPoint = namedtuple('TrackPoint', ['point', 'time'])

# distances of a helix to a space point:
#     rphi...distance in the R-Phi plane
#     z......distance along the z axis
#     full...3D distance of closest approach
PointDistance = namedtuple('PointDistance', ['rphi', 'z', 'full'])

# closest approach of two helices:
#     distance (float): 3D distance between the closest points
#     position (array (3,)): midpoint of the closest points
#     momentum (array (3,)): sum of the momenta of both tracks at their closest points
#     time, other_time (float): generic times of the closest points on each helix
HelixApproach = namedtuple('HelixApproach', ['distance', 'position', 'momentum', 'time', 'other_time'])

# closest approach of a helix to a straight line:
#     distance (float): 3D distance
#     point (array (3,)): closest point on the helix
#     line_point (array (3,)): closest point on the line
#     time (float): generic time of `point` on the helix
LineApproach = namedtuple('LineApproach', ['distance', 'point', 'line_point', 'time'])
