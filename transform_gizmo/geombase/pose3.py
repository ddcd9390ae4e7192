"""Pose3 - 3D pose with scale, the transform value used across the gizmo.

Composition formula:
    parent * child:
        new_lin = parent.lin + qrot(parent.ang, parent.scale * child.lin)
        new_ang = qmul(parent.ang, child.ang)
        new_scale = parent.scale * child.scale  # element-wise

Poses are treated as values: every operation returns a new Pose3.
"""

import numpy

from transform_gizmo.geombase.quat import (
    qmul,
    qrot,
    qinv,
    qnormalize,
    quat_close,
    quat_from_axis_angle,
    quat_from_basis,
    quat_from_matrix,
    quat_to_matrix,
)


def _vec(value, default) -> numpy.ndarray:
    if value is None:
        return numpy.array(default, dtype=float)
    return numpy.array(value, dtype=float)


class Pose3:
    """A 3D pose represented by rotation quaternion, translation vector and scale."""

    __slots__ = ('ang', 'lin', 'scale', '_rot_matrix', '_mat')

    def __init__(
        self,
        ang: numpy.ndarray = None,
        lin: numpy.ndarray = None,
        scale: numpy.ndarray = None
    ):
        self.ang = _vec(ang, [0.0, 0.0, 0.0, 1.0])
        self.lin = _vec(lin, [0.0, 0.0, 0.0])
        self.scale = _vec(scale, [1.0, 1.0, 1.0])
        self._rot_matrix = None
        self._mat = None

    def copy(self) -> 'Pose3':
        return Pose3(ang=self.ang, lin=self.lin, scale=self.scale)

    @staticmethod
    def identity() -> 'Pose3':
        return Pose3()

    def rotation_matrix(self) -> numpy.ndarray:
        """3x3 rotation matrix of the pose's orientation (scale not included)."""
        if self._rot_matrix is None:
            self._rot_matrix = quat_to_matrix(self.ang)
        return self._rot_matrix

    def as_matrix(self) -> numpy.ndarray:
        """4x4 TRS matrix: Translation * Rotation * Scale."""
        if self._mat is None:
            mat = numpy.eye(4)
            mat[:3, :3] = self.rotation_matrix() @ numpy.diag(self.scale)
            mat[:3, 3] = self.lin
            self._mat = mat
        return self._mat

    def inverse(self) -> 'Pose3':
        """Inverse pose. Exact for uniform scale; use matrices otherwise."""
        inv_scale = 1.0 / self.scale
        inv_ang = qinv(self.ang)
        inv_lin = qrot(inv_ang, -self.lin) * inv_scale
        return Pose3(ang=inv_ang, lin=inv_lin, scale=inv_scale)

    def __repr__(self):
        return f"Pose3(ang={self.ang}, lin={self.lin}, scale={self.scale})"

    def __eq__(self, other) -> bool:
        if not isinstance(other, Pose3):
            return NotImplemented
        return (
            numpy.array_equal(self.lin, other.lin)
            and numpy.array_equal(self.ang, other.ang)
            and numpy.array_equal(self.scale, other.scale)
        )

    __hash__ = None

    def approx_equal(self, other: 'Pose3', eps: float = 1e-6) -> bool:
        return (
            numpy.allclose(self.lin, other.lin, atol=eps)
            and numpy.allclose(self.scale, other.scale, atol=eps)
            and quat_close(self.ang, other.ang, eps)
        )

    def transform_point(self, point: numpy.ndarray) -> numpy.ndarray:
        return qrot(self.ang, self.scale * numpy.asarray(point, dtype=float)) + self.lin

    def transform_vector(self, vector: numpy.ndarray) -> numpy.ndarray:
        """Transform a vector (scale and rotation, no translation)."""
        return qrot(self.ang, self.scale * numpy.asarray(vector, dtype=float))

    def __mul__(self, other: 'Pose3') -> 'Pose3':
        if not isinstance(other, Pose3):
            raise TypeError("Can only multiply Pose3 with Pose3")
        q = qmul(self.ang, other.ang)
        t = self.lin + qrot(self.ang, self.scale * other.lin)
        s = self.scale * other.scale
        return Pose3(ang=q, lin=t, scale=s)

    def __matmul__(self, other: 'Pose3') -> 'Pose3':
        return self * other

    def with_rotation(self, ang: numpy.ndarray) -> 'Pose3':
        return Pose3(ang=ang, lin=self.lin, scale=self.scale)

    def with_translation(self, lin: numpy.ndarray) -> 'Pose3':
        return Pose3(ang=self.ang, lin=lin, scale=self.scale)

    def with_scale(self, scale) -> 'Pose3':
        if numpy.isscalar(scale):
            scale = numpy.full(3, float(scale))
        return Pose3(ang=self.ang, lin=self.lin, scale=scale)

    def rotate_around(self, point: numpy.ndarray, q: numpy.ndarray) -> 'Pose3':
        """Rigidly rotate this pose by q about a world-space pivot point."""
        point = numpy.asarray(point, dtype=float)
        lin = point + qrot(q, self.lin - point)
        ang = qnormalize(qmul(q, self.ang))
        return Pose3(ang=ang, lin=lin, scale=self.scale)

    # --- Factory methods ---

    @staticmethod
    def rotation(axis: numpy.ndarray, angle: float) -> 'Pose3':
        """Rotation pose around a given axis by a given angle."""
        return Pose3(ang=quat_from_axis_angle(axis, angle))

    @staticmethod
    def translation(x: float, y: float, z: float) -> 'Pose3':
        return Pose3(lin=numpy.array([x, y, z]))

    @staticmethod
    def rotateZ(angle: float) -> 'Pose3':
        return Pose3.rotation(numpy.array([0.0, 0.0, 1.0]), angle)

    @staticmethod
    def looking_at(
        eye: numpy.ndarray,
        target: numpy.ndarray,
        up: numpy.ndarray = None
    ) -> 'Pose3':
        """Pose at 'eye' looking towards 'target'.

        Uses Y-forward convention:
        - Local +X = right
        - Local +Y = forward (direction to target)
        - Local +Z = up
        """
        eye = numpy.asarray(eye, dtype=float)
        if up is None:
            up = numpy.array([0.0, 0.0, 1.0])

        forward = numpy.asarray(target, dtype=float) - eye
        forward = forward / numpy.linalg.norm(forward)

        if abs(numpy.dot(forward, up)) > 0.999:
            up = numpy.array([0.0, 1.0, 0.0])

        right = numpy.cross(forward, up)
        right = right / numpy.linalg.norm(right)
        up_corrected = numpy.cross(right, forward)

        return Pose3(ang=quat_from_basis(right, forward, up_corrected), lin=eye)

    @staticmethod
    def from_matrix(matrix: numpy.ndarray) -> 'Pose3':
        """Decompose a 4x4 or 3x4 TRS matrix into a Pose3."""
        matrix = numpy.asarray(matrix, dtype=float)
        if matrix.shape == (3, 4):
            mat = numpy.eye(4)
            mat[:3, :] = matrix
            matrix = mat

        lin = matrix[:3, 3].copy()

        scale = numpy.linalg.norm(matrix[:3, :3], axis=0)
        safe = numpy.where(scale > 1e-12, scale, 1.0)
        rot_mat = matrix[:3, :3] / safe

        return Pose3(ang=quat_from_matrix(rot_mat), lin=lin, scale=scale)

    # --- Axes ---

    def right(self) -> numpy.ndarray:
        return self.rotation_matrix()[:, 0].copy()

    def forward(self) -> numpy.ndarray:
        return self.rotation_matrix()[:, 1].copy()

    def up(self) -> numpy.ndarray:
        return self.rotation_matrix()[:, 2].copy()
