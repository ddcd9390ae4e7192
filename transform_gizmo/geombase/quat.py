"""Quaternion helpers. Quaternions are numpy arrays in (x, y, z, w) order."""

import math

import numpy
from scipy.spatial.transform import Rotation


IDENTITY_QUAT = numpy.array([0.0, 0.0, 0.0, 1.0])


def qmul(q1: numpy.ndarray, q2: numpy.ndarray) -> numpy.ndarray:
    """Multiply two quaternions (x, y, z, w)."""
    x1, y1, z1, w1 = q1
    x2, y2, z2, w2 = q2
    return numpy.array([
        w1 * x2 + x1 * w2 + y1 * z2 - z1 * y2,
        w1 * y2 - x1 * z2 + y1 * w2 + z1 * x2,
        w1 * z2 + x1 * y2 - y1 * x2 + z1 * w2,
        w1 * w2 - x1 * x2 - y1 * y2 - z1 * z2,
    ])


def qrot(q: numpy.ndarray, v: numpy.ndarray) -> numpy.ndarray:
    """Rotate vector by quaternion (x, y, z, w)."""
    qv = numpy.asarray(q[:3], dtype=float)
    qw = float(q[3])
    v = numpy.asarray(v, dtype=float)
    t = 2.0 * numpy.cross(qv, v)
    return v + qw * t + numpy.cross(qv, t)


def qinv(q: numpy.ndarray) -> numpy.ndarray:
    """Inverse of a unit quaternion."""
    x, y, z, w = q
    return numpy.array([-x, -y, -z, w])


def qnormalize(q: numpy.ndarray) -> numpy.ndarray:
    norm = numpy.linalg.norm(q)
    if norm == 0.0:
        return IDENTITY_QUAT.copy()
    return numpy.asarray(q, dtype=float) / norm


def quat_from_axis_angle(axis: numpy.ndarray, angle: float) -> numpy.ndarray:
    """Rotation of `angle` radians about `axis` (normalized here)."""
    axis = numpy.asarray(axis, dtype=float)
    n = numpy.linalg.norm(axis)
    if n == 0.0:
        return IDENTITY_QUAT.copy()
    axis = axis / n
    s = math.sin(angle * 0.5)
    c = math.cos(angle * 0.5)
    return numpy.array([axis[0] * s, axis[1] * s, axis[2] * s, c])


def quat_from_matrix(rot: numpy.ndarray) -> numpy.ndarray:
    """3x3 rotation matrix -> quaternion (x, y, z, w)."""
    return Rotation.from_matrix(numpy.asarray(rot, dtype=float)).as_quat()


def quat_from_basis(
    x_col: numpy.ndarray,
    y_col: numpy.ndarray,
    z_col: numpy.ndarray,
) -> numpy.ndarray:
    """Rotation whose matrix columns are the given basis vectors."""
    return quat_from_matrix(numpy.column_stack([x_col, y_col, z_col]))


def quat_to_matrix(q: numpy.ndarray) -> numpy.ndarray:
    x, y, z, w = q
    return numpy.array([
        [1 - 2*(y**2 + z**2), 2*(x*y - z*w), 2*(x*z + y*w)],
        [2*(x*y + z*w), 1 - 2*(x**2 + z**2), 2*(y*z - x*w)],
        [2*(x*z - y*w), 2*(y*z + x*w), 1 - 2*(x**2 + y**2)]
    ])


def quat_close(q1: numpy.ndarray, q2: numpy.ndarray, eps: float = 1e-6) -> bool:
    """True if q1 and q2 describe the same rotation (q and -q are equal)."""
    d = abs(float(numpy.dot(qnormalize(q1), qnormalize(q2))))
    return d > 1.0 - eps
