"""
Базовые геометрические классы (Geometric Base).

Содержит то, на чём построена математика гизмо:
- Pose3 - поза (положение + ориентация + масштаб) в 3D
- Ray3, Plane - луч и плоскость, пересечение луча с плоскостью
- кватернионные операции (x, y, z, w)
"""

from .quat import (
    IDENTITY_QUAT,
    qmul,
    qrot,
    qinv,
    qnormalize,
    quat_close,
    quat_from_axis_angle,
    quat_from_basis,
    quat_from_matrix,
)
from .pose3 import Pose3
from .ray import Ray3, Plane, ray_plane_intersect, closest_point_on_axis, normalize

__all__ = [
    'IDENTITY_QUAT',
    'qmul',
    'qrot',
    'qinv',
    'qnormalize',
    'quat_close',
    'quat_from_axis_angle',
    'quat_from_basis',
    'quat_from_matrix',
    'Pose3',
    'Ray3',
    'Plane',
    'ray_plane_intersect',
    'closest_point_on_axis',
    'normalize',
]
