"""Tests for the scene graph: transforms, components, queries, visibility."""

import math

import numpy as np
import pytest

from transform_gizmo.geombase import Pose3
from transform_gizmo.scene import (
    Entity,
    MultipleEntitiesError,
    NoEntitiesError,
    QuerySingleError,
    Scene,
    Visibility,
)


class Marker:
    pass


class Owned:
    def __init__(self):
        self.entity = None


class TestTransformPropagation:

    def test_global_pose_is_cached_until_propagation(self):
        scene = Scene()
        parent = scene.add(Entity(pose=Pose3(lin=[1.0, 0.0, 0.0]), name="parent"))
        child = Entity(pose=Pose3(lin=[0.0, 2.0, 0.0]), name="child", parent=parent)
        scene.add(child)
        scene.propagate_transforms()
        assert np.allclose(child.transform.global_pose().lin, [1.0, 2.0, 0.0])

        parent.transform.relocate(Pose3(lin=[5.0, 0.0, 0.0]))
        assert np.allclose(child.transform.global_pose().lin, [1.0, 2.0, 0.0])

        scene.propagate_transforms()
        assert np.allclose(child.transform.global_pose().lin, [5.0, 2.0, 0.0])

    def test_relocate_bumps_version(self):
        entity = Entity()
        assert entity.transform.version == 0
        entity.transform.relocate(Pose3(lin=[1.0, 0.0, 0.0]))
        assert entity.transform.version == 1

    def test_relocate_global_under_rotated_parent(self):
        scene = Scene()
        parent = scene.add(Entity(pose=Pose3.rotateZ(math.pi / 2)))
        child = scene.add(Entity(parent=parent))
        scene.propagate_transforms()

        child.transform.relocate_global(Pose3(lin=[0.0, 3.0, 0.0]))
        assert np.allclose(child.transform.local_pose().lin, [3.0, 0.0, 0.0])


class TestComponents:

    def test_add_get_remove(self):
        entity = Entity()
        marker = entity.add_component(Marker())
        assert entity.get_component(Marker) is marker
        assert entity.has_component(Marker)
        assert entity.remove_component(Marker) is marker
        assert entity.get_component(Marker) is None
        assert entity.remove_component(Marker) is None

    def test_entity_backreference(self):
        entity = Entity()
        owned = entity.add_component(Owned())
        assert owned.entity is entity
        entity.remove_component(Owned)
        assert owned.entity is None


class TestQueries:

    def test_query_requires_all_types(self):
        scene = Scene()
        a = scene.spawn(Marker(), Owned(), name="a")
        scene.spawn(Marker(), name="b")
        assert scene.query(Marker, Owned) == [a]
        assert len(scene.query(Marker)) == 2

    def test_single(self):
        scene = Scene()
        with pytest.raises(NoEntitiesError):
            scene.single(Marker)
        only = scene.spawn(Marker())
        assert scene.single(Marker) is only
        scene.spawn(Marker())
        with pytest.raises(MultipleEntitiesError):
            scene.single(Marker)

    def test_single_errors_share_base(self):
        assert issubclass(NoEntitiesError, QuerySingleError)
        assert issubclass(MultipleEntitiesError, QuerySingleError)

    def test_add_registers_subtree(self):
        scene = Scene()
        root = Entity(name="root")
        Entity(name="leaf", parent=root)
        scene.add(root)
        assert scene.find("leaf") is not None

    def test_remove_drops_subtree(self):
        scene = Scene()
        root = Entity(name="root")
        Entity(name="leaf", parent=root)
        scene.add(root)
        scene.remove(root)
        assert scene.entities == []


class TestVisibility:

    def test_inherited_visibility(self):
        parent = Entity()
        child = Entity(parent=parent)
        assert child.is_visible()
        parent.visibility = Visibility.HIDDEN
        assert not child.is_visible()
        child.visibility = Visibility.VISIBLE
        assert child.is_visible()
