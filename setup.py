#!/usr/bin/env python3

from setuptools import setup
import os

directory = os.path.dirname(os.path.realpath(__file__))


if __name__ == "__main__":
    setup(
        name="transform-gizmo",
        packages=[
            "transform_gizmo",
            "transform_gizmo.geombase",
            "transform_gizmo.scene",
            "transform_gizmo.gizmo",
        ],
        python_requires='>3.10.0',
        version="0.1.0",
        license="MIT",
        description="Translate/rotate gizmo for 3D scenes",
        long_description=open(os.path.join(
            directory, "README.md"), "r", encoding="utf8").read(),
        long_description_content_type="text/markdown",
        keywords=["gizmo", "3d", "editor"],
        classifiers=[],
        install_requires=[
            "numpy",
            "scipy",
            "PyOpenGL>=3.1",
            "glfw>=2.5.0",
        ],
        extras_require={
            "test": ["pytest"],
        },
        zip_safe=False,
    )
