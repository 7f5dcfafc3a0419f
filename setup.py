#!/usr/bin/env python3

from setuptools import setup
import os

directory = os.path.dirname(os.path.realpath(__file__))


if __name__ == "__main__":
    setup(
        name="cpurast",
        packages=[
            "cpurast",
            "cpurast.loaders",
            "cpurast.mesh",
            "cpurast.shadow",
        ],
        python_requires='>3.10.0',
        version="0.1.0",
        license="MIT",
        description="CPU triangle rasterizer with shadow mapping",
        long_description=open(os.path.join(
            directory, "README.md"), "r", encoding="utf8").read(),
        long_description_content_type="text/markdown",
        keywords=["rendering", "rasterizer", "shadow mapping"],
        classifiers=[],
        install_requires=[
            "numpy",
            "Pillow>=9.0",
        ],
        extras_require={
            "test": ["pytest"],
        },
        entry_points={
            "console_scripts": [
                "cpurast=cpurast.__main__:main",
            ],
        },
        zip_safe=False,
    )
