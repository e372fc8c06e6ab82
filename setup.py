"""
Setup file.
"""

import os

from setuptools import find_packages, setup

URL = "https://github.com/modmake/modmake"
KEYWORDS = "build java modules jigsaw multi-release javac jar junit orchestrator"
HERE = os.path.dirname(os.path.abspath(__file__))


if __name__ == "__main__":
    setup(
        name="modmake",
        version="0.1.0",
        description="Minimal build orchestrator for modular Java projects",
        keywords=KEYWORDS,
        url=URL,
        python_requires=">=3.8",
        package_dir={"": "src"},
        packages=find_packages(where="src"),
        install_requires=[
            "requests",
            "tqdm",
        ],
        extras_require={
            "test": ["pytest"],
        },
        entry_points={
            "console_scripts": ["modmake=modmake.cli:main"],
        },
        include_package_data=True)
