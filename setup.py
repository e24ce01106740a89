import os

from setuptools import find_namespace_packages, setup
from Cython.Build import cythonize


# Opt-in: ZIPSERVE_CYTHONIZE=1 pip install .
CYTHONIZE = os.environ.get("ZIPSERVE_CYTHONIZE", "0") == "1"

ext_modules = []
if CYTHONIZE:
    ext_modules = cythonize(
        [
            "src/zipserve/core/dispatcher.py",
            "src/zipserve/core/reader.py",
            "src/zipserve/core/renderer.py",
            "src/zipserve/core/resolver.py",
            "src/zipserve/utils/common.py",
        ],
        compiler_directives={
            "language_level": "3",
            "boundscheck": False,
            "wraparound": False,
            "initializedcheck": False,
            "cdivision": True,
        },
    )


setup(
    name="zipserve",
    version="0.1.0",
    description="Serve a zip archive, usually the program's own file, over HTTP with Markdown and Org rendering.",
    package_dir={"": "src"},
    packages=find_namespace_packages(where="src", include=["zipserve", "zipserve.*"]),
    python_requires=">=3.11",
    install_requires=[
        "Flask>=2.2",
        "Markdown>=3.4",
        "org-python>=0.3",
    ],
    extras_require={
        "test": ["pytest>=7"],
        "cython": ["Cython>=3.0"],
    },
    entry_points={
        "console_scripts": [
            "zipserve = zipserve.cli.cli_parser:cli_parser",
        ],
    },
    ext_modules=ext_modules,
)
