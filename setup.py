"""
Minimal setup.py for the rocksdeps build system

Build Requirements (for running a build, not for installing this package):
- autoconf, make and a C/C++ toolchain (clang is selected for RocksDB)
- jemalloc and rocksdb source trees next to each other in the project root

Usage:
- rocksdeps                          # build everything into ./deps
- rocksdeps build --install-dir out  # build into ./out
- python -m rocksdeps info           # show the configured build
"""

from pathlib import Path
from setuptools import setup, find_packages

# Read README for long description
readme_path = Path("README.md")
long_description = ""
if readme_path.exists():
    with open(readme_path, "r", encoding="utf-8") as f:
        long_description = f.read()

setup(
    name="rocksdeps",
    version="1.0.0",
    description="Builds jemalloc and a statically linked RocksDB into one install directory",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(include=["rocksdeps", "rocksdeps.*"]),
    package_data={
        "rocksdeps": [
            "config/*.yaml",
        ]
    },
    include_package_data=True,
    entry_points={
        "console_scripts": [
            "rocksdeps=rocksdeps.main:main",
        ],
    },
    zip_safe=False,
    python_requires=">=3.10",
    install_requires=[
        "PyYAML>=6.0",
    ],
    extras_require={
        "test": [
            "pytest",
        ],
        "dev": [
            "pytest",
            "pytest-cov",
            "black",
            "flake8",
            "mypy",
        ]
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python :: 3.13",
        "Operating System :: POSIX :: Linux",
        "Topic :: Software Development :: Build Tools",
    ],
)
