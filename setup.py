"""
Setup script for strided

Package metadata lives here; pyproject.toml only declares the build system
and tool options. This script reads the version from the package and the
long description from the README.
"""

from pathlib import Path
from setuptools import setup, find_packages


# Read version from src/strided/__init__.py
def get_version():
    version_file = Path("src/strided/__init__.py")
    if version_file.exists():
        for line in version_file.read_text().splitlines():
            if line.startswith("__version__"):
                return line.split("=")[1].strip().strip('"').strip("'")
    return "0.1.0"


# Read long description from README
def get_long_description():
    readme = Path("README.md")
    if readme.exists():
        return readme.read_text(encoding="utf-8")
    return ""


setup(
    name="strided",
    version=get_version(),
    description="Non-owning strided multi-dimensional array views over buffer-protocol memory",
    long_description=get_long_description(),
    long_description_content_type="text/markdown",
    license="MIT",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    python_requires=">=3.9",
    install_requires=[
        "numpy>=1.22",
    ],
    extras_require={
        "test": ["pytest>=7"],
    },
    zip_safe=True,
)
