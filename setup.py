"""Setup configuration for the TocGame disaster-recovery agent."""

import os

from setuptools import find_packages, setup

# Get version from package
here = os.path.abspath(os.path.dirname(__file__))
try:
    from tocrecovery import __author__, __version__
except ImportError:
    __version__ = "1.0.0"
    __author__ = "TocGame Team"

# Get the long description from the README file
with open(os.path.join(here, "README.md"), encoding="utf-8") as f:
    long_description = f.read()

setup(
    name="tocrecovery-agent",
    version=__version__,
    description="Operator-assisted disaster-recovery monitor for the TocGame point-of-sale database",
    long_description=long_description,
    long_description_content_type="text/markdown",
    author=__author__,
    keywords="mongodb backup restore disaster-recovery point-of-sale",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.8",
    install_requires=[
        "click>=8.0.0",
        "pyyaml>=6.0",
        "docker>=6.0.0",
        "jsonschema>=4.0.0",
        "pymongo>=4.0",
        "python-json-logger>=3.1.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
            "ruff>=0.12.0",
            "mypy>=0.991",
        ],
    },
    entry_points={
        "console_scripts": [
            "tocrecovery=tocrecovery.cli:cli",
        ],
    },
)
