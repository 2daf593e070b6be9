#!/usr/bin/env python3
"""Setup script for shareslides package."""

from setuptools import setup, find_packages

setup(
    name="shareslides",
    version="0.1.0",
    description="Slide deck archive toolkit: catalog loader, importers and asset preparation",
    author="ShareSlides Project",
    packages=find_packages(exclude=["tests", "tests.*"]),
    package_data={
        "shareslides": ["schemas/*.json"],
    },
    include_package_data=True,
    install_requires=[
        "click>=8.0.0",
        "Pillow>=10.0.0",
        "PyYAML>=6.0",
        "jsonschema>=4.0",
        "python-dotenv>=1.0.0",
    ],
    extras_require={
        "dev": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "shareslides=shareslides.cli:cli",
        ],
    },
    python_requires=">=3.10",
)
