#!/usr/bin/env python3
"""Setup script for cardviewer package."""

from setuptools import setup, find_packages

setup(
    name="cardviewer",
    version="0.1.0",
    description="Render movie/tv/book/music cards, image grids and HTML blocks from Markdown notes",
    author="cardviewer Project",
    packages=find_packages(exclude=["tests", "tests.*"]),
    package_data={
        "cardviewer": ["templates/*"],
    },
    include_package_data=True,
    install_requires=[
        "click>=8.0.0",
        "Pillow>=10.0.0",
        "PyYAML>=6.0",
        "requests>=2.28.0",
        "python-dotenv>=1.0.0",
        "Markdown>=3.4",
        "beautifulsoup4>=4.11",
        "jsonschema>=4.0",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "cardviewer=cardviewer.cli:cli",
        ],
    },
    python_requires=">=3.10",
)
