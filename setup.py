#!/usr/bin/env python3
"""
Setup script for morph-prep
"""

from setuptools import setup, find_packages

# Read the README file
def read_readme():
    with open("README.md", "r", encoding="utf-8") as fh:
        return fh.read()

# Read requirements
def read_requirements():
    with open("requirements.txt", "r", encoding="utf-8") as fh:
        return [line.strip() for line in fh if line.strip() and not line.startswith("#")]

setup(
    name="morph-prep",
    version="1.0.0",
    author="Advanced Mesh Processing",
    author_email="contact@meshprocessing.com",
    description="Offline preparation of morph-ready point clouds and blendable color palettes",
    long_description=read_readme(),
    long_description_content_type="text/markdown",
    url="https://github.com/your-repo/morph-prep",
    packages=find_packages(exclude=["tests", "tests.*"]),
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Topic :: Multimedia :: Graphics :: 3D Modeling",
        "Topic :: Scientific/Engineering :: Visualization",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Operating System :: OS Independent",
    ],
    python_requires=">=3.8",
    install_requires=read_requirements(),
    extras_require={
        "dev": ["pytest", "black", "flake8", "mypy"],
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "morph-prep=morph_prep.cli:main",
        ],
    },
    keywords="point cloud, morphing, correspondence, palette, Lab color, Hungarian algorithm",
    project_urls={
        "Bug Reports": "https://github.com/your-repo/morph-prep/issues",
        "Source": "https://github.com/your-repo/morph-prep",
    },
)
