#!/usr/bin/env python3
"""
Setup script for the SolidFire Docker volume driver.
"""

from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

with open("requirements.txt", "r", encoding="utf-8") as fh:
    requirements = [line.strip() for line in fh if line.strip() and not line.startswith("#")]

packages = find_packages(where=".", include=["sfvp", "sfvp.*"])

setup(
    name="solidfire-docker-driver",
    version="1.3.2",
    author="SolidFire Docker Driver Project",
    description="Docker volume driver for SolidFire Element storage clusters",
    long_description=long_description,
    long_description_content_type="text/markdown",
    url="https://github.com/solidfire/solidfire-docker-driver",
    license="Apache-2.0",
    packages=packages,
    package_dir={"": "."},
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: System Administrators",
        "License :: OSI Approved :: Apache Software License",
        "Operating System :: POSIX :: Linux",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
    ],
    python_requires=">=3.8",
    install_requires=requirements,
    extras_require={
        "test": ["pytest>=7.0"],
    },
)
