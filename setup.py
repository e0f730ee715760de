#!/usr/bin/env python
import setuptools
from setuptools import setup

with open("README.md", "r") as fh:
    long_description = fh.read()

with open("./ploidykit/VERSION", "r") as vf:
    version = vf.read().strip()

setup(
    name="ploidykit",
    version=version,

    python_requires=">=3.10",
    install_requires=[
        "numpy>=1.23.4",
        "orjson>=3.9.15,<4",
        "pydantic>=2,<3",
    ],
    extras_require={
        "test": ["pytest>=7"],
    },

    description="Region- and sex-aware ploidy lookup for variant calling.",
    long_description=long_description,
    long_description_content_type="text/markdown",

    license="GPLv3",
    classifiers=[
        "Programming Language :: Python :: 3 :: Only",
        "License :: OSI Approved :: GNU General Public License v3 (GPLv3)",
        "Operating System :: POSIX",
    ],

    packages=setuptools.find_namespace_packages(include=["ploidykit", "ploidykit.*"]),
    include_package_data=True,

    entry_points={
        "console_scripts": ["ploidykit=ploidykit.entry:main"],
    },
)
