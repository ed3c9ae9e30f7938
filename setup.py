# -*- coding: utf-8 -*-

import setuptools
from eaglekit import __version__

with open("README.md", "r") as fh:
    long_description = fh.read()

setuptools.setup(
    name="EagleKit",
    python_requires='>=3.8',
    version=__version__,
    description="Panelization of EAGLE boards",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=setuptools.find_packages(exclude=["test", "test.*"]),
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    install_requires=[
        "numpy",
        "lxml>=4.6",
        "shapely>=2.0.3",
        "click>=8.0",
        "commentjson>=0.9"
    ],
    extras_require={
        "dev": [
            "pytest",
            "hypothesis>=6.0",
            "wheel",
        ],
    },
    package_data={
        "eaglekit": ["resources/panelizePresets/*.json"],
    },
    zip_safe=False,
    include_package_data=True,
    entry_points = {
        "console_scripts": [
            "eaglekit=eaglekit.ui:cli",
        ],
    }
)
