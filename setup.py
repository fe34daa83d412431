import os
import re
from codecs import open

from setuptools import find_packages
from setuptools import setup

here = os.path.abspath(os.path.dirname(__file__))

with open(os.path.join(here, "README.md"), encoding="utf-8") as f:
    long_description = f.read()
long_description_content_type = "text/markdown"

with open(os.path.join(here, "navredirect/version.py")) as f:
    match = re.search(r'VERSION = "(.+?)"', f.read())
    assert match
    VERSION = match.group(1)

setup(
    name="navredirect",
    version=VERSION,
    description="Redirect browser tabs whose top-level navigation matches a user-defined rule.",
    long_description=long_description,
    long_description_content_type=long_description_content_type,
    license="MIT",
    classifiers=[
        "License :: OSI Approved :: MIT License",
        "Development Status :: 4 - Beta",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3 :: Only",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python :: Implementation :: CPython",
        "Topic :: Internet :: WWW/HTTP :: Browsers",
        "Typing :: Typed",
    ],
    packages=find_packages(
        include=[
            "navredirect",
            "navredirect.*",
        ]
    ),
    include_package_data=True,
    entry_points={
        "console_scripts": [
            "navredirect = navredirect.tools.main:navredirect",
        ],
    },
    python_requires=">=3.10",
    install_requires=[
        "ruamel.yaml>=0.16,<0.19",
    ],
    extras_require={
        "dev": [
            "hypothesis>=5.8,<7",
            "pytest-asyncio>=0.23,<0.25",
            "pytest-cov>=2.7.1,<6",
            "pytest-timeout>=1.3.3,<3",
            "pytest>=7,<9",
        ],
    },
)
