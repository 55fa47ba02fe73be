#!/usr/bin/env python
# -*- encoding: utf-8 -*-
import io
import re
from glob import glob
from os.path import basename, dirname, join, splitext

from setuptools import find_packages, setup


def read(*names, **kwargs):
    return io.open(
        join(dirname(__file__), *names), encoding=kwargs.get("encoding", "utf8")
    ).read()


def find_version(*file_paths):
    contents = read(*file_paths)
    match = re.search(r"^__version__ = ['\"]([^'\"]*)['\"]", contents, re.M)
    if match:
        return match.group(1)
    raise RuntimeError("Unable to find version string.")


setup(
    name="azcmd",
    python_requires=">=3.8",
    version=find_version("src", "azcmd", "__init__.py"),
    license="MIT",
    description="CLI cmdlets to manage Azure resources across one or more subscriptions",
    long_description="""`azcmd` is a CLI of cmdlets that manage Azure resource groups,
template deployments, storage accounts, virtual machines, automation runbooks,
and SQL databases. Each cmdlet runs against one or more subscriptions selected
by ID, by name, or by metadata, and renders its results as text, JSON, or YAML.""",
    long_description_content_type="text/markdown",
    author="Pete Kazmier",
    author_email="opensource@fidelity.com",
    packages=find_packages("src"),
    package_dir={"": "src"},
    py_modules=[splitext(basename(path))[0] for path in glob("src/*.py")],
    include_package_data=True,
    zip_safe=False,
    classifiers=[
        # complete classifier list: http://pypi.python.org/pypi?%3Aaction=list_classifiers
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Intended Audience :: System Administrators",
        "License :: OSI Approved :: MIT License",
        "Operating System :: Unix",
        "Operating System :: POSIX",
        "Operating System :: Microsoft :: Windows",
        "Programming Language :: Python",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: Implementation :: CPython",
        "Topic :: Utilities",
    ],
    keywords=["azcmd", "azure", "cli", "arm"],
    install_requires=[
        "azure-core",
        "azure-identity",
        "azure-mgmt-automation",
        "azure-mgmt-compute",
        "azure-mgmt-resource<25",
        "azure-mgmt-sql",
        "azure-mgmt-storage",
        "requests_file",
        "requests",
        "PyYAML>=3.10",
    ],
    tests_require=["pytest", "pytest-mock", "freezegun"],
    extras_require={"test": ["pytest", "pytest-mock", "freezegun"]},
    entry_points={
        "console_scripts": [
            "azcmd = azcmd.cli:main",
        ]
    },
)
