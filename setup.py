import os
import re
import typing

import setuptools
import types

MAIN_MODULE_NAME = "kura"
TARGET_PROJECT_NAME = "hikari-kura"


def load_meta_data():
    pattern = re.compile(r"__(?P<key>\w+)__\s=\s\"(?P<value>.+)\"")
    with open(os.path.join(MAIN_MODULE_NAME, "about.py"), "r") as file:
        code = file.read()

    groups = dict(group.groups() for group in pattern.finditer(code))
    return types.SimpleNamespace(**groups)


metadata = load_meta_data()

requires: typing.List[str] = []
dependency_links: typing.List[str] = []
with open("requirements.txt") as f:
    REQUIREMENTS = f.readlines()
    for line in REQUIREMENTS:
        if line.startswith("git+"):
            dependency_links.append(line[4:])

        else:
            requires.append(line)


with open("README.md") as f:
    README = f.read()


setuptools.setup(
    name=TARGET_PROJECT_NAME,
    url=metadata.url,
    version=metadata.version,
    packages=setuptools.find_namespace_packages(include=[f"{MAIN_MODULE_NAME}*"]),
    author=metadata.author,
    author_email=metadata.email,
    license=metadata.license,
    description="An in-memory, bounded entity cache for hikari bots.",
    long_description=README,
    long_description_content_type="text/markdown",
    include_package_data=True,
    install_requires=requires,
    extras_require={"tests": ["pytest", "pytest-asyncio"]},
    dependency_links=dependency_links,
    python_requires=">=3.9.0",
    classifiers=[
        "Development Status :: 3 - Alpha",
        "License :: OSI Approved :: BSD License",
        "Intended Audience :: Developers",
        "Natural Language :: English",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python :: Implementation :: CPython",
        "Framework :: AsyncIO",
        "Topic :: Communications :: Chat",
        "Topic :: Software Development :: Libraries",
        "Topic :: Software Development :: Libraries :: Python Modules",
        "Topic :: Utilities",
        "Typing :: Typed",
    ],
)
