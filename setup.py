# SPDX-License-Identifier: Apache-2.0

import os

import setuptools


base_dir = os.path.dirname(__file__)

about = {}
with open(os.path.join(base_dir, "formgate", "__about__.py")) as f:
    exec(f.read(), about)

with open(os.path.join(base_dir, "README.rst")) as f:
    long_description = f.read()


setuptools.setup(
    name=about["__title__"],
    version=about["__version__"],

    description=about["__summary__"],
    long_description=long_description,
    license=about["__license__"],
    url=about["__uri__"],

    author=about["__author__"],
    author_email=about["__email__"],

    classifiers=[
        "Intended Audience :: Developers",

        "License :: OSI Approved :: Apache Software License",

        "Framework :: Pyramid",

        "Programming Language :: Python",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],

    python_requires=">=3.10",

    packages=[
        "formgate",
        "formgate.captcha",
        "formgate.cli",
        "formgate.i18n",
        "formgate.subscribe",
    ],

    include_package_data=True,

    install_requires=[
        "Babel",
        "click<8.2",
        "orjson",
        "pyramid>=2.0",
        "pyramid_jinja2>=2.5",
        "pyramid_services",
        "requests",
        "structlog",
        "WebOb",
        "WTForms>=3.0",
        "zope.interface",
    ],

    extras_require={
        "tests": [
            "pretend",
            "pytest",
            "responses",
        ],
    },

    entry_points={
        "console_scripts": [
            "formgate = formgate.cli:formgate",
        ],
    },
)
