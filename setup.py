import os
from setuptools import setup, find_packages

import cloudfront_provider

requirements = []
with open("requirements.txt") as f:
    requirements = f.read().splitlines()

test_requirements = []
with open("requirements-test.txt") as f:
    test_requirements = f.read().splitlines()


def read(fname):
    return open(os.path.join(os.path.dirname(__file__), fname)).read()


setup(
    name=cloudfront_provider.__title__,
    version=cloudfront_provider.__version__,
    description=cloudfront_provider.__description__,
    license=cloudfront_provider.__license__,
    packages=find_packages(exclude=["test", "test.*"]),
    long_description=read("README.md"),
    long_description_content_type="text/markdown",
    entry_points={
        "console_scripts": ["cloudfront-provider = cloudfront_provider.__main__:main"],
    },
    include_package_data=True,
    zip_safe=False,
    install_requires=requirements,
    extras_require={"test": test_requirements},
    tests_require=test_requirements,
    python_requires=">=3.9",
    classifiers=[
        # Current project status
        "Development Status :: 4 - Beta",
        # Audience
        "Intended Audience :: System Administrators",
        "Intended Audience :: Information Technology",
        # License information
        "License :: OSI Approved :: Apache Software License",
        # Supported python versions
        "Programming Language :: Python :: 3.9",
        # Supported OS's
        "Operating System :: POSIX :: Linux",
        "Operating System :: Unix",
        # Extra metadata
        "Environment :: Console",
        "Natural Language :: English",
        "Topic :: Internet :: WWW/HTTP",
        "Topic :: Utilities",
    ],
    keywords="aws cloudfront infrastructure",
)
