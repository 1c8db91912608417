from setuptools import setup, find_packages


with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="kubegraph",
    version="0.1.0",
    description="Cost-minimizing flow analysis over cluster resource graphs.",
    long_description=long_description,
    long_description_content_type="text/markdown",
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    packages=find_packages(exclude=("tests", "tests.*")),
    python_requires=">=3.10",
    install_requires=[
        "dacite",
        "networkx",
        "numpy",
        "pandas",
        "polars>=1.0",
        "PyYAML",
    ],
    extras_require={
        "test": ["pytest", "pytest-asyncio"],
    },
    tests_require=["pytest", "pytest-asyncio"],
)
