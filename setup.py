from setuptools import setup, find_packages

setup(
    name="table_query",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.8",
    install_requires=[
        "pandas>=1.3.0",
        "numpy>=1.20.0",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "table-query=table_query.cli.commands:main",
        ],
    },
    author="Your Name",
    description="Filter in-memory record collections with a small query language",
)
