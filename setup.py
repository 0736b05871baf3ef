"""Package askme: question/answer board on comma-separated line files."""

from setuptools import find_packages, setup

setup(
    name="askme",
    version="0.1.0",
    description="Question/answer board with a flat-file record store",
    python_requires=">=3.11",
    package_dir={"": "src"},
    packages=find_packages("src"),
    install_requires=[
        "click>=8.1",
        "rich>=13.0",
    ],
    extras_require={
        "test": ["pytest>=8.0"],
    },
    entry_points={
        "console_scripts": ["askme = askme.cli:main"],
    },
)
