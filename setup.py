from setuptools import find_packages, setup

setup(
    name="linesearch",
    version="1.0.0",
    description="Binary search for a line in large sorted text files",
    python_requires=">=3.9",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    install_requires=["click>=7.0", "iso8601"],
    extras_require={"test": ["pytest"]},
    entry_points={"console_scripts": ["linesearch=linesearch.cli:main"]},
)
