from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="stager",
    version="0.4.0",
    description="Stager - install built artifacts and generate CMake package configs",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Software Development :: Build Tools",
    ],
    python_requires=">=3.8",
    entry_points={
        "console_scripts": [
            "stager=stager.main:main",
        ],
    },
    install_requires=[
        "toml>=0.10.0",
        "pyfiglet>=0.8.0",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
)
