from setuptools import find_packages, setup

with open("README.md", encoding="utf-8") as readme:
    long_description = readme.read()

setup(
    name="regionfinder",
    version="1.0.0",
    description="offline cache builder and fast point lookup of timezone and administrative region polygons",
    long_description=long_description,
    long_description_content_type="text/markdown",
    license="MIT",
    python_requires=">=3.9",
    packages=find_packages(include=["regionfinder", "regionfinder.*"]),
    package_data={
        "regionfinder": ["data/*.rgnc", "flatbuf/schemas/*.fbs"],
    },
    install_requires=[
        "numpy>=1.23",
        "numba>=0.59",
        "flatbuffers>=23.5.26",
        "zstandard>=0.21",
        "pydantic>=2.0",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Topic :: Scientific/Engineering :: GIS",
    ],
)
