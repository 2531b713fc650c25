from setuptools import setup, find_packages

setup(
    name="collision_core",
    version="0.1.0",
    packages=find_packages(include=["collision_core", "collision_core.*"]),
    install_requires=[
        "numpy>=1.20.0",
        "scipy>=1.6.0",
    ],
    extras_require={
        "dev": [
            "pytest>=6.0.0",
            "black>=21.5b2",
            "flake8>=3.9.0",
        ],
        "test": [
            "pytest>=6.0.0",
        ],
    },
    author="SKAGE.dev",
    author_email="user@example.com",
    description="Particle-boundary collision and reflection engine for raster bathymetry",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
    url="https://github.com/username/collision-core",
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Science/Research",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    python_requires=">=3.8",
)
