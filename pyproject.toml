[build-system]
requires = ["setuptools>=64"]
build-backend = "setuptools.build_meta"

[project]
name = "probulator"
version = "0.1.0"
description = "Spherical Gaussian and hemispherical basis tools for approximating radiance and irradiance from light probes"
requires-python = ">=3.10"
keywords = ["spherical gaussian", "irradiance", "light probe", "rendering", "least squares", "h-basis"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Graphics :: 3D Rendering",
    "Topic :: Scientific/Engineering :: Mathematics",
]
dependencies = [
    "numpy",
    "scipy",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.setuptools.packages.find]
include = ["probulator*"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
