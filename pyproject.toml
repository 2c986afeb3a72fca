[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "synapsegrad"
version = "0.1.0"
description = "Define-by-run automatic differentiation with higher-order gradients on numpy arrays"
requires-python = ">=3.10"
dependencies = ["numpy"]
keywords = ["autograd", "automatic differentiation", "neural network", "deep learning", "backpropagation"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Scientific/Engineering :: Artificial Intelligence",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["synapsegrad"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
