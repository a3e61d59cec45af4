[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "openrm"
version = "1.0.0"
description = "Armor plate detection helpers, console logging for inference tools and camera SDK status codes for robot vision"
requires-python = ">=3.10"
keywords = ["computer-vision", "armor-detection", "lightbar", "histogram", "robotics"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Image Recognition",
]
dependencies = [
    "numpy",
    "pillow",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["openrm"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
