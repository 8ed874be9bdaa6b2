[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "fontserv"
version = "1.2.2"
description = "Font service protocol primitives: byte swapping, resource tables, request and reply swapping tables"
requires-python = ">=3.10"
dependencies = []
keywords = ["fonts", "font-server", "x11", "protocol", "byte-order"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Text Processing :: Fonts",
]

[project.optional-dependencies]
test = ["pytest", "hypothesis"]

[tool.hatch.build.targets.wheel]
packages = ["fontserv"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 88
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
