[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "lsd2dsl"
version = "0.6.0"
description = "Readers for Duden dictionary files and a writer for DSL dictionary sources"
requires-python = ">=3.10"
dependencies = []
keywords = ["dictionary", "dsl", "duden", "decoder", "lexicography"]
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
    "Topic :: Text Processing :: Linguistic",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["lsd2dsl"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
