[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "basmkit"
version = "0.1.0"
description = "Front end for a small stack-machine assembly language: tokenizer, line splitter, expression and statement parser, and Graphviz dumps"
requires-python = ">=3.10"
dependencies = []
keywords = ["assembler", "parser", "tokenizer", "graphviz", "virtual-machine"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Software Development :: Assemblers",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
expr2dot = "basmkit.expr2dot:main"

[tool.hatch.build.targets.wheel]
packages = ["basmkit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
