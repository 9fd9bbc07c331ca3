[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "kindparse"
version = "0.1.0"
description = "Lexer and parser for the Kind2 language, producing a concrete syntax tree and structured diagnostics"
requires-python = ">=3.10"
dependencies = []
keywords = ["kind2", "parser", "lexer", "dependent types", "syntax tree"]
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
    "Topic :: Software Development :: Compilers",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["kindparse"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
