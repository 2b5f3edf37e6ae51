[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "lexkit"
version = "0.1.0"
description = "Byte-level lexing buffers, a CSS3 tokenizer and parser, and data URI, entity and URL-encoding helpers"
requires-python = ">=3.10"
dependencies = []
keywords = ["lexer", "parser", "css", "tokenizer", "buffer", "data-uri", "url-encoding"]
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
    "Topic :: Software Development :: Libraries :: Python Modules",
    "Topic :: Text Processing",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["lexkit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
