[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "quillmark"
version = "2.0.1"
description = "Editing logic for a Markdown writing tool: list continuation, auto-pairing, indentation, highlighting spans, focus regions and outlines."
requires-python = ">=3.10"
dependencies = []
keywords = ["markdown", "editor", "highlighting", "outline", "text"]
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
    "Topic :: Text Editors :: Text Processing",
    "Topic :: Text Processing :: Markup :: Markdown",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["quillmark"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
