[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "inkreader"
version = "0.1.0"
description = "Screen logic for a small e-reader: book list and pager, file browser, and Wi-Fi setup."
requires-python = ">=3.10"
dependencies = []
keywords = ["e-reader", "ebook", "pagination", "file browser", "wifi", "captive portal"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Text Processing :: General",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["inkreader"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
