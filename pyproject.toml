[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "mdjournal"
version = "0.1.0"
description = "Journaling for mdBook: dated markdown entries per topic, indexed into the book by a preprocessor"
requires-python = ">=3.10"
keywords = ["mdbook", "journal", "markdown", "preprocessor", "front-matter"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Text Processing :: Markup :: Markdown",
    "Topic :: Documentation",
]
dependencies = [
    "pyyaml>=6.0",
    "tomlkit>=0.11",
]

[project.optional-dependencies]
test = [
    "pytest>=7.0",
]

[project.scripts]
mdbook-journal = "mdjournal.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["mdjournal"]

[tool.pytest.ini_options]
addopts = "-ra"
