[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ldbcore"
version = "0.1.0"
description = "Building blocks of a LevelDB-style key-value store: comparators, varints, the block format, an LRU cache, an asyncio front end and a WSGI key-value service"
requires-python = ">=3.10"
dependencies = []
keywords = ["leveldb", "key-value", "sstable", "block", "varint", "lru-cache", "asyncio", "wsgi"]
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
    "Framework :: AsyncIO",
    "Topic :: Database :: Database Engines/Servers",
    "Topic :: Internet :: WWW/HTTP :: WSGI :: Application",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = [
    "pytest",
    "pytest-asyncio",
]

[tool.hatch.build.targets.wheel]
packages = ["ldbcore"]

[tool.hatch.build.targets.sdist]
include = ["ldbcore", "tests", "README.md"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
