[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "deflate-checksums"
version = "1.23.0"
description = "Adler-32 and gzip CRC-32 checksums with table-driven, folding and chunked algorithms"
requires-python = ">=3.10"
dependencies = []
keywords = ["adler32", "crc32", "checksum", "deflate", "gzip", "zlib", "gf2"]
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
    "Topic :: System :: Archiving :: Compression",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest", "hypothesis"]

[tool.hatch.build.targets.wheel]
packages = ["deflate_checksums"]

[tool.hatch.build.targets.sdist]
include = ["deflate_checksums", "tests", "README.md"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 88
target-version = "py310"

[tool.mypy]
python_version = "3.10"
