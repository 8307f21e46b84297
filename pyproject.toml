[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "fbchess"
version = "0.1.0"
description = "Chess engine building blocks: bitboard tables, Zobrist keys, material table, transposition table, time allocation and move making"
requires-python = ">=3.10"
dependencies = []
keywords = ["chess", "bitboard", "zobrist", "transposition-table", "fen"]
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
    "Topic :: Games/Entertainment :: Board Games",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["fbchess"]

[tool.pytest.ini_options]
addopts = "-ra"
