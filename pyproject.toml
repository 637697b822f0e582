[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "coder"
version = "0.1.0"
description = "Sync git repositories between local and remote servers using git bundles"
requires-python = ">=3.10"
dependencies = []
keywords = ["git", "bundle", "sync", "ssh", "scp", "air-gapped"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Version Control :: Git",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
coder = "coder.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["coder"]

[tool.pytest.ini_options]
addopts = "-ra"
