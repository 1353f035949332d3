[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "sscctools"
version = "0.1.0"
description = "Tools for SSCC codes: check digits, bulk generation, MySQL loading, and a Wi-Fi network switcher"
requires-python = ">=3.10"
keywords = ["sscc", "gs1", "check digit", "luhn", "barcode", "logistics", "mysql", "wifi"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Utilities",
]
dependencies = [
    "pymysql",
    "watchdog",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
sscctools = "sscctools.cli:main"
sscc-check = "sscctools.check:main"
sscc-generate = "sscctools.generate:main"
sscc-insert = "sscctools.insert:main"
sscc-switch-network = "sscctools.network:main"

[tool.hatch.build.targets.wheel]
packages = ["sscctools"]

[tool.hatch.build.targets.sdist]
include = ["sscctools", "tests"]

[tool.pytest.ini_options]
testpaths = ["tests"]
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
