[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "semstore"
version = "0.1.0"
description = "Telegram bot that prices orders from Chinese marketplaces in roubles, with exchange rates cached in Redis"
requires-python = ">=3.10"
keywords = ["telegram", "bot", "exchange-rates", "redis", "price-calculator"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: End Users/Desktop",
    "Natural Language :: Russian",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Communications :: Chat",
]
dependencies = [
    "httpx>=0.24",
    "redis>=4.5",
]

[project.optional-dependencies]
test = [
    "pytest>=7",
]

[project.scripts]
semstore = "semstore.app:main"

[tool.hatch.build.targets.wheel]
packages = ["semstore"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
