[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "diningbot"
version = "1.0.0"
description = "Dining hall menu fetcher with an MCP tool server over stdio or HTTP"
requires-python = ">=3.10"
keywords = ["dining", "menu", "mcp", "scraper", "json-rpc"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP",
]
dependencies = [
    "requests",
    "beautifulsoup4[html5lib]",
]

[project.optional-dependencies]
test = [
    "pytest",
    "responses",
]

[project.scripts]
diningbot = "diningbot.server:main"

[tool.hatch.build.targets.wheel]
packages = ["diningbot"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
