[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "kubevirt-ui-tools"
version = "0.1.0"
description = "Test-coverage analysis, scaffolding, cluster inspection and product-documentation tools for a Playwright-based virtualization UI test suite"
requires-python = ">=3.10"
keywords = [
    "playwright",
    "test-coverage",
    "scaffolding",
    "kubevirt",
    "asciidoc",
    "documentation",
]
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
    "Topic :: Software Development :: Testing",
    "Topic :: Software Development :: Quality Assurance",
    "Topic :: Documentation",
]
dependencies = [
    "requests>=2.28",
]

[project.optional-dependencies]
test = [
    "pytest>=7",
]

[tool.hatch.build.targets.wheel]
packages = ["kubevirt_ui_tools"]

[tool.hatch.build.targets.sdist]
include = ["kubevirt_ui_tools", "tests"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
