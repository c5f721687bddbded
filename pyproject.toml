[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "landkit"
version = "0.1.0"
description = "Toolkit for a wasm function platform: project templates, deployment review, worker sync, storage settings and traffic queries"
requires-python = ">=3.11"
keywords = ["wasm", "serverless", "traefik", "prometheus", "deployment"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP",
]
dependencies = [
    "pyyaml>=6.0",
    "requests>=2.28",
    "tomli-w>=1.0",
]

[project.optional-dependencies]
test = [
    "pytest>=7.0",
    "responses>=0.23",
]

[project.scripts]
land-cli = "landkit.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["landkit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py311"

[tool.mypy]
python_version = "3.11"
ignore_missing_imports = true
