[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "specialresource"
version = "0.1.0"
description = "Building blocks for a Kubernetes special-resource operator: config-map storage, driver-toolkit cluster info, resource watches and manifest helpers."
requires-python = ">=3.10"
dependencies = []
keywords = [
    "kubernetes",
    "openshift",
    "operator",
    "driver-toolkit",
    "kernel-modules",
    "configmap",
    "jsonpath",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Systems Administration",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["specialresource"]

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
