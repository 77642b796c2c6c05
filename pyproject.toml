[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "inkcodec"
version = "0.1.0"
description = "SCON notation, SS58 account ids and registry-driven SCALE decoding of smart contract values"
requires-python = ">=3.10"
dependencies = []
keywords = ["scale", "codec", "scon", "ss58", "smart-contracts", "decoding"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Software Development :: Libraries",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["inkcodec"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 88
target-version = "py310"

[tool.mypy]
python_version = "3.10"
