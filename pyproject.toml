[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "picoflash"
version = "0.1.0"
description = "RP2040 blink firmware model with boot2 CRC injection and UF2 conversion tools"
requires-python = ">=3.10"
dependencies = []
keywords = ["rp2040", "uf2", "crc32", "elf", "firmware", "embedded"]
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
    "Topic :: Software Development :: Embedded Systems",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
picoflash-crc32table = "picoflash.crc32:main"
picoflash-inject-crc32 = "picoflash.inject:main"
picoflash-bin2uf2 = "picoflash.uf2:main"

[tool.hatch.build.targets.wheel]
packages = ["picoflash"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
