[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "vbiencode"
version = "0.1.0"
description = "Encoders for analogue television VBI data: WSS, VITC and Videocrypt S"
requires-python = ">=3.10"
dependencies = []
keywords = ["vbi", "wss", "vitc", "videocrypt", "pal", "ntsc", "analogue video", "timecode"]
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
    "Topic :: Multimedia :: Video",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["vbiencode"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
