[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "deskkit"
version = "0.1.0"
description = "Desktop helpers: a sixel decoder, box-drawing geometry, a status-bar block runner, a window-manager IPC client and tiling layouts"
requires-python = ">=3.10"
dependencies = []
keywords = ["status bar", "sixel", "tiling", "window manager", "ipc", "x11", "box drawing"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: X11 Applications",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Desktop Environment :: Window Managers",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
deskkit-blocks = "deskkit.blocks.main:main"
deskkit-msg = "deskkit.ipc:main"

[tool.hatch.build.targets.wheel]
packages = ["deskkit"]

[tool.pytest.ini_options]
addopts = "-ra"
