[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "slotqueue"
version = "0.1.0"
description = "A FIFO-fair blocking queue for threads, an in-memory message slot store, and clients for message slot device files"
requires-python = ">=3.10"
dependencies = []
keywords = ["queue", "threading", "fifo", "message slot", "channels", "ioctl"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Operating System",
    "Topic :: Software Development :: Libraries :: Python Modules",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
slot-reader = "slotqueue.client:reader_main"
slot-sender = "slotqueue.client:sender_main"

[tool.hatch.build.targets.wheel]
packages = ["slotqueue"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
strict = true
