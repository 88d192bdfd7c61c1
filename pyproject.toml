[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "topicbus"
version = "0.1.0"
description = "A small in-process event bus with per-topic worker threads, multiple subscribers and retries."
requires-python = ">=3.10"
keywords = ["event bus", "pubsub", "publish-subscribe", "events", "threading"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Libraries :: Python Modules",
]
dependencies = []

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
topicbus-examples = "topicbus.examples:main"

[tool.hatch.build.targets.wheel]
packages = ["topicbus"]

[tool.pytest.ini_options]
addopts = "-ra"
