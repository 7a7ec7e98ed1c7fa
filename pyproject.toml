[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "mmlogscrub"
version = "0.3.1"
description = "Scrub identifying information (emails, usernames, IPs, IDs) from Mattermost log files."
requires-python = ">=3.10"
dependencies = []
keywords = ["mattermost", "logs", "scrubbing", "privacy", "anonymization"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: Log Analysis",
    "Topic :: Security",
    "Topic :: System :: Logging",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
mmlogscrub = "mmlogscrub.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["mmlogscrub"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
