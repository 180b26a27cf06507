[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "jevan"
version = "1.0.0"
description = "HTTP API for a mess management application: users, products, carts and orders stored in MongoDB."
requires-python = ">=3.10"
keywords = ["mess", "api", "flask", "mongodb", "orders", "cart"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Framework :: Flask",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP :: HTTP Servers",
]
dependencies = [
    "flask",
    "pymongo",
    "python-dotenv",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
jevan = "jevan.app:main"

[tool.hatch.build.targets.wheel]
packages = ["jevan"]

[tool.pytest.ini_options]
addopts = "-ra"
