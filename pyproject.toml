[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tinyweb"
version = "0.1.0"
description = "A tiny HTTP/1.0 web server serving static files and CGI programs"
requires-python = ">=3.10"
dependencies = []
keywords = ["http", "web server", "cgi", "static files"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Environment :: Web Environment",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP :: HTTP Servers",
    "Topic :: Internet :: WWW/HTTP :: Dynamic Content :: CGI Tools/Libraries",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
tinyweb = "tinyweb.server:main"
tinyweb-add = "tinyweb.cgi_add:main"

[tool.hatch.build.targets.wheel]
packages = ["tinyweb"]

[tool.pytest.ini_options]
addopts = "-ra"
