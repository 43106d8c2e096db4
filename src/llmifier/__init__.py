"""llmifier: assemble a Dart project into one annotated document for LLMs."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("llmifier")
except PackageNotFoundError:
    __version__ = "dev"

AUTHOR = "Software Engineering Philipp Gerber"
REPOSITORY_URL = "https://github.com/PhilippHGerber/llmifier"
PACKAGE_URL = "https://pub.dev/packages/llmifier"
