"""Exceptions surfaced by dependency resolution."""


class JarLensError(Exception):
    """Base class for errors reported to callers."""


class DescriptorNotFoundError(JarLensError):
    """The project descriptor (pom.xml) does not exist."""

    def __init__(self, path: str):
        super().__init__(f"File not found: {path}")
        self.path = path


class ResolutionFailedError(JarLensError):
    """The external resolver reported failure and produced nothing usable."""

    def __init__(self, message: str, output: str = ""):
        super().__init__(f"{message}\nOutput: {output}" if output else message)
        self.output = output


class ResolutionOutputMissingError(JarLensError):
    """The resolver ran but its expected output file is absent."""


class ResolutionParseError(JarLensError):
    """The resolver's output file exists but could not be parsed."""
