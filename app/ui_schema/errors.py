"""Errors raised by the UI schema compiler."""


class UnsupportedOpenApiVersionError(ValueError):
    """The input is not an OpenAPI 3.x document.

    This is the only fatal condition of the compiler; every other anomaly in
    the document degrades to a smaller result instead of raising.
    """

    def __init__(self, version):
        self.version = version
        super().__init__(
            f"Unsupported OpenAPI document: expected an 'openapi' version starting with '3.', got {version!r}"
        )
