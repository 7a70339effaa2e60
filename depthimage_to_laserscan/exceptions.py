"""Exception types for depth image to laser scan conversion."""


class ScanConversionError(ValueError):
    """Base class for inputs that cannot be converted into a scan.

    Every subclass is raised before the output ranges are touched, so a
    caller that catches it can safely reuse the scan buffer.
    """


class UnsupportedEncodingError(ScanConversionError):
    """Raised when a depth image uses an encoding other than 16UC1 or 32FC1."""

    def __init__(self, encoding: str) -> None:
        self.encoding = encoding
        super().__init__(f"Depth image has unsupported encoding: {encoding}")


class MalformedImageError(ScanConversionError):
    """Raised when the image buffer does not match its declared geometry."""


class MalformedScanError(ScanConversionError):
    """Raised when the output ranges do not match the scan's angular span."""


class ScanWindowError(ScanConversionError):
    """Raised when the row window would leave the image."""


class InvalidIntrinsicsError(ScanConversionError):
    """Raised when the camera intrinsics cannot be used for projection."""
