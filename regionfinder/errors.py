"""exception hierarchy of ``regionfinder``

every error raised on purpose by the package derives from :class:`RegionFinderError`.
Build time errors abort the whole build, decoding errors abort loading a cache
and :class:`OutOfRangeError` is only ever raised for a single query.
"""


class RegionFinderError(Exception):
    """base class of all errors raised by regionfinder"""


class GeometryError(RegionFinderError, ValueError):
    """an invalid or degenerate ring (too few points, not closed, zero area)"""


class DatasetError(RegionFinderError, ValueError):
    """a malformed feature or a missing required property in the source dataset"""


class DataIOError(RegionFinderError, OSError):
    """reading a source dataset or writing a cache artifact failed"""


class SchemaVersionError(RegionFinderError):
    """the cache artifact was written with a different schema version"""

    def __init__(self, found: int, expected: int):
        super().__init__(found, expected)
        self.found = found
        self.expected = expected

    def __str__(self) -> str:
        return (
            f"cache schema version {self.found} does not match "
            f"the supported version {self.expected}"
        )


class CorruptDataError(RegionFinderError):
    """structural inconsistency in a cache artifact (length, offset or bounds)"""


class OutOfRangeError(RegionFinderError, ValueError):
    """query coordinate outside of [-180, 180] x [-90, 90]"""
