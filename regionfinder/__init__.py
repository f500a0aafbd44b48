from regionfinder.builder import CacheBuilder, build_cache_file
from regionfinder.cache import RegionCache, RegionRecord
from regionfinder.datasets import BuildConfig
from regionfinder.errors import (
    CorruptDataError,
    DataIOError,
    DatasetError,
    GeometryError,
    OutOfRangeError,
    RegionFinderError,
    SchemaVersionError,
)
from regionfinder.flatbuf.io.cache import decode_cache, encode_cache
from regionfinder.regionfinder import LookupEngine, RegionFinder

# https://docs.python.org/3/tutorial/modules.html#importing-from-a-package
# determines which objects will be imported with "import *"
__all__ = (
    "RegionFinder",
    "LookupEngine",
    "RegionCache",
    "RegionRecord",
    "CacheBuilder",
    "BuildConfig",
    "build_cache_file",
    "encode_cache",
    "decode_cache",
    "RegionFinderError",
    "GeometryError",
    "DatasetError",
    "DataIOError",
    "SchemaVersionError",
    "CorruptDataError",
    "OutOfRangeError",
)
