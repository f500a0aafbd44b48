from pathlib import Path
from typing import Dict, List, Tuple

import numpy as np

# PATHS
DEFAULT_DATA_DIR = Path(__file__).parent / "data"
CACHE_FILE_SUFFIX = ".rgnc"

# CACHE FORMAT
CACHE_MAGIC = b"RGNC"
# NOTE: increment on every change of the flatbuffer schema or the header layout
SCHEMA_VERSION = 1
# magic (4s), schema version (H), flags (H), payload length (Q), crc32 (I), reserved (I)
HEADER_FORMAT = "<4sHHQII"
HEADER_SIZE = 24
FLAG_ZSTD_COMPRESSED = 1

# COORDINATE PRECISION
PRECISION_INT32 = "int32"
PRECISION_FLOAT64 = "float64"
PRECISIONS = (PRECISION_INT32, PRECISION_FLOAT64)
# stored as ubyte in the flatbuffer
PRECISION_CODES = {PRECISION_INT32: 0, PRECISION_FLOAT64: 1}
PRECISION_DTYPES = {
    PRECISION_INT32: np.dtype("<i4"),
    PRECISION_FLOAT64: np.dtype("<f8"),
}

# i = signed 4byte integer
NR_BYTES_I = 4
# IMPORTANT: all values between -180 and 180 degree must fit into the domain of i4!
MAX_ALLOWED_COORD_VAL = 2 ** (8 * NR_BYTES_I - 1)
# from math import floor,log10
# DECIMAL_PLACES_SHIFT = floor(log10(MAX_ALLOWED_COORD_VAL/180.0)) # == 7
DECIMAL_PLACES_SHIFT = 7
INT2COORD_FACTOR = 10 ** (-DECIMAL_PLACES_SHIFT)
COORD2INT_FACTOR = 10**DECIMAL_PLACES_SHIFT
MAX_LNG_VAL = 180.0
MAX_LAT_VAL = 90.0
MAX_LNG_VAL_INT = int(MAX_LNG_VAL * COORD2INT_FACTOR)
assert MAX_LNG_VAL_INT < MAX_ALLOWED_COORD_VAL

# SIMPLIFICATION
DEFAULT_EPSILON = 0.0001
SIMPLIFICATION_PROFILES: Dict[str, float] = {
    "default": DEFAULT_EPSILON,
    "extrasimplified": 0.01,
    "unsimplified": 0.0,
}
# a closed ring needs 3 distinct points + the repeated first point
MIN_RING_LENGTH = 4

# SPATIAL INDEX
# 1 degree cells: 64800 cells world wide, a few candidates per cell for real world data
DEFAULT_CELL_SIZE = 1.0

# DATASETS
DATASET_NED = "ned"
DATASET_OSM_TZ = "osm_tz"
DATASET_OSM_ADMIN = "osm_admin"
DATASET_GENERIC = "generic"
DATASET_VARIANTS = (DATASET_NED, DATASET_OSM_TZ, DATASET_OSM_ADMIN, DATASET_GENERIC)
# fine grained timezone data splits zones into several features
MERGE_FRAGMENTS_DEFAULT = {
    DATASET_NED: False,
    DATASET_OSM_TZ: True,
    DATASET_OSM_ADMIN: False,
    DATASET_GENERIC: False,
}

# TYPES
CoordPairs = List[Tuple[float, float]]
CoordLists = List[List[float]]
