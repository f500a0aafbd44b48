"""
the decoded, immutable cache: region records + spatial index

a ``RegionCache`` is constructed once (by the builder or by decoding an artifact)
and shared read-only afterwards. it is passed explicitly to every ``RegionFinder``,
which allows several independently loaded caches (e.g. different dataset variants) within one process.
"""
from dataclasses import dataclass, field
from importlib import resources
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from regionfinder import utils
from regionfinder.configs import CACHE_FILE_SUFFIX, SCHEMA_VERSION
from regionfinder.errors import DataIOError
from regionfinder.geometry import (
    Box,
    Containment,
    MultiPolygon,
    multipolygon_containment,
    multipolygons_equal,
    union_box,
)
from regionfinder.spatial_index import SpatialIndex

PACKAGE_DATA_DIR = "data"
# optional metadata, in the order of the query representation
PROPERTY_FIELDS = (
    "description",
    "dst_description",
    "offset",
    "zone",
    "raw_offset",
    "raw_dst_offset",
    "level",
)


@dataclass(frozen=True, eq=False)
class RegionRecord:
    """one region: metadata + geometry (in the storage unit of the cache)"""

    id: int
    identifier: str
    polygons: MultiPolygon = field(repr=False)
    boxes: Tuple[Box, ...] = field(repr=False)
    description: Optional[str] = None
    dst_description: Optional[str] = None
    # static offsets in seconds, no daylight saving computation
    raw_offset: Optional[int] = None
    raw_dst_offset: Optional[int] = None
    # administrative level (admin boundary datasets only)
    level: Optional[int] = None
    # utc offset label and hours (Natural Earth time zones)
    offset: Optional[str] = None
    zone: Optional[float] = None

    @property
    def bbox(self) -> Box:
        return union_box(self.boxes)

    @property
    def nr_of_polygons(self) -> int:
        return len(self.polygons)

    @property
    def nr_of_coords(self) -> int:
        return sum(poly.nr_of_coords for poly in self.polygons)

    def containment(self, x, y) -> Containment:
        """exact test, x and y in the storage unit of the geometry"""
        return multipolygon_containment(self.polygons, x, y, self.boxes)

    def properties(self) -> Dict[str, Any]:
        """the public query representation (geometry excluded, unset fields omitted)"""
        props: Dict[str, Any] = {"id": self.id, "identifier": self.identifier}
        for name in PROPERTY_FIELDS:
            value = getattr(self, name)
            if value is not None:
                props[name] = value
        return props

    def metadata(self) -> Tuple:
        return (
            self.id,
            self.identifier,
            self.description,
            self.dst_description,
            self.raw_offset,
            self.raw_dst_offset,
            self.level,
            self.offset,
            self.zone,
        )

    def __eq__(self, other) -> bool:
        if not isinstance(other, RegionRecord):
            return NotImplemented
        return self.metadata() == other.metadata() and multipolygons_equal(
            self.polygons, other.polygons
        )

    __hash__ = None


@dataclass(frozen=True, eq=False)
class RegionCache:
    dataset: str
    precision: str
    epsilon: float
    records: Tuple[RegionRecord, ...]
    index: SpatialIndex
    schema_version: int = SCHEMA_VERSION
    # True: the coordinate and index arrays are views into ``buffer``
    zero_copy: bool = False
    buffer: Any = field(default=None, repr=False)

    def __len__(self) -> int:
        return len(self.records)

    def __eq__(self, other) -> bool:
        if not isinstance(other, RegionCache):
            return NotImplemented
        return (
            self.dataset == other.dataset
            and self.precision == other.precision
            and self.epsilon == other.epsilon
            and self.records == other.records
            and self.index == other.index
        )

    __hash__ = None

    @classmethod
    def from_bytes(cls, data, zero_copy: bool = False) -> "RegionCache":
        """
        :param data: the cache artifact (bytes, bytearray, memoryview or mmap)
        :param zero_copy: reference ``data`` instead of copying the arrays.
            ``data`` must not be modified as long as the cache is in use
        """
        from regionfinder.flatbuf.io.cache import decode_cache

        return decode_cache(data, zero_copy=zero_copy)

    @classmethod
    def from_file(cls, path: Union[str, Path], zero_copy: bool = False) -> "RegionCache":
        from regionfinder.flatbuf.io.cache import read_cache_file

        return cls.from_bytes(read_cache_file(Path(path)), zero_copy=zero_copy)

    @classmethod
    def from_package_data(cls, name: str, zero_copy: bool = True) -> "RegionCache":
        """
        load a cache artifact shipped inside the package: ``regionfinder/data/<name>.rgnc``

        NOTE: the bytes stay referenced by the cache for the remainder of its lifetime,
            hence zero copy decoding is the default
        """
        resource = resources.files("regionfinder") / PACKAGE_DATA_DIR / (name + CACHE_FILE_SUFFIX)
        try:
            data = resource.read_bytes()
        except OSError as exc:
            raise DataIOError(f"cannot read the packaged cache {name!r}: {exc}") from exc
        return cls.from_bytes(data, zero_copy=zero_copy)


def degree_boxes(records, precision: str) -> List[List[Box]]:
    return [
        [
            Box(*(utils.to_degree(value, precision) for value in box))
            for box in record.boxes
        ]
        for record in records
    ]
