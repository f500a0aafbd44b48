"""
binary cache codec: (de)serialisation of a ``RegionCache``

artifact layout:
    header (24 byte, little endian): magic, schema version, flags, payload length, crc32 of the payload, reserved
    payload: FlatBuffers ``RegionCache`` table (cf. flatbuf/schemas/cache.fbs), optionally zstd compressed

the schema version is checked before any other content of the artifact is trusted.
encoding is deterministic: records, polygons and rings are always written in the same order
and all optional fields are only written when present.
"""
import logging
import os
import struct
import tempfile
import zlib
from pathlib import Path
from typing import Optional, Union

import flatbuffers
import numpy as np

from regionfinder.cache import RegionCache, RegionRecord
from regionfinder.configs import (
    CACHE_FILE_SUFFIX,
    CACHE_MAGIC,
    DEFAULT_DATA_DIR,
    FLAG_ZSTD_COMPRESSED,
    HEADER_FORMAT,
    HEADER_SIZE,
    MIN_RING_LENGTH,
    PRECISION_CODES,
    PRECISION_DTYPES,
    PRECISION_INT32,
    SCHEMA_VERSION,
)
from regionfinder.errors import CorruptDataError, DataIOError, SchemaVersionError
from regionfinder.flatbuf.generated.cache.GridIndex import (
    GridIndexAddCellKeys,
    GridIndexAddCellOffsets,
    GridIndexAddCellSize,
    GridIndexAddRecordIds,
    GridIndexEnd,
    GridIndexStart,
)
from regionfinder.flatbuf.generated.cache.Polygon import (
    PolygonAddExterior,
    PolygonAddHoles,
    PolygonEnd,
    PolygonStart,
    PolygonStartHolesVector,
)
from regionfinder.flatbuf.generated.cache.Record import (
    RecordAddDescription,
    RecordAddDstDescription,
    RecordAddId,
    RecordAddIdentifier,
    RecordAddLevel,
    RecordAddOffset,
    RecordAddPolygons,
    RecordAddRawDstOffset,
    RecordAddRawOffset,
    RecordAddZone,
    RecordEnd,
    RecordStart,
    RecordStartPolygonsVector,
)
from regionfinder.flatbuf.generated.cache.RegionCache import (
    RegionCache as RegionCacheTable,
    RegionCacheAddDataset,
    RegionCacheAddEpsilon,
    RegionCacheAddIndex,
    RegionCacheAddPrecision,
    RegionCacheAddRecords,
    RegionCacheEnd,
    RegionCacheStart,
    RegionCacheStartRecordsVector,
)
from regionfinder.flatbuf.generated.cache.Ring import (
    RingAddCoordsFloat,
    RingAddCoordsInt,
    RingEnd,
    RingStart,
)
from regionfinder.flatbuf.io.compression import compress_bytes, decompress_bytes
from regionfinder.geometry import Polygon, bounding_boxes
from regionfinder.spatial_index import INDEX_DTYPE, SpatialIndex

logger = logging.getLogger(__name__)

_PRECISION_BY_CODE = {code: name for name, code in PRECISION_CODES.items()}


def get_cache_file_path(name: str, data_dir: Path = DEFAULT_DATA_DIR) -> Path:
    """Return the path to the cache artifact of the given name."""
    return Path(data_dir) / f"{name}{CACHE_FILE_SUFFIX}"


def flatten_ring_coords(ring: np.ndarray) -> np.ndarray:
    """Convert ring coordinates from shape (2, N) to a flattened [x0, y0, x1, y1, ...] array."""
    return ring.ravel(order="F")


def reshape_to_ring_coords(coords: np.ndarray) -> np.ndarray:
    """Reshape flattened coordinates [x0, y0, x1, y1, ...] to the format (2, N).

    NOTE: a view for contiguous input (no copy)
    """
    return coords.reshape(2, -1, order="F")


# ENCODING


def _write_ring(builder: flatbuffers.Builder, ring: np.ndarray, precision: str) -> int:
    coords = flatten_ring_coords(ring).astype(PRECISION_DTYPES[precision], copy=False)
    coords_vector = builder.CreateNumpyVector(coords)
    RingStart(builder)
    if precision == PRECISION_INT32:
        RingAddCoordsInt(builder, coords_vector)
    else:
        RingAddCoordsFloat(builder, coords_vector)
    return RingEnd(builder)


def _write_polygon(builder: flatbuffers.Builder, polygon: Polygon, precision: str) -> int:
    exterior_offset = _write_ring(builder, polygon.exterior, precision)
    hole_offsets = [_write_ring(builder, hole, precision) for hole in polygon.holes]
    holes_vector = 0
    if hole_offsets:
        PolygonStartHolesVector(builder, len(hole_offsets))
        for offset in reversed(hole_offsets):
            builder.PrependUOffsetTRelative(offset)
        holes_vector = builder.EndVector()

    PolygonStart(builder)
    PolygonAddExterior(builder, exterior_offset)
    if hole_offsets:
        PolygonAddHoles(builder, holes_vector)
    return PolygonEnd(builder)


def _create_optional_string(builder: flatbuffers.Builder, value: Optional[str]) -> int:
    if value is None:
        return 0
    return builder.CreateString(value)


def _write_record(builder: flatbuffers.Builder, record: RegionRecord, precision: str) -> int:
    polygon_offsets = [_write_polygon(builder, poly, precision) for poly in record.polygons]
    RecordStartPolygonsVector(builder, len(polygon_offsets))
    for offset in reversed(polygon_offsets):
        builder.PrependUOffsetTRelative(offset)
    polygons_vector = builder.EndVector()

    # NOTE: all strings must be created before the table is started
    identifier = builder.CreateString(record.identifier)
    description = _create_optional_string(builder, record.description)
    dst_description = _create_optional_string(builder, record.dst_description)
    offset_label = _create_optional_string(builder, record.offset)

    RecordStart(builder)
    RecordAddId(builder, int(record.id))
    RecordAddIdentifier(builder, identifier)
    if record.description is not None:
        RecordAddDescription(builder, description)
    if record.dst_description is not None:
        RecordAddDstDescription(builder, dst_description)
    # optional scalars: absence is encoded by not writing the field at all
    if record.raw_offset is not None:
        RecordAddRawOffset(builder, int(record.raw_offset))
    if record.raw_dst_offset is not None:
        RecordAddRawDstOffset(builder, int(record.raw_dst_offset))
    if record.level is not None:
        RecordAddLevel(builder, int(record.level))
    RecordAddPolygons(builder, polygons_vector)
    if record.offset is not None:
        RecordAddOffset(builder, offset_label)
    if record.zone is not None:
        RecordAddZone(builder, float(record.zone))
    return RecordEnd(builder)


def _write_index(builder: flatbuffers.Builder, index: SpatialIndex) -> int:
    keys_vector = builder.CreateNumpyVector(index.keys.astype(INDEX_DTYPE, copy=False))
    offsets_vector = builder.CreateNumpyVector(index.offsets.astype(INDEX_DTYPE, copy=False))
    ids_vector = builder.CreateNumpyVector(index.record_ids.astype(INDEX_DTYPE, copy=False))
    GridIndexStart(builder)
    GridIndexAddCellSize(builder, float(index.cell_size))
    GridIndexAddCellKeys(builder, keys_vector)
    GridIndexAddCellOffsets(builder, offsets_vector)
    GridIndexAddRecordIds(builder, ids_vector)
    return GridIndexEnd(builder)


def encode_payload(cache: RegionCache) -> bytes:
    """the FlatBuffers representation of the cache (without header)"""
    builder = flatbuffers.Builder(1024)
    record_offsets = [_write_record(builder, rec, cache.precision) for rec in cache.records]
    RegionCacheStartRecordsVector(builder, len(record_offsets))
    for offset in reversed(record_offsets):
        builder.PrependUOffsetTRelative(offset)
    records_vector = builder.EndVector()

    index_offset = _write_index(builder, cache.index)
    dataset = builder.CreateString(cache.dataset)

    RegionCacheStart(builder)
    RegionCacheAddDataset(builder, dataset)
    RegionCacheAddPrecision(builder, PRECISION_CODES[cache.precision])
    RegionCacheAddEpsilon(builder, float(cache.epsilon))
    RegionCacheAddRecords(builder, records_vector)
    RegionCacheAddIndex(builder, index_offset)
    root = RegionCacheEnd(builder)
    builder.Finish(root)
    return bytes(builder.Output())


def encode_cache(cache: RegionCache, compress: bool = False) -> bytes:
    """
    :param cache: the cache to serialise
    :param compress: whether to zstd compress the payload
    :return: the complete artifact (header + payload)
    """
    payload = encode_payload(cache)
    flags = 0
    if compress:
        uncompressed_size = len(payload)
        payload = compress_bytes(payload)
        flags |= FLAG_ZSTD_COMPRESSED
        logger.info("compressed the payload from %d to %d bytes", uncompressed_size, len(payload))
    header = struct.pack(
        HEADER_FORMAT,
        CACHE_MAGIC,
        SCHEMA_VERSION,
        flags,
        len(payload),
        zlib.crc32(payload),
        0,
    )
    return header + payload


# DECODING


def read_header(view: memoryview):
    """
    :return: flags and payload length
    :raises CorruptDataError: if the header is truncated or not the header of a cache artifact
    :raises SchemaVersionError: if the artifact has been written with another schema version
    """
    if len(view) < HEADER_SIZE:
        raise CorruptDataError(
            f"artifact too short: {len(view)} bytes, the header alone has {HEADER_SIZE} bytes"
        )
    magic, version, flags, payload_length, checksum, _reserved = struct.unpack_from(
        HEADER_FORMAT, view, 0
    )
    if magic != CACHE_MAGIC:
        raise CorruptDataError(f"not a region cache artifact (magic number {magic!r})")
    if version != SCHEMA_VERSION:
        raise SchemaVersionError(found=version, expected=SCHEMA_VERSION)
    if flags & ~FLAG_ZSTD_COMPRESSED:
        raise CorruptDataError(f"unknown header flags {flags:#x}")
    if payload_length != len(view) - HEADER_SIZE:
        raise CorruptDataError(
            f"payload length mismatch: header states {payload_length} bytes, "
            f"found {len(view) - HEADER_SIZE} bytes"
        )
    if zlib.crc32(view[HEADER_SIZE:]) != checksum:
        raise CorruptDataError("payload checksum mismatch")
    return flags, payload_length


def _read_vector(raw, dtype: np.dtype, zero_copy: bool) -> np.ndarray:
    if isinstance(raw, int):
        # the vector is absent
        return np.empty(0, dtype=dtype)
    if not zero_copy:
        raw = raw.copy()
    raw.flags.writeable = False
    return raw


def _read_ring(ring_table, precision: str, zero_copy: bool) -> np.ndarray:
    if ring_table is None:
        raise CorruptDataError("polygon without exterior ring")
    if precision == PRECISION_INT32:
        raw = ring_table.CoordsIntAsNumpy()
    else:
        raw = ring_table.CoordsFloatAsNumpy()
    if isinstance(raw, int):
        raise CorruptDataError(f"ring without {precision} coordinates")
    if raw.size % 2 != 0:
        raise CorruptDataError(f"odd number of ring coordinate values: {raw.size}")
    if raw.size < 2 * MIN_RING_LENGTH:
        raise CorruptDataError(f"ring with {raw.size // 2} points, at least {MIN_RING_LENGTH} expected")
    coords = _read_vector(raw, raw.dtype, zero_copy)
    return reshape_to_ring_coords(coords)


def _read_polygon(polygon_table, precision: str, zero_copy: bool) -> Polygon:
    exterior = _read_ring(polygon_table.Exterior(), precision, zero_copy)
    holes = tuple(
        _read_ring(polygon_table.Holes(i), precision, zero_copy)
        for i in range(polygon_table.HolesLength())
    )
    return Polygon(exterior, holes)


def _decode_string(raw: Optional[bytes]) -> Optional[str]:
    if raw is None:
        return None
    return raw.decode("utf-8")


def _read_record(record_table, position: int, precision: str, zero_copy: bool) -> RegionRecord:
    record_id = record_table.Id()
    if record_id != position:
        raise CorruptDataError(f"record at position {position} has the id {record_id}")
    identifier = _decode_string(record_table.Identifier())
    if identifier is None:
        raise CorruptDataError(f"record {record_id} without identifier")
    polygons = tuple(
        _read_polygon(record_table.Polygons(i), precision, zero_copy)
        for i in range(record_table.PolygonsLength())
    )
    if len(polygons) == 0:
        raise CorruptDataError(f"record {record_id} without geometry")
    return RegionRecord(
        id=record_id,
        identifier=identifier,
        polygons=polygons,
        boxes=bounding_boxes(polygons),
        description=_decode_string(record_table.Description()),
        dst_description=_decode_string(record_table.DstDescription()),
        raw_offset=record_table.RawOffset(),
        raw_dst_offset=record_table.RawDstOffset(),
        level=record_table.Level(),
        offset=_decode_string(record_table.Offset()),
        zone=record_table.Zone(),
    )


def _read_index(index_table, nr_of_records: int, zero_copy: bool) -> SpatialIndex:
    if index_table is None:
        raise CorruptDataError("cache without spatial index")
    keys = _read_vector(index_table.CellKeysAsNumpy(), INDEX_DTYPE, zero_copy)
    offsets = _read_vector(index_table.CellOffsetsAsNumpy(), INDEX_DTYPE, zero_copy)
    record_ids = _read_vector(index_table.RecordIdsAsNumpy(), INDEX_DTYPE, zero_copy)
    index = SpatialIndex(index_table.CellSize(), keys, offsets, record_ids)

    if len(offsets) != len(keys) + 1:
        raise CorruptDataError(
            f"index has {len(keys)} cells but {len(offsets)} offsets (expected {len(keys) + 1})"
        )
    if offsets[0] != 0 or offsets[-1] != len(record_ids):
        raise CorruptDataError("index offsets do not span the record id vector")
    if np.any(np.diff(offsets.astype(np.int64)) < 0):
        raise CorruptDataError("index offsets are not monotonic")
    if np.any(np.diff(keys.astype(np.int64)) <= 0):
        raise CorruptDataError("index cell keys are not strictly increasing")
    if len(keys) and int(keys[-1]) >= index.nr_of_rows * index.nr_of_columns:
        raise CorruptDataError("index cell key out of the grid bounds")
    if len(record_ids) and int(record_ids.max()) >= nr_of_records:
        raise CorruptDataError("index references a non existing record")
    return index


def decode_cache(data, zero_copy: bool = False) -> RegionCache:
    """
    :param data: the complete artifact (bytes, bytearray, memoryview or mmap)
    :param zero_copy: if True the coordinate and index arrays are read-only views into the (decompressed) payload.
        otherwise all data is copied into owned arrays.
    :raises SchemaVersionError: if the artifact has been written with another schema version
    :raises CorruptDataError: on any structural inconsistency
    """
    view = memoryview(data)
    flags, _ = read_header(view)
    payload = view[HEADER_SIZE:]
    if flags & FLAG_ZSTD_COMPRESSED:
        payload = decompress_bytes(payload)

    try:
        root = RegionCacheTable.GetRootAs(payload, 0)
        precision = _PRECISION_BY_CODE.get(root.Precision())
        if precision is None:
            raise CorruptDataError(f"unknown coordinate precision code {root.Precision()}")
        dataset = _decode_string(root.Dataset())
        if dataset is None:
            raise CorruptDataError("cache without dataset name")
        records = tuple(
            _read_record(root.Records(i), i, precision, zero_copy)
            for i in range(root.RecordsLength())
        )
        index = _read_index(root.Index(), len(records), zero_copy)
        epsilon = root.Epsilon()
    except (struct.error, IndexError, ValueError, TypeError, UnicodeDecodeError) as exc:
        raise CorruptDataError(f"malformed cache payload: {exc}") from exc

    logger.debug(
        "decoded cache %r: %d records, %d index cells (zero copy: %s)",
        dataset,
        len(records),
        len(index),
        zero_copy,
    )
    return RegionCache(
        dataset=dataset,
        precision=precision,
        epsilon=epsilon,
        records=records,
        index=index,
        schema_version=SCHEMA_VERSION,
        zero_copy=zero_copy,
        buffer=payload if zero_copy else None,
    )


# FILES


def read_cache_file(file_path: Union[str, Path]) -> bytes:
    try:
        with open(file_path, "rb") as fp:
            return fp.read()
    except OSError as exc:
        raise DataIOError(f"cannot read the cache artifact {file_path}: {exc}") from exc


def write_cache_file(data: bytes, file_path: Union[str, Path]) -> Path:
    """
    write the artifact atomically: a temporary file in the target directory is renamed.
    on failure no (partial) artifact exists at ``file_path``

    :raises DataIOError: if writing fails
    """
    file_path = Path(file_path)
    try:
        file_path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{file_path.name}.", suffix=".tmp", dir=file_path.parent
        )
    except OSError as exc:
        raise DataIOError(f"cannot write the cache artifact {file_path}: {exc}") from exc

    try:
        with os.fdopen(fd, "wb") as fp:
            fp.write(data)
            fp.flush()
            os.fsync(fp.fileno())
        os.chmod(tmp_name, 0o644)
        os.replace(tmp_name, file_path)
    except OSError as exc:
        raise DataIOError(f"cannot write the cache artifact {file_path}: {exc}") from exc
    finally:
        if os.path.exists(tmp_name):
            os.remove(tmp_name)
    logger.info("wrote %d bytes to %s", len(data), file_path)
    return file_path
