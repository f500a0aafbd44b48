"""
offline cache builder: source dataset (GeoJSON) -> simplified geometry -> records -> spatial index -> artifact

pipeline:
    1. read and validate the features of the source dataset (single threaded)
    2. per feature geometry processing in a worker pool:
        simplification, quantisation to the storage precision, validation, orientation, bounding boxes
    3. merge fragments sharing an identifier (fine grained datasets split regions into several features),
        the metadata of the largest fragment wins
    4. assign record ids in the order of the first appearance of each identifier
    5. build the spatial index and encode the cache (single threaded)

IMPORTANT: the worker results are consumed in input order,
    hence the output is byte identical no matter how many workers are used.
a build either succeeds completely or raises, an artifact is never written partially.
"""
import json
import logging
from collections.abc import Mapping
from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, NamedTuple, Optional, Sequence, Tuple, Union

import numpy as np
from pydantic import ValidationError

from regionfinder import utils
from regionfinder.cache import RegionCache, RegionRecord, degree_boxes
from regionfinder.configs import MAX_LAT_VAL, MAX_LNG_VAL
from regionfinder.datasets import BuildConfig, FeatureCollection, RegionProperties
from regionfinder.errors import DataIOError, DatasetError, GeometryError
from regionfinder.flatbuf.io.cache import encode_cache, write_cache_file
from regionfinder.geometry import (
    Box,
    Polygon,
    bounding_boxes,
    multipolygon_area,
    orient_polygon,
    simplify,
    validate_ring,
)
from regionfinder.spatial_index import SpatialIndex

logger = logging.getLogger(__name__)

Source = Union[str, Path, Mapping, Sequence[Union[str, Path, Mapping]]]
PolygonCoordinates = List[List[List[float]]]


class SourceFeature(NamedTuple):
    feature_nr: int
    properties: RegionProperties
    polygons: List[PolygonCoordinates]


class GeometryTask(NamedTuple):
    feature_nr: int
    identifier: str
    polygons: List[PolygonCoordinates]
    epsilon: float
    precision: str


class ProcessedGeometry(NamedTuple):
    polygons: Tuple[Polygon, ...]
    boxes: Tuple[Box, ...]
    area: float


@dataclass(frozen=True)
class Fragment:
    properties: RegionProperties
    polygons: Tuple[Polygon, ...]
    boxes: Tuple[Box, ...]
    area: float

    @property
    def identifier(self) -> str:
        return self.properties.identifier


# READING


def read_json(path: Union[str, Path]) -> Any:
    logger.info("reading source dataset %s", path)
    try:
        with open(path, encoding="utf-8") as fp:
            return json.load(fp)
    except OSError as exc:
        raise DataIOError(f"cannot read the source dataset {path}: {exc}") from exc
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise DatasetError(f"source dataset {path} is not valid JSON: {exc}") from exc


def load_feature_collections(source: Source) -> List[Dict[str, Any]]:
    """
    :param source: path to a GeoJSON FeatureCollection, an already loaded collection
        or a sequence of those (the features are concatenated in order)
    :return: all raw features
    """
    if isinstance(source, (str, Path, Mapping)):
        sources: Sequence = [source]
    else:
        sources = source
    features: List[Dict[str, Any]] = []
    for src in sources:
        document = src if isinstance(src, Mapping) else read_json(src)
        try:
            collection = FeatureCollection.model_validate(document)
        except ValidationError as exc:
            raise DatasetError(f"invalid feature collection: {exc}") from exc
        features.extend(collection.features)
    return features


def parse_features(raw_features: Iterable[Dict[str, Any]], config: BuildConfig) -> List[SourceFeature]:
    """
    :raises DatasetError: for malformed features (e.g. a missing identifier)
    """
    model = config.feature_model
    parsed = []
    for feature_nr, raw_feature in enumerate(raw_features):
        try:
            feature = model.model_validate(raw_feature)
        except ValidationError as exc:
            raise DatasetError(f"feature {feature_nr} is malformed: {exc}") from exc
        parsed.append(
            SourceFeature(
                feature_nr=feature_nr,
                properties=feature.region_properties(),
                polygons=feature.polygon_coordinates(),
            )
        )
    return parsed


# GEOMETRY PROCESSING (runs in the worker processes)


def to_ring_array(ring: List[List[float]]) -> np.ndarray:
    """convert GeoJSON positions [[x, y(, z)], ...] into a degree ring of shape (2, N)"""
    if any(len(position) < 2 for position in ring):
        raise GeometryError("ring position with less than two coordinates")
    coords = np.array([position[:2] for position in ring], dtype=np.float64).reshape(-1, 2).T
    if not np.all(np.isfinite(coords)):
        raise GeometryError("ring with non finite coordinates")
    if np.any(np.abs(coords[0]) > MAX_LNG_VAL) or np.any(np.abs(coords[1]) > MAX_LAT_VAL):
        raise GeometryError("ring coordinates out of the valid lng/lat range")
    return np.ascontiguousarray(coords)


def prepare_ring(ring: List[List[float]], epsilon: float, precision: str) -> np.ndarray:
    """simplify, quantise and validate a single ring"""
    degree_ring = simplify(to_ring_array(ring), epsilon)
    return validate_ring(utils.quantise_array(degree_ring, precision))


def process_geometry(task: GeometryTask) -> ProcessedGeometry:
    """
    :raises GeometryError: for invalid or degenerate rings (annotated with the feature)
    """
    try:
        polygons = []
        for polygon_coords in task.polygons:
            if len(polygon_coords) == 0:
                raise GeometryError("polygon without exterior ring")
            rings = [prepare_ring(ring, task.epsilon, task.precision) for ring in polygon_coords]
            polygons.append(orient_polygon(Polygon(rings[0], tuple(rings[1:]))))
        if len(polygons) == 0:
            raise GeometryError("empty geometry")
    except GeometryError as exc:
        raise GeometryError(f"feature {task.feature_nr} ({task.identifier!r}): {exc}") from exc
    polygons = tuple(polygons)
    return ProcessedGeometry(
        polygons=polygons,
        boxes=bounding_boxes(polygons),
        area=multipolygon_area(polygons),
    )


def _polygon_key(polygon: Polygon) -> Tuple[bytes, ...]:
    return tuple(ring.tobytes() for ring in polygon.rings)


def merge_fragments(fragments: Sequence[Fragment]) -> List[Fragment]:
    """
    merge all fragments with the same identifier into one fragment

    the merged fragments keep the position of the first appearance of their identifier.
    polygons are concatenated in source order, exact duplicates are dropped.
    the metadata is taken from the fragment with the largest area (ties: the first one).
    """
    groups: Dict[str, List[Fragment]] = {}
    for fragment in fragments:
        groups.setdefault(fragment.identifier, []).append(fragment)

    merged = []
    for identifier, group in groups.items():
        if len(group) == 1:
            merged.append(group[0])
            continue
        primary = group[0]
        for fragment in group[1:]:
            if fragment.area > primary.area:
                primary = fragment
        seen = set()
        polygons = []
        boxes = []
        for fragment in group:
            for polygon, box in zip(fragment.polygons, fragment.boxes):
                key = _polygon_key(polygon)
                if key in seen:
                    continue
                seen.add(key)
                polygons.append(polygon)
                boxes.append(box)
        polygons = tuple(polygons)
        logger.debug("merged %d fragments of %r", len(group), identifier)
        merged.append(
            Fragment(
                properties=primary.properties,
                polygons=polygons,
                boxes=tuple(boxes),
                area=multipolygon_area(polygons),
            )
        )
    return merged


class CacheBuilder:
    """
    builds region caches from source datasets

    usage::

        builder = CacheBuilder(BuildConfig(dataset="osm_tz", workers=4))
        builder.build_file("combined.json", "timezones.rgnc")
    """

    def __init__(self, config: Optional[BuildConfig] = None, **kwargs):
        """
        :param config: the build configuration
        :param kwargs: fields of a ``BuildConfig``, only used if no config is given
        """
        if config is None:
            config = BuildConfig(**kwargs)
        elif kwargs:
            raise TypeError("pass either a BuildConfig or its fields as keyword arguments")
        self.config = config

    def process_features(self, features: Sequence[SourceFeature]) -> List[Fragment]:
        tasks = [
            GeometryTask(
                feature_nr=feature.feature_nr,
                identifier=feature.properties.identifier,
                polygons=feature.polygons,
                epsilon=self.config.epsilon,
                precision=self.config.precision,
            )
            for feature in features
        ]
        workers = min(self.config.workers, max(len(tasks), 1))
        logger.info("processing %d features with %d worker(s)", len(tasks), workers)
        if workers == 1:
            results = [process_geometry(task) for task in tasks]
        else:
            chunksize = max(1, len(tasks) // (workers * 4))
            with ProcessPoolExecutor(max_workers=workers) as executor:
                # NOTE: map() yields the results in input order
                results = list(executor.map(process_geometry, tasks, chunksize=chunksize))
        return [
            Fragment(
                properties=feature.properties,
                polygons=result.polygons,
                boxes=result.boxes,
                area=result.area,
            )
            for feature, result in zip(features, results)
        ]

    def assemble(self, fragments: Sequence[Fragment]) -> RegionCache:
        """assign the record ids (= position) and build the spatial index"""
        records = tuple(
            RegionRecord(
                id=record_id,
                identifier=fragment.properties.identifier,
                polygons=fragment.polygons,
                boxes=fragment.boxes,
                description=fragment.properties.description,
                dst_description=fragment.properties.dst_description,
                raw_offset=fragment.properties.raw_offset,
                raw_dst_offset=fragment.properties.raw_dst_offset,
                level=fragment.properties.level,
                offset=fragment.properties.offset,
                zone=fragment.properties.zone,
            )
            for record_id, fragment in enumerate(fragments)
        )
        index = SpatialIndex.build(
            degree_boxes(records, self.config.precision), self.config.cell_size
        )
        return RegionCache(
            dataset=self.config.dataset,
            precision=self.config.precision,
            epsilon=self.config.epsilon,
            records=records,
            index=index,
        )

    @utils.time_execution
    def build_cache(self, source: Source) -> RegionCache:
        """
        :raises DataIOError: if the source cannot be read
        :raises DatasetError: for malformed features
        :raises GeometryError: for invalid rings
        """
        features = parse_features(load_feature_collections(source), self.config)
        if len(features) == 0:
            raise DatasetError("the source dataset contains no features")
        fragments = self.process_features(features)
        if self.config.should_merge_fragments:
            fragments = merge_fragments(fragments)
        cache = self.assemble(fragments)
        log_statistics(cache)
        return cache

    def build_bytes(self, source: Source) -> bytes:
        """:return: the artifact, e.g. for embedding into a package"""
        return encode_cache(self.build_cache(source), compress=self.config.compress)

    def build_file(self, source: Source, output_path: Union[str, Path]) -> Path:
        # NOTE: the artifact is only written after everything else succeeded
        return write_cache_file(self.build_bytes(source), output_path)


def log_statistics(cache: RegionCache) -> None:
    nr_of_polygons = sum(rec.nr_of_polygons for rec in cache.records)
    nr_of_coords = sum(rec.nr_of_coords for rec in cache.records)
    stats = cache.index.stats()
    logger.info(
        "built %d records (%d polygons, %d coordinates) with epsilon %s",
        len(cache.records),
        nr_of_polygons,
        nr_of_coords,
        cache.epsilon,
    )
    logger.info(
        "spatial index: %d non empty cells of %s degree, %.2f candidates per cell on average, %d at most",
        stats.nr_of_cells,
        cache.index.cell_size,
        stats.avg_candidates,
        stats.max_candidates,
    )


def build_cache_file(source: Source, output_path: Union[str, Path], **config) -> Path:
    """convenience function: build a cache artifact with the given ``BuildConfig`` fields"""
    return CacheBuilder(BuildConfig(**config)).build_file(source, output_path)
