import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import numpy as np

from regionfinder import utils
from regionfinder.cache import RegionCache, RegionRecord
from regionfinder.configs import MAX_LNG_VAL, CoordLists, CoordPairs
from regionfinder.geometry import Containment

logger = logging.getLogger(__name__)


class RegionFinder:
    """
    looks up the regions (timezones, administrative areas...) containing a point

    the candidate records are fetched from the spatial index of the cache ("shortcuts")
    and checked with an exact point in polygon test.
    all results are ordered by ascending record id.

    NOTE: a RegionFinder never modifies its cache:
    any number of threads may query the same instance concurrently without locking
    """

    # prevent dynamic attribute assignment (-> safe memory)
    __slots__ = ["cache", "include_boundary", "_accepted"]

    def __init__(self, cache: RegionCache, include_boundary: bool = True):
        """
        :param cache: the loaded region cache (shared, read only)
        :param include_boundary: whether points on the outline of a region match the region
        """
        self.cache = cache
        self.include_boundary = include_boundary
        if include_boundary:
            self._accepted = (Containment.INSIDE, Containment.ON_BOUNDARY)
        else:
            self._accepted = (Containment.INSIDE,)

    @classmethod
    def from_bytes(cls, data, zero_copy: bool = False, **kwargs) -> "RegionFinder":
        return cls(RegionCache.from_bytes(data, zero_copy=zero_copy), **kwargs)

    @classmethod
    def from_file(
        cls, path: Union[str, Path], zero_copy: bool = False, **kwargs
    ) -> "RegionFinder":
        cache = RegionCache.from_file(path, zero_copy=zero_copy)
        logger.info("loaded %d records of dataset %r from %s", len(cache), cache.dataset, path)
        return cls(cache, **kwargs)

    @classmethod
    def from_package_data(cls, name: str, **kwargs) -> "RegionFinder":
        return cls(RegionCache.from_package_data(name), **kwargs)

    @property
    def nr_of_records(self) -> int:
        return len(self.cache.records)

    @property
    def dataset(self) -> str:
        return self.cache.dataset

    def get_record(self, record_id: int) -> RegionRecord:
        """
        :raises ValueError: if there is no record with the given id
        """
        if not 0 <= record_id < self.nr_of_records:
            raise ValueError(f"record id {record_id} out of range [0, {self.nr_of_records})")
        return self.cache.records[record_id]

    def get_records(self, identifier: str) -> List[RegionRecord]:
        """:return: all records with the given identifier (several only for unmerged datasets)"""
        return [rec for rec in self.cache.records if rec.identifier == identifier]

    def candidates(self, *, lng: float, lat: float) -> np.ndarray:
        """
        :param lng: longitude of the point in degree (-180.0 to 180.0)
        :param lat: latitude in degree (90.0 to -90.0)
        :return: the ids of all records which might contain the point (ascending)

        NOTE: the same points as in ``lookup()`` are queried (quantised, both sides of the antimeridian)
        """
        lng, lat = utils.validate_coordinates(lng, lat)
        index = self.cache.index
        results = [
            index.candidates(lng_q, lat_q) for lng_q, lat_q, _, _ in self._quantised_points(lng, lat)
        ]
        if len(results) == 1:
            return results[0]
        return np.union1d(*results).astype(results[0].dtype, copy=False)

    def _quantised_points(self, lng: float, lat: float):
        """
        :return: the points to test as (degree lng, degree lat, lng, lat in storage unit)

        NOTE: the longitudes -180 and 180 denote the same meridian. both representations are tested
        """
        precision = self.cache.precision
        x, y = utils.quantise_point(lng, lat, precision)
        # the index is queried with the quantised point -> consistent with the stored bounding boxes
        points = [(utils.to_degree(x, precision), utils.to_degree(y, precision), x, y)]
        if abs(lng) == MAX_LNG_VAL:
            x_opposite, _ = utils.quantise_point(-lng, lat, precision)
            points.append((utils.to_degree(x_opposite, precision), points[0][1], x_opposite, y))
        return points

    def lookup(self, *, lng: float, lat: float) -> List[RegionRecord]:
        """
        finds all regions containing the given point

        :param lng: longitude of the point in degree (-180.0 to 180.0)
        :param lat: latitude in degree (90.0 to -90.0)
        :return: the matching records ordered by ascending id. empty if no region matches
        :raises OutOfRangeError: if the coordinates are out of bounds
        """
        lng, lat = utils.validate_coordinates(lng, lat)
        records = self.cache.records
        index = self.cache.index
        matches: Dict[int, RegionRecord] = {}
        for lng_q, lat_q, x, y in self._quantised_points(lng, lat):
            for record_id in index.candidates(lng_q, lat_q).tolist():
                if record_id in matches:
                    continue
                record = records[record_id]
                if record.containment(x, y) in self._accepted:
                    matches[record_id] = record
        return [matches[record_id] for record_id in sorted(matches)]

    def lookup_slow(self, *, lng: float, lat: float) -> List[RegionRecord]:
        """
        same as ``lookup()``, but without the spatial index: every record is tested

        NOTE: only for verifying the index
        """
        lng, lat = utils.validate_coordinates(lng, lat)
        matches = []
        for record in self.cache.records:
            for _, _, x, y in self._quantised_points(lng, lat):
                if record.containment(x, y) in self._accepted:
                    matches.append(record)
                    break
        return matches

    def lookup_properties(self, *, lng: float, lat: float) -> List[Dict[str, Any]]:
        """
        :return: the public representation of all matching records:
            {id, identifier, description?, dst_description?, offset?, zone?, raw_offset?, raw_dst_offset?, level?}
        """
        return [rec.properties() for rec in self.lookup(lng=lng, lat=lat)]

    def region_at(self, *, lng: float, lat: float) -> Optional[RegionRecord]:
        """
        single result API: the match with the lowest record id

        NOTE: overlapping regions are not ranked, the first record of ``lookup()`` is returned

        :return: the matching record or None
        """
        matches = self.lookup(lng=lng, lat=lat)
        if len(matches) == 0:
            return None
        return matches[0]

    def region_name_at(self, *, lng: float, lat: float) -> Optional[str]:
        """
        :return: the identifier of the first matching region or None
        """
        record = self.region_at(lng=lng, lat=lat)
        if record is None:
            return None
        return record.identifier

    def get_geometry(
        self, identifier: str, coords_as_pairs: bool = False
    ) -> List[List[Union[CoordPairs, CoordLists]]]:
        """
        retrieves the geometry of a region (in degree)

        output format:
            [ [polygon1, hole1, hole2...], [polygon2, ...], ...]
            and each polygon and hole is itself formatted like: ([longitudes], [latitudes])
            or [(lng1,lat1), (lng2,lat2),...] if ``coords_as_pairs=True``.

        :param identifier: the identifier of the region
        :param coords_as_pairs: determines the structure of the polygon representation
        :return: the polygons of all records with this identifier
        :raises ValueError: if there is no region with this identifier
        """
        records = self.get_records(identifier)
        if len(records) == 0:
            raise ValueError(f"there is no region with the identifier {identifier!r}")
        if coords_as_pairs:
            conversion_method = utils.convert2coord_pairs
        else:
            conversion_method = utils.convert2coords
        return [
            [conversion_method(ring) for ring in polygon.rings]
            for record in records
            for polygon in record.polygons
        ]

    def to_geojson(self) -> Dict[str, Any]:
        """
        exports the loaded regions as GeoJSON feature collection (coordinates in degree)

        one feature per record, in the order of the record ids.
        the properties are the query representation of the records (cf. ``lookup_properties()``),
        hence the export can be read again with the "generic" dataset variant.

        NOTE: the geometry is the stored one (simplified and quantised)
        """
        features = []
        for record in self.cache.records:
            polygons = [
                [_ring_coordinates(ring) for ring in polygon.rings] for polygon in record.polygons
            ]
            if len(polygons) == 1:
                geometry = {"type": "Polygon", "coordinates": polygons[0]}
            else:
                geometry = {"type": "MultiPolygon", "coordinates": polygons}
            features.append(
                {
                    "type": "Feature",
                    "id": record.id,
                    "properties": record.properties(),
                    "geometry": geometry,
                }
            )
        return {"type": "FeatureCollection", "features": features}

    def cleanup(self) -> None:
        """drop the reference to the cache (and to the buffer of zero copy caches)"""
        self.cache = None

    def __enter__(self):
        """Enter the runtime context for the RegionFinder."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Exit the runtime context and clean up resources."""
        self.cleanup()
        return False


def _ring_coordinates(ring: np.ndarray) -> List[List[float]]:
    # GeoJSON positions [[x1, y1], [x2, y2], ...]
    x_coords, y_coords = utils.convert2coords(ring)
    return [[x, y] for x, y in zip(x_coords, y_coords)]


# the query engine operating on a loaded cache
LookupEngine = RegionFinder
