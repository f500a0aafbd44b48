"""
sample datasets for the tests

COARSE: Natural Earth style ("ned") time zones, simple rectangles with a few redundant (collinear) vertices
FINE: timezone-boundary-builder style ("osm_tz") time zones with holes, overlaps, fragments and duplicates
"""
from typing import Any, Dict, List, Optional, Sequence

import numpy as np

Ring = List[List[float]]


def rectangle(xmin: float, ymin: float, xmax: float, ymax: float, nr_steps: int = 1) -> Ring:
    """a closed counter clockwise ring. ``nr_steps`` > 1 adds collinear points on every edge"""
    corners = [(xmin, ymin), (xmax, ymin), (xmax, ymax), (xmin, ymax), (xmin, ymin)]
    ring = []
    for (x1, y1), (x2, y2) in zip(corners[:-1], corners[1:]):
        for step in range(nr_steps):
            fraction = step / nr_steps
            ring.append([x1 + fraction * (x2 - x1), y1 + fraction * (y2 - y1)])
    ring.append([xmin, ymin])
    return ring


def polygon_geometry(exterior: Ring, *holes: Ring) -> Dict[str, Any]:
    return {"type": "Polygon", "coordinates": [exterior, *holes]}


def multipolygon_geometry(*polygons: Sequence[Ring]) -> Dict[str, Any]:
    return {"type": "MultiPolygon", "coordinates": [list(poly) for poly in polygons]}


def feature(properties: Dict[str, Any], geometry: Dict[str, Any]) -> Dict[str, Any]:
    return {"type": "Feature", "properties": properties, "geometry": geometry}


def feature_collection(features: List[Dict[str, Any]]) -> Dict[str, Any]:
    return {"type": "FeatureCollection", "features": features}


def ned_feature(
    tz_name: Optional[str], zone: float, time_zone: str, places: str, geometry
) -> Dict[str, Any]:
    properties = {
        "tz_name1st": tz_name,
        "zone": zone,
        "time_zone": time_zone,
        "places": places,
        "dst_places": None,
    }
    return feature(properties, geometry)


def osm_feature(tzid: str, geometry, raw_offset=None, raw_dst_offset=None) -> Dict[str, Any]:
    properties: Dict[str, Any] = {"tzid": tzid}
    if raw_offset is not None:
        properties["raw_offset"] = raw_offset
    if raw_dst_offset is not None:
        properties["raw_dst_offset"] = raw_dst_offset
    return feature(properties, geometry)


def coarse_dataset() -> Dict[str, Any]:
    return feature_collection(
        [
            ned_feature(
                "America/Chicago",
                -6,
                "UTC-06:00",
                "Chicago, Houston, Winnipeg",
                polygon_geometry(rectangle(-105.0, 28.0, -85.0, 49.0, nr_steps=4)),
            ),
            ned_feature(
                "America/New_York",
                -5,
                "UTC-05:00",
                "New York, Toronto",
                polygon_geometry(rectangle(-85.0, 25.0, -67.0, 48.0, nr_steps=3)),
            ),
            ned_feature(
                "Africa/Cairo",
                2,
                "UTC+02:00",
                "Egypt",
                polygon_geometry(rectangle(25.0, 22.0, 35.0, 32.0, nr_steps=5)),
            ),
            ned_feature(
                None,
                -3,
                "UTC-03:00",
                "Brazil",
                polygon_geometry(rectangle(-60.0, -30.0, -40.0, -10.0)),
            ),
            ned_feature(
                "Asia/Kolkata",
                5.5,
                "UTC+05:30",
                "India",
                polygon_geometry(rectangle(68.0, 8.0, 89.0, 30.0, nr_steps=2)),
            ),
            ned_feature(
                "Antarctica/McMurdo",
                12,
                "UTC+12:00",
                "Antarctica",
                polygon_geometry(rectangle(-180.0, -90.0, 180.0, -60.0)),
            ),
        ]
    )


# hole of Asia/Shanghai, filled by Asia/Hong_Kong
HOLE = rectangle(110.0, 30.0, 112.0, 32.0)
# the hole with clockwise orientation
HOLE_CW = HOLE[::-1]


def fine_dataset() -> Dict[str, Any]:
    shanghai_island = rectangle(121.0, 24.0, 122.0, 25.0)
    return feature_collection(
        [
            osm_feature(
                "Asia/Shanghai",
                polygon_geometry(rectangle(100.0, 20.0, 120.0, 40.0, nr_steps=4), HOLE_CW),
                raw_offset=28800,
            ),
            osm_feature("Asia/Hong_Kong", polygon_geometry(HOLE), raw_offset=28800),
            # small fragment first: the metadata of the large fragment must win
            osm_feature(
                "Asia/Urumqi", polygon_geometry(rectangle(80.0, 40.0, 81.0, 41.0)), raw_offset=0
            ),
            osm_feature(
                "Asia/Urumqi",
                polygon_geometry(rectangle(85.0, 35.0, 105.0, 45.0)),
                raw_offset=21600,
            ),
            osm_feature("Asia/Shanghai", polygon_geometry(shanghai_island), raw_offset=0),
            # exact duplicate of the previous fragment
            osm_feature("Asia/Shanghai", polygon_geometry(shanghai_island), raw_offset=0),
            osm_feature(
                "America/Chicago",
                polygon_geometry(
                    [
                        [-91.5, 37.0],
                        [-87.0, 37.0],
                        [-87.0, 41.0],
                        [-87.4, 41.6],
                        [-87.5, 42.5],
                        [-91.5, 42.5],
                        [-91.5, 37.0],
                    ]
                ),
                raw_offset=-21600,
                raw_dst_offset=-18000,
            ),
            osm_feature(
                "Arctic/Longyearbyen",
                polygon_geometry(rectangle(-180.0, 78.0, 180.0, 90.0)),
                raw_offset=3600,
                raw_dst_offset=7200,
            ),
            osm_feature(
                "Pacific/Fiji",
                multipolygon_geometry(
                    [rectangle(177.0, -19.0, 180.0, -16.0)],
                    [rectangle(-180.0, -19.0, -178.0, -16.0)],
                ),
                raw_offset=43200,
            ),
        ]
    )


# expected record ids of the fine dataset (order of first appearance)
FINE_IDS = {
    "Asia/Shanghai": 0,
    "Asia/Hong_Kong": 1,
    "Asia/Urumqi": 2,
    "America/Chicago": 3,
    "Arctic/Longyearbyen": 4,
    "Pacific/Fiji": 5,
}


def random_points(nr_of_points: int, seed: int = 42) -> np.ndarray:
    """uniformly distributed points on the lng/lat plane, shape (nr_of_points, 2)"""
    rng = np.random.default_rng(seed)
    lngs = rng.uniform(-180.0, 180.0, nr_of_points)
    lats = rng.uniform(-90.0, 90.0, nr_of_points)
    return np.column_stack((lngs, lats))


def grid_points(xmin: float, ymin: float, xmax: float, ymax: float, step: float) -> List[tuple]:
    """a regular grid of points including the outline (hits cell and polygon boundaries)"""
    return [
        (round(float(x), 7), round(float(y), 7))
        for x in np.arange(xmin, xmax + step / 2, step)
        for y in np.arange(ymin, ymax + step / 2, step)
    ]
