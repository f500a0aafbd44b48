import tempfile
from pathlib import Path

from regionfinder import CacheBuilder, RegionFinder


def square(xmin, ymin, xmax, ymax):
    return [[xmin, ymin], [xmax, ymin], [xmax, ymax], [xmin, ymax], [xmin, ymin]]


dataset = {
    "type": "FeatureCollection",
    "features": [
        {
            "type": "Feature",
            "properties": {"tzid": "Europe/Berlin", "raw_offset": 3600, "raw_dst_offset": 7200},
            "geometry": {"type": "Polygon", "coordinates": [square(6.0, 47.0, 15.0, 55.0)]},
        },
        {
            "type": "Feature",
            "properties": {"tzid": "Europe/Paris", "raw_offset": 3600, "raw_dst_offset": 7200},
            "geometry": {"type": "Polygon", "coordinates": [square(-5.0, 42.0, 6.0, 51.0)]},
        },
    ],
}

with tempfile.TemporaryDirectory() as tmp_dir:
    # offline: build the cache artifact once
    builder = CacheBuilder(dataset="osm_tz", workers=1, compress=True)
    cache_file = builder.build_file(dataset, Path(tmp_dir) / "timezones.rgnc")

    # online: load the artifact and query it
    with RegionFinder.from_file(cache_file) as finder:
        longitude, latitude = 13.358, 52.5061
        print(finder.region_name_at(lng=longitude, lat=latitude))  # 'Europe/Berlin'
        print(finder.lookup_properties(lng=longitude, lat=latitude))

        # points on the border belong to both regions
        print([rec.identifier for rec in finder.lookup(lng=6.0, lat=49.0)])

        # no region
        print(finder.region_at(lng=0.0, lat=0.0))  # None

        try:
            finder.lookup(lng=200.0, lat=0.0)
        except ValueError:
            # the coordinates were out of bounds
            print("out of bounds")
