from regionfinder import CacheBuilder, RegionFinder

dataset = {
    "type": "FeatureCollection",
    "features": [
        {
            "type": "Feature",
            "properties": {"identifier": "square with hole"},
            "geometry": {
                "type": "Polygon",
                "coordinates": [
                    [[0.0, 0.0], [4.0, 0.0], [4.0, 4.0], [0.0, 4.0], [0.0, 0.0]],
                    [[1.0, 1.0], [1.0, 2.0], [2.0, 2.0], [2.0, 1.0], [1.0, 1.0]],
                ],
            },
        }
    ],
}

finder = RegionFinder(CacheBuilder(workers=1).build_cache(dataset))

# Example using the region identifier
identifier = "square with hole"
geometry_as_pairs = finder.get_geometry(identifier, coords_as_pairs=True)
print(f"Geometry of region '{identifier}':\n{geometry_as_pairs}")

# Example using the record id
record = finder.get_record(0)
geometry = finder.get_geometry(record.identifier)
print(f"Geometry of record {record.id}:\n{geometry}")
