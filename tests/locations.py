# for the coarse ("ned") test dataset:
COARSE_TEST_LOCATIONS = [
    # lat, lng, description, expected
    (41.88, -87.62, "Chicago", "America/Chicago"),
    (29.76, -95.37, "Houston", "America/Chicago"),
    (40.71, -74.01, "New York", "America/New_York"),
    (43.65, -79.38, "Toronto", "America/New_York"),
    (30.0, 30.0, "Nile delta", "Africa/Cairo"),
    (30.04, 31.24, "Cairo", "Africa/Cairo"),
    (-23.55, -46.63, "Sao Paulo", "UTC-03:00"),
    (22.57, 88.36, "Kolkata", "Asia/Kolkata"),
    (12.97, 77.59, "Bangalore", "Asia/Kolkata"),
    (-77.85, 166.67, "McMurdo Station", "Antarctica/McMurdo"),
    (-90.0, 0.0, "south pole", "Antarctica/McMurdo"),
    (0.0, -30.0, "atlantic ocean", None),
    (90.0, 0.0, "north pole", None),
    (35.0, 139.0, "Tokyo (not in the dataset)", None),
]

# for the fine ("osm_tz") test dataset:
FINE_TEST_LOCATIONS = [
    # lat, lng, description, expected
    (41.88, -87.62, "Chicago", "America/Chicago"),
    (38.63, -90.2, "St. Louis", "America/Chicago"),
    (31.0, 111.0, "inside the enclave", "Asia/Hong_Kong"),
    (30.0, 115.0, "around the enclave", "Asia/Shanghai"),
    (24.5, 121.5, "island", "Asia/Shanghai"),
    (43.8, 87.6, "Urumqi", "Asia/Urumqi"),
    (40.5, 80.5, "small fragment", "Asia/Urumqi"),
    (78.22, 15.65, "Longyearbyen", "Arctic/Longyearbyen"),
    (90.0, 0.0, "north pole", "Arctic/Longyearbyen"),
    (-17.5, 178.5, "Fiji east of the antimeridian", "Pacific/Fiji"),
    (-17.5, -179.0, "Fiji west of the antimeridian", "Pacific/Fiji"),
    (-17.0, 180.0, "antimeridian", "Pacific/Fiji"),
    (-17.0, -180.0, "antimeridian", "Pacific/Fiji"),
    (0.0, 0.0, "gulf of guinea", None),
    (-90.0, 0.0, "south pole", None),
]

# points with multiple matches, ordered by record id (fine dataset)
FINE_OVERLAP_LOCATIONS = [
    # lat, lng, description, expected
    (37.0, 102.0, "Shanghai/Urumqi overlap", ["Asia/Shanghai", "Asia/Urumqi"]),
    (35.0, 102.0, "overlap on the boundary of Urumqi", ["Asia/Shanghai", "Asia/Urumqi"]),
    (31.0, 110.0, "enclave boundary", ["Asia/Shanghai", "Asia/Hong_Kong"]),
    (30.0, 110.0, "enclave corner", ["Asia/Shanghai", "Asia/Hong_Kong"]),
]
