"""Shared constants for the meetzone core."""

CRS_WGS84 = "EPSG:4326"

# Approximate meters per degree at the equator, applied on both axes.
METERS_PER_DEGREE = 111_000

EARTH_RADIUS_M = 6_371_000

# Minimum number of distinct vertices a ring needs to enclose an area.
MIN_RING_VERTICES = 3
