"""Grid bucket math and distance ranking for geospatial lookups."""

import math
from collections.abc import Callable, Iterable
from typing import TypeVar

T = TypeVar("T")

# (latitude index, longitude index)
BucketKey = tuple[int, int]


def bucket_range(value: float, pin: float) -> tuple[int, int]:
    """Floor and ceiling bucket index of a coordinate."""
    scaled = value / pin
    return math.floor(scaled), math.ceil(scaled)


def surrounding_buckets(lat: float, long: float, pin_lat: float, pin_long: float) -> list[BucketKey]:
    """The (up to) four buckets whose corners surround a point."""
    min_lat, max_lat = bucket_range(lat, pin_lat)
    min_long, max_long = bucket_range(long, pin_long)
    return [
        (min_lat, min_long),
        (min_lat, max_long),
        (max_lat, min_long),
        (max_lat, max_long),
    ]


def second_ring_buckets(lat: float, long: float, pin_lat: float, pin_long: float) -> list[BucketKey]:
    """The eight buckets bordering the surrounding four, excluding diagonals."""
    min_lat, max_lat = bucket_range(lat, pin_lat)
    min_long, max_long = bucket_range(long, pin_long)
    return [
        (min_lat - 1, min_long),
        (min_lat - 1, max_long),
        (min_lat, min_long - 1),
        (min_lat, max_long + 1),
        (max_lat + 1, min_long),
        (max_lat + 1, max_long),
        (max_lat, min_long - 1),
        (max_lat, max_long + 1),
    ]


def covering_buckets(
    min_lat: float,
    max_lat: float,
    min_long: float,
    max_long: float,
    pin_lat: float,
    pin_long: float,
) -> list[BucketKey]:
    """Every bucket touched by a bounding box, row by row."""
    lat_start = math.floor(min_lat / pin_lat)
    lat_end = math.ceil(max_lat / pin_lat)
    long_start = math.floor(min_long / pin_long)
    long_end = math.ceil(max_long / pin_long)
    return [
        (lat_index, long_index)
        for lat_index in range(lat_start, lat_end + 1)
        for long_index in range(long_start, long_end + 1)
    ]


def distance_squared(lat_a: float, long_a: float, lat_b: float, long_b: float) -> float:
    x = lat_a - lat_b
    y = long_a - long_b
    return x * x + y * y


def nearest_first(
    items: Iterable[T],
    lat: float | None,
    long: float | None,
    location: Callable[[T], tuple[float, float]],
) -> list[T]:
    """
    Sort items by ascending squared distance from a point.

    Without a reference point the input order is kept.
    """
    items = list(items)
    if lat is None or long is None:
        return items
    return sorted(items, key=lambda item: distance_squared(*location(item), lat, long))


def farthest_first(
    items: Iterable[T],
    lat: float | None,
    long: float | None,
    location: Callable[[T], tuple[float, float]],
) -> list[T]:
    """Reverse of nearest_first, so the nearest item is processed last."""
    items = list(items)
    if lat is None or long is None:
        return items
    return nearest_first(items, lat, long, location)[::-1]
