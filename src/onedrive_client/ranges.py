# -*- coding: utf-8 -*-
"""
Byte range planning for upload sessions.

A plan splits [0, total_length) into contiguous ranges of range_size bytes,
the last one carrying the remainder. A zero-length upload still gets one
empty range advertised as "bytes 0-0/0".
"""

from dataclasses import dataclass

from .exceptions import InvalidConfiguration


@dataclass(frozen=True)
class RangeDescriptor:
    """One range of an upload: inclusive end offset, as sent in Content-Range"""
    start: int
    end: int
    total_length: int

    @property
    def length(self):
        if self.total_length == 0:
            return 0
        return self.end - self.start + 1

    @property
    def header_value(self):
        return f"bytes {self.start}-{self.end}/{self.total_length}"

    @property
    def is_last(self):
        return self.total_length == 0 or self.end == self.total_length - 1


class RangePlan:
    """
    Lazy, re-iterable sequence of RangeDescriptor.

    Iterating twice yields the same descriptors; nothing is cached between
    iterations.
    """

    def __init__(self, total_length, range_size):
        self.total_length = total_length
        self.range_size = range_size

    def __len__(self):
        if self.total_length == 0:
            return 1
        return -(-self.total_length // self.range_size)

    def __iter__(self):
        if self.total_length == 0:
            yield RangeDescriptor(0, 0, 0)
            return

        start = 0
        while start < self.total_length:
            end = min(start + self.range_size, self.total_length) - 1
            yield RangeDescriptor(start, end, self.total_length)
            start = end + 1

    def __repr__(self):
        return f"RangePlan(total_length={self.total_length}, range_size={self.range_size})"


def plan_ranges(total_length, range_size):
    """
    Plan the byte ranges of an upload.

    Args:
        total_length (int): Total number of bytes to upload (>= 0)
        range_size (int): Number of bytes per range (> 0)

    Returns:
        RangePlan: Re-iterable plan covering [0, total_length) exactly once

    Raises:
        InvalidConfiguration: If range_size is not a positive integer or
            total_length is negative
    """
    if isinstance(range_size, bool) or not isinstance(range_size, int) or range_size <= 0:
        raise InvalidConfiguration(f"Range size must be a positive integer, got {range_size!r}")
    if isinstance(total_length, bool) or not isinstance(total_length, int) or total_length < 0:
        raise InvalidConfiguration(f"Total length must be a non-negative integer, got {total_length!r}")
    return RangePlan(total_length, range_size)
