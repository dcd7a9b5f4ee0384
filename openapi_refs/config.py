from typing import Optional
from dataclasses import dataclass
import fnmatch
import re

from .exception import InvalidFilterException
from .resolve import MAX_HOPS


# Implement gtest-like filter, applied to pointers:
#    https://google.github.io/googletest/advanced.html#running-a-subset-of-the-tests
class PointerFilter:
    FILTER_SEP = "~"
    PATTERN_SEP = ":"

    def __init__(self, filter_pattern: str):
        tokens = filter_pattern.split(self.FILTER_SEP)
        if len(tokens) == 1:
            include_pattern = tokens[0]
            exclude_pattern = ""
        elif len(tokens) == 2:
            include_pattern, exclude_pattern = tokens
        else:
            raise InvalidFilterException(f"Separator {self.FILTER_SEP} must only occur once")
        self.includes = [re.compile(fnmatch.translate(i)) for i in include_pattern.split(self.PATTERN_SEP) if i.strip()]
        self.excludes = [re.compile(fnmatch.translate(i)) for i in exclude_pattern.split(self.PATTERN_SEP) if i.strip()]

    def selects(self, pointer: str) -> bool:
        if self.includes and not any(i.match(pointer) for i in self.includes):
            return False
        if self.excludes and any(i.match(pointer) for i in self.excludes):
            return False
        return True


@dataclass
class CheckConfig:
    max_hops: int = MAX_HOPS
    filter: Optional[PointerFilter] = None

    def __post_init__(self):
        if self.max_hops < 1:
            raise ValueError(f"max_hops must be at least 1, got {self.max_hops}")
