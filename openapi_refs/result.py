from typing import Iterator, List, Optional, Union
from contextlib import contextmanager
from enum import Enum


class Level(Enum):
    INFO = 0
    WARNING = 1
    ERROR = 2

    def __or__(self, other: "Level") -> "Level":
        return Level(max(self.value, other.value))


_COLORS = {
    Level.INFO: "\033[92m",
    Level.WARNING: "\033[93m",
    Level.ERROR: "\033[91m",
}
_ENDC = "\033[0m"


class CheckResult:
    """
    Node of a reference check report.
    Site nodes carry the pointer and the json path location of the reference,
    outcome nodes carry the resolution chain that was followed.
    """

    def __init__(
        self,
        message: str,
        level: Level = Level.INFO,
        pointer: Optional[str] = None,
        location: Optional[str] = None,
        chain: Optional[List[str]] = None,
    ):
        self.message = message
        self.level = level
        self.pointer = pointer
        self.location = location
        self.chain = chain
        self.sub_results: List[CheckResult] = []

    def append(self, result: "CheckResult"):
        self.sub_results.append(result)
        self.level = self.level | result.level

    def ok(self) -> bool:
        return self.level != Level.ERROR

    def dump(self):
        for line in self.to_lines():
            print(line)

    def to_lines(self, indent=0) -> Iterator[str]:
        yield "   " * indent + _COLORS[self.level] + self.message + _ENDC
        for sub_result in self.sub_results:
            yield from sub_result.to_lines(indent + 1)

    def to_dict(self) -> dict:
        data = {
            "m": self.message,
            "l": self.level.value,
            "s": [i.to_dict() for i in self.sub_results],
        }
        for key in ("pointer", "location", "chain"):
            value = getattr(self, key)
            if value is not None:
                data[key] = value
        return data


class ResultException(Exception):
    def __init__(self, result: CheckResult) -> None:
        self.result = result


_open: List[CheckResult] = []


def _as_result(message: Union[str, CheckResult], level: Level) -> CheckResult:
    if isinstance(message, CheckResult):
        return message
    return CheckResult(message, level)


@contextmanager
def start(message: Union[str, CheckResult]) -> Iterator[CheckResult]:
    """
    Opens a result which collects everything written or aborted inside the block.
    On exit it is appended to the enclosing result, if any.
    """
    result = _as_result(message, Level.INFO)
    _open.append(result)
    try:
        yield result
    except ResultException as e:
        result.append(e.result)
    finally:
        _open.pop()
    if _open:
        _open[-1].append(result)


def write(message: Union[str, CheckResult]):
    if not _open:
        raise RuntimeError("No open result")
    _open[-1].append(_as_result(message, Level.INFO))


def abort(message: Union[str, CheckResult]):
    raise ResultException(_as_result(message, Level.ERROR))
