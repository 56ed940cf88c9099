"""Shared level layouts and fakes for the test suite."""

# 5x5 levels solved by a single push to the right.
LEVEL_ONE = [
    "11111",
    "15341",
    "12221",
    "12221",
    "11111",
]
LEVEL_TWO = [
    "11111",
    "12221",
    "15341",
    "12221",
    "11111",
]


class FakeClock:
    def __init__(self, now: float = 0.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def write_map(directory, index, lines):
    path = directory / f"{index}.map"
    path.write_text("\n".join(lines) + "\n")
    return path
