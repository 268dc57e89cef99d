from core.domain import StreamFragment, Usage


class UsageAccumulator:
    """Holds the most recent usage snapshot seen in a stream (last write wins)."""

    def __init__(self) -> None:
        self.snapshot: Usage = Usage.zero()

    def observe(self, fragment: StreamFragment) -> None:
        if fragment.usage is not None:
            self.snapshot = fragment.usage
