from typing import Iterable, Iterator

__all__ = [
    "SexRegistry",
]


class SexRegistry:
    """
    Bidirectional mapping of sex labels (e.g. "M", "F") to dense integer IDs, assigned from 0 in first-seen order.
    Labels are case-sensitive and are never removed, so an ID stays valid for the lifetime of the registry.
    """

    def __init__(self, labels: Iterable[str] = ()):
        self._id_to_label: list[str] = []
        self._label_to_id: dict[str, int] = {}

        for label in labels:
            self.get_or_create(label)

    def __len__(self) -> int:
        return len(self._id_to_label)

    def __contains__(self, label: str) -> bool:
        return label in self._label_to_id

    def __iter__(self) -> Iterator[str]:
        return iter(self._id_to_label)

    @property
    def labels(self) -> tuple[str, ...]:
        return tuple(self._id_to_label)

    def count(self) -> int:
        return len(self._id_to_label)

    def get_or_create(self, label: str) -> int:
        if (sex_id := self._label_to_id.get(label)) is not None:
            return sex_id

        sex_id = len(self._id_to_label)
        self._id_to_label.append(label)
        self._label_to_id[label] = sex_id
        return sex_id

    def id_of(self, label: str) -> int | None:
        return self._label_to_id.get(label)

    def label_of(self, sex_id: int) -> str | None:
        # Explicit bounds check; negative IDs must not wrap around to the end of the list.
        if sex_id < 0 or sex_id >= len(self._id_to_label):
            return None
        return self._id_to_label[sex_id]
