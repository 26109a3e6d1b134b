"""Declarative description of a content kind."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class CollectionSpec:
    """A child collection of a content kind.

    ``max_items`` of 1 marks a single-valued sub-section: an item submitted
    without an identity updates the persisted one instead of adding another.
    """

    name: str
    media_slots: tuple[str, ...] = ()
    max_items: int | None = None

    @property
    def single(self) -> bool:
        return self.max_items == 1


@dataclass(frozen=True)
class ContentKind:
    """Shape of one kind of content record."""

    name: str
    label: str
    upload_folder: str
    media_slots: tuple[str, ...] = ()
    collections: tuple[CollectionSpec, ...] = field(default_factory=tuple)

    def collection(self, name: str) -> CollectionSpec:
        for spec in self.collections:
            if spec.name == name:
                return spec
        raise KeyError(f"{self.name} has no collection '{name}'")

    @property
    def collection_names(self) -> tuple[str, ...]:
        return tuple(spec.name for spec in self.collections)
