"""Entity descriptors bind a query to one entity type.

A descriptor carries the collection name, a factory producing blank
instances, and the declared prop names used to validate filter keys.
"""

from dataclasses import dataclass, field
from functools import partial
from typing import Any, Callable, Generic, TypeVar

from docmapper.domain.entities.fields import RESERVED_FIELDS

E = TypeVar("E")


@dataclass(frozen=True)
class EntityDescriptor(Generic[E]):
    """Collection name plus constructor for one entity type.

    Attributes:
        collection_name: Backing collection.
        factory: Callable accepting ``store=`` and ``hooks=`` keywords and
                 returning a blank entity.
        prop_names: Declared prop keys. Empty means schema-less, and any
                    filter key is accepted.
    """

    collection_name: str
    factory: Callable[..., E]
    prop_names: frozenset[str] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        if not self.collection_name:
            raise ValueError("Descriptor collection name is required")

    def new(self, store: Any = None, hooks: Any = None) -> E:
        """Produce a blank (transient) instance."""
        return self.factory(store=store, hooks=hooks)

    def accepts_key(self, key: str) -> bool:
        """Check that a filter or sort key names a known field."""
        return not self.prop_names or key in self.prop_names or key in RESERVED_FIELDS

    @classmethod
    def for_collection(cls, collection_name: str) -> "EntityDescriptor[Any]":
        """Descriptor for plain schema-less entities of one collection."""
        from docmapper.domain.entities.entity import Entity

        return cls(collection_name, partial(Entity, collection_name))


def descriptor_for(target: Any) -> EntityDescriptor[Any]:
    """Resolve an entity class or descriptor to a descriptor.

    Raises:
        TypeError: If target is neither.
    """
    if isinstance(target, EntityDescriptor):
        return target
    if isinstance(target, type) and hasattr(target, "descriptor"):
        return target.descriptor()
    raise TypeError(f"Expected an Entity subclass or EntityDescriptor, got {target!r}")
