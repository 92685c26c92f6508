"""Entity base class: one document with its lifecycle operations.

An entity owns an identifier, two timestamps and a schema-less props bag.
Its lifecycle is keyed on the identifier:

- Transient: ``id`` is None; only ``create()`` is allowed.
- Persisted: ``id`` is set; ``update()``, ``touch()`` and ``delete()`` are allowed.
- Deleted: the backing document was removed; the instance keeps its stale
  ``id`` and ``props`` and must not be reused.

Every operation is one round trip to the store connector. A store failure
raises StoreError and the after-hook for that operation is not triggered.

Subclasses name their collection and declare typed accessors:

    class User(Entity, collection="user"):
        name = Prop(str)
        age = Prop(int)

    user = User()
    user.name = "Ada"
    await user.create()
"""

import copy
import time
from datetime import datetime, timezone
from enum import Enum
from typing import Any, ClassVar, Generic, Optional, TypeVar, Union, overload

from docmapper.core.exceptions import InvalidStateError, NotFoundError, store_errors
from docmapper.core.hooks import HookEvent, HookRegistry
from docmapper.core.logging import get_logger
from docmapper.domain.entities.descriptor import EntityDescriptor
from docmapper.domain.entities.fields import (
    CREATED_AT_FIELD,
    ID_ALIAS,
    ID_FIELD,
    RESERVED_FIELDS,
    UPDATED_AT_FIELD,
)
from docmapper.domain.entities.hook_context import HookContext
from docmapper.infrastructure.hooks import get_hook_registry
from docmapper.infrastructure.persistence.connector import StoreConnector, get_default_store

logger = get_logger(__name__)

PropValue = Union[str, int, float, bool, None, list[Any], dict[str, Any]]

T = TypeVar("T")
EntityT = TypeVar("EntityT", bound="Entity")


def now_ms() -> int:
    """Current time in milliseconds since the epoch."""
    return time.time_ns() // 1_000_000


class EntityState(str, Enum):
    """Lifecycle position of an entity."""

    TRANSIENT = "transient"
    PERSISTED = "persisted"
    DELETED = "deleted"


class Prop(Generic[T]):
    """Typed accessor for one key of an entity's props.

    Reading a missing key returns ``default``. A list or dict default is
    copied into props on first read, so in-place mutation is per instance
    and reaches the next ``update()``. Deleting the attribute
    removes the key, so the next ``update()`` naming it unsets the field.

    Args:
        type_: Declared value type (documentation and type checking only).
        default: Value returned while the key is absent.
        key: Stored key, when it differs from the attribute name.
    """

    def __init__(self, type_: Optional[type] = None, default: Optional[T] = None, key: Optional[str] = None) -> None:
        self.type_ = type_
        self.default = default
        self.key = key or ""

    def __set_name__(self, owner: type, name: str) -> None:
        if not self.key:
            self.key = name
        if self.key in RESERVED_FIELDS:
            raise ValueError(f"'{self.key}' is reserved and cannot be declared as a prop")

    @overload
    def __get__(self, instance: None, owner: type) -> "Prop[T]": ...

    @overload
    def __get__(self, instance: "Entity", owner: type) -> Optional[T]: ...

    def __get__(self, instance: Optional["Entity"], owner: type) -> Any:
        if instance is None:
            return self
        if self.key in instance.props:
            return instance.props[self.key]
        if isinstance(self.default, (list, dict)):
            value = copy.deepcopy(self.default)
            instance.props[self.key] = value
            return value
        return self.default

    def __set__(self, instance: "Entity", value: Optional[T]) -> None:
        instance.props[self.key] = value

    def __delete__(self, instance: "Entity") -> None:
        instance.props.pop(self.key, None)


class Entity:
    """Base class for one addressable document.

    Attributes:
        id: Store-assigned identifier, None while transient.
        created_at: Creation time in ms since epoch, set by ``create()``.
        updated_at: Last write time in ms since epoch, set by ``create()``,
                    ``update()`` and ``touch()``.
        props: The schema-less payload.
    """

    __collection__: ClassVar[Optional[str]] = None
    __props__: ClassVar[dict[str, Prop[Any]]] = {}

    def __init_subclass__(cls, collection: Optional[str] = None, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if collection is not None:
            cls.__collection__ = collection

        declared: dict[str, Prop[Any]] = {}
        for klass in reversed(cls.__mro__):
            for attribute in vars(klass).values():
                if isinstance(attribute, Prop):
                    declared[attribute.key] = attribute
        cls.__props__ = declared

    def __init__(
        self,
        collection_name: Optional[str] = None,
        *,
        store: Optional[StoreConnector] = None,
        hooks: Optional[HookRegistry] = None,
    ) -> None:
        name = collection_name or self.__collection__
        if not name:
            raise ValueError(f"{type(self).__name__} has no collection name")

        self._collection_name = name
        self._store = store
        self._hooks = hooks
        self._deleted = False

        self.id: Optional[str] = None
        self.created_at: Optional[int] = None
        self.updated_at: Optional[int] = None
        self.props: dict[str, PropValue] = {}

    # =========================================================================
    # Descriptor and collaborators
    # =========================================================================

    @classmethod
    def descriptor(cls: type[EntityT]) -> EntityDescriptor[EntityT]:
        """Descriptor binding queries to this entity type."""
        if not cls.__collection__:
            raise ValueError(f"{cls.__name__} has no collection name")
        return EntityDescriptor(cls.__collection__, cls, frozenset(cls.__props__))

    @property
    def collection_name(self) -> str:
        return self._collection_name

    @property
    def store(self) -> StoreConnector:
        return self._store if self._store is not None else get_default_store()

    @property
    def hooks(self) -> HookRegistry:
        return self._hooks if self._hooks is not None else get_hook_registry()

    @property
    def state(self) -> EntityState:
        if self._deleted:
            return EntityState.DELETED
        if self.id is None:
            return EntityState.TRANSIENT
        return EntityState.PERSISTED

    # =========================================================================
    # Lifecycle
    # =========================================================================

    async def create(self) -> None:
        """Insert this entity and take the store-generated identifier.

        Raises:
            InvalidStateError: If the entity already has an identifier.
            StoreError: If the insert fails.
        """
        if self.id is not None:
            raise self._invalid_state("create", "You cannot create an object that already exists.")

        now = now_ms()
        self.created_at = now
        self.updated_at = now

        with store_errors("create", self.collection_name, self.id):
            handle = await self.store.resolve(self.collection_name)
            inserted_id = await handle.insert_one(self.encode())

        self.id = str(inserted_id)
        await self._notify(HookEvent.ON_ENTITY_AFTER_CREATE, "create")

    async def update(self, *keys: str) -> None:
        """Write props to the stored document in one atomic update.

        With no keys every current prop is written. A named key that is
        absent from props is removed from the stored document.

        Raises:
            InvalidStateError: If the entity is transient or deleted.
            ValueError: If a reserved field is named.
            StoreError: If the update fails.
        """
        self._require_persisted("update")
        updated_at = now_ms()
        update_document = self._build_update(keys, updated_at)

        self.updated_at = updated_at

        with store_errors("update", self.collection_name, self.id):
            handle = await self.store.resolve(self.collection_name)
            await handle.update_one({ID_FIELD: self.id}, update_document)

        await self._notify(HookEvent.ON_ENTITY_AFTER_UPDATE, "update")

    async def touch(self) -> None:
        """Bump ``updatedAt`` without writing any prop."""
        self._require_persisted("touch")
        self.updated_at = now_ms()

        with store_errors("touch", self.collection_name, self.id):
            handle = await self.store.resolve(self.collection_name)
            await handle.update_one({ID_FIELD: self.id}, {"$set": {UPDATED_AT_FIELD: self.updated_at}})

        await self._notify(HookEvent.ON_ENTITY_AFTER_UPDATE, "touch")

    async def delete(self) -> None:
        """Remove the stored document.

        The in-memory ``id`` and ``props`` are left as they were.

        Raises:
            InvalidStateError: If the entity is transient or already deleted.
            StoreError: If the delete fails.
        """
        self._require_persisted("delete")

        with store_errors("delete", self.collection_name, self.id):
            handle = await self.store.resolve(self.collection_name)
            removed = await handle.delete_one({ID_FIELD: self.id})

        if not removed:
            logger.warning(
                "Delete matched no document",
                collection=self.collection_name,
                entity_id=self.id,
            )

        self._deleted = True
        await self._notify(HookEvent.ON_ENTITY_AFTER_DELETE, "delete")

    async def fetch(self, entity_id: str) -> None:
        """Load the document with the given identifier into this instance.

        Raises:
            NotFoundError: If no document has that identifier.
            StoreError: If the lookup fails.
        """
        with store_errors("fetch", self.collection_name, entity_id):
            handle = await self.store.resolve(self.collection_name)
            documents = await handle.find({ID_FIELD: entity_id}).limit(1).collect()

        if not documents:
            raise NotFoundError(
                f"{self.collection_name} with id '{entity_id}' does not exist.",
                operation="fetch",
                collection=self.collection_name,
                entity_id=entity_id,
            )

        self.decode(documents[0])
        self._deleted = False
        await self._notify(HookEvent.ON_ENTITY_AFTER_FETCH, "fetch")

    # =========================================================================
    # Serialization
    # =========================================================================

    def encode(self) -> dict[str, Any]:
        """Flat document for the store: props plus timestamps, without id."""
        document: dict[str, Any] = dict(self.props)
        if self.updated_at is not None:
            document[UPDATED_AT_FIELD] = self.updated_at
        if self.created_at is not None:
            document[CREATED_AT_FIELD] = self.created_at
        return document

    def decode(self: EntityT, document: dict[str, Any]) -> EntityT:
        """Merge a raw document into this instance.

        Reserved keys go to ``id`` and the timestamps; every other key is
        upserted into ``props``. Props missing from the document are kept.
        """
        for key, value in document.items():
            if key in (ID_FIELD, ID_ALIAS):
                self.id = None if value is None else str(value)
            elif key == UPDATED_AT_FIELD:
                self.updated_at = value
            elif key == CREATED_AT_FIELD:
                self.created_at = value
            else:
                self.props[key] = value
        return self

    def to_json(self) -> dict[str, Any]:
        """Props plus id and timestamps, for API responses and hooks."""
        return {
            **self.props,
            ID_ALIAS: self.id,
            CREATED_AT_FIELD: self.created_at,
            UPDATED_AT_FIELD: self.updated_at,
        }

    def describe(self) -> str:
        """Human readable dump with props in key order."""
        lines = [
            f"{type(self).__name__} {{",
            f"\tid = {self.id},",
            f"\tupdatedAt = {self.updated_at} ({_format_ms(self.updated_at)}),",
            f"\tcreatedAt = {self.created_at} ({_format_ms(self.created_at)}),",
            "\tprops = {",
        ]
        keys = sorted(self.props)
        for index, key in enumerate(keys):
            comma = "" if index == len(keys) - 1 else ","
            lines.append(f"\t\t{key} = {self.props[key]!r}{comma}")
        lines.append("\t}")
        lines.append("}")
        return "\n".join(lines)

    def __repr__(self) -> str:
        return f"<{type(self).__name__}(collection={self.collection_name}, id={self.id})>"

    # =========================================================================
    # Internals
    # =========================================================================

    def _build_update(self, keys: tuple[str, ...], updated_at: int) -> dict[str, Any]:
        target = keys or tuple(self.props)
        to_set: dict[str, Any] = {}
        to_unset: dict[str, str] = {}

        for key in target:
            if key in RESERVED_FIELDS:
                raise ValueError(f"'{key}' is reserved and cannot be updated directly")
            if key in self.props:
                to_set[key] = self.props[key]
            else:
                to_unset[key] = ""

        to_set[UPDATED_AT_FIELD] = updated_at

        update_document: dict[str, Any] = {"$set": to_set}
        if to_unset:
            update_document["$unset"] = to_unset
        return update_document

    def _require_persisted(self, operation: str) -> None:
        if self.id is None:
            raise self._invalid_state(operation, f"You cannot {operation} an object that does not exist.")
        if self._deleted:
            raise self._invalid_state(operation, f"You cannot {operation} an object that has been deleted.")

    def _invalid_state(self, operation: str, message: str) -> InvalidStateError:
        return InvalidStateError(
            message,
            operation=operation,
            collection=self.collection_name,
            entity_id=self.id,
        )

    async def _notify(self, event: str, operation: str) -> None:
        await self.hooks.trigger(
            event=event,
            data=self.to_json(),
            context=HookContext(
                collection=self.collection_name,
                operation=operation,
                entity_id=self.id,
            ),
            filters={"collection": self.collection_name},
        )


def _format_ms(value: Optional[int]) -> str:
    if value is None:
        return "unset"
    return datetime.fromtimestamp(value / 1000, tz=timezone.utc).isoformat()
