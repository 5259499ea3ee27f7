"""
Linear upgrade chains from historical record shapes to canonical models.

A [VersionChain][nostrwire.versioned.chain.VersionChain] knows every shape an
entity has had on the wire, oldest first, and one function per adjacent pair
to move a value up (and, where older peers need it, back down):

```text
V1 --up--> V2 --up--> ... --up--> canonical
   <-down-    <-down-     <-down-
```

Historical shapes are frozen pydantic records
([VersionedRecord][nostrwire.versioned.chain.VersionedRecord]) with no
behavior. All validation lives in the canonical models of
[nostrwire.models][] and in the step functions, so a failure anywhere in the
chain surfaces as one
[VersionIncompatibleError][nostrwire.core.exceptions.VersionIncompatibleError]
whose [Why][nostrwire.versioned.why.Why] names the broken invariant.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError

from nostrwire.core.exceptions import CodecError, InvalidFieldError, VersionIncompatibleError
from nostrwire.core.logger import Logger

from .why import FIELD_REASONS, Why


T = TypeVar("T")

_logger = Logger("nostrwire.versioned")


class VersionedRecord(BaseModel):
    """Frozen data record for one historical wire shape. Carries no rules."""

    model_config = ConfigDict(frozen=True, extra="ignore")


def unrepresentable(detail: str) -> InvalidFieldError:
    """Error for a step whose target version cannot express the value.

    Examples:
        ```python
        raise unrepresentable("COUNT did not exist before V4")
        ```
    """
    return InvalidFieldError("unrepresentable", detail)


def why_from_field_error(e: InvalidFieldError) -> Why:
    if e.message == "missing":
        return Why.MISSING_FIELD
    return FIELD_REASONS.get(e.field, Why.INVALID_FIELD)


def why_from_validation_error(e: ValidationError) -> Why:
    for error in e.errors():
        if error["type"] == "unknown_message_type":
            return Why.UNKNOWN_MESSAGE_TYPE
        if error["type"] == "missing":
            return Why.MISSING_FIELD
        if error["loc"] and error["loc"][0] in FIELD_REASONS:
            return FIELD_REASONS[str(error["loc"][0])]
    return Why.MALFORMED_RECORD


@dataclass(frozen=True, slots=True)
class Step:
    """One historical shape and the moves to and from its successor.

    Attributes:
        record: The historical record class.
        up: Converts a ``record`` into the next version (a record or the
            canonical value).
        down: Projects the next version back onto ``record``.
        wire: Annotated form of ``record`` that reads and writes its wire
            shape. Defaults to ``record`` itself (a JSON object).
    """

    record: type[VersionedRecord]
    up: Callable[[Any], Any]
    down: Callable[[Any], Any]
    wire: Any = None


class VersionChain(Generic[T]):
    """Upgrade/downgrade chain for one entity family.

    Versions are numbered from 1; the canonical shape is
    ``latest_version``.

    Examples:
        ```python
        event = EVENT_CHAIN.decode(1, old_json_object)     # -> Event
        EVENT_CHAIN.dump(EVENT_CHAIN.downgrade(event, 2))  # for a V2 peer
        ```
    """

    def __init__(
        self,
        entity: str,
        canonical: type[T] | tuple[type, ...],
        parse: Callable[[Any], T],
        steps: list[Step],
    ) -> None:
        self.entity = entity
        self.canonical = canonical
        self._parse = parse
        self._steps = tuple(steps)
        self._index = {step.record: i for i, step in enumerate(self._steps)}
        self._adapters: tuple[TypeAdapter[Any], ...] = tuple(
            TypeAdapter(step.wire or step.record) for step in self._steps
        )

    def __repr__(self) -> str:
        return f"VersionChain({self.entity!r}, latest_version={self.latest_version})"

    @property
    def latest_version(self) -> int:
        return len(self._steps) + 1

    def record_type(self, version: int) -> type[VersionedRecord]:
        """The record class of a historical *version*."""
        self._check_version(version, allow_latest=False)
        return self._steps[version - 1].record

    def version_of(self, value: Any) -> int:
        if isinstance(value, self.canonical):
            return self.latest_version
        index = self._index.get(type(value))
        if index is None:
            detail = f"not a {self.entity} shape: {type(value).__name__}"
            raise VersionIncompatibleError(self.entity, Why.UNKNOWN_VERSION, detail)
        return index + 1

    def upgrade(self, record: Any) -> T:
        """Walk *record* up the chain to the canonical shape.

        Raises:
            VersionIncompatibleError: If a step cannot establish an invariant
                of its target; ``why`` names it.
        """
        version = self.version_of(record)
        value = record
        for i in range(version - 1, len(self._steps)):
            value = self._run(self._steps[i].up, value, f"v{i + 1}->v{i + 2}")
            _logger.debug("version_upgraded", entity=self.entity, source=i + 1, target=i + 2)
        return value

    def downgrade(self, value: T, version: int) -> Any:
        """Project a canonical *value* onto an older *version*.

        Only fields absent from the target are dropped; nothing is invented.

        Raises:
            VersionIncompatibleError: With ``Why.UNREPRESENTABLE`` when the
                target cannot express *value*, or ``Why.UNKNOWN_VERSION`` for
                a bad *version* or a *value* that is not canonical.
        """
        self._check_version(version)
        if not isinstance(value, self.canonical):
            detail = f"not a canonical {self.entity}: {type(value).__name__}"
            raise VersionIncompatibleError(self.entity, Why.UNKNOWN_VERSION, detail)
        result: Any = value
        for i in range(len(self._steps) - 1, version - 2, -1):
            result = self._run(self._steps[i].down, result, f"v{i + 2}->v{i + 1}")
        return result

    def decode(self, version: int, data: Any) -> T:
        """Validate raw *data* as *version* and upgrade it.

        Raises:
            VersionIncompatibleError: ``Why.UNKNOWN_VERSION`` for a version
                this chain never had, ``Why.MALFORMED_RECORD`` (or a more
                specific reason) when *data* does not fit the shape.
        """
        self._check_version(version)
        if version == self.latest_version:
            return self._run(self._parse, data, "parse")
        return self.upgrade(self.load(version, data))

    def load(self, version: int, data: Any) -> Any:
        """Validate raw *data* as the historical *version* without upgrading.

        Raises:
            VersionIncompatibleError: As for
                [decode()][nostrwire.versioned.chain.VersionChain.decode].
        """
        self._check_version(version, allow_latest=False)
        adapter = self._adapters[version - 1]
        return self._run(adapter.validate_python, data, f"v{version}")

    def dump(self, record: Any) -> Any:
        """Wire form (JSON object or array) of a historical *record*.

        Raises:
            VersionIncompatibleError: ``Why.UNKNOWN_VERSION`` if *record* is
                canonical or foreign to this chain.
        """
        version = self.version_of(record)
        if version == self.latest_version:
            detail = f"canonical {self.entity} values serialize themselves"
            raise VersionIncompatibleError(self.entity, Why.UNKNOWN_VERSION, detail)
        adapter = self._adapters[version - 1]
        return self._run(
            lambda r: adapter.dump_python(r, mode="json", exclude_none=True), record, f"v{version}"
        )

    def _check_version(self, version: int, *, allow_latest: bool = True) -> None:
        last = self.latest_version if allow_latest else self.latest_version - 1
        if not isinstance(version, int) or isinstance(version, bool) or not 1 <= version <= last:
            raise VersionIncompatibleError(
                self.entity, Why.UNKNOWN_VERSION, f"version {version!r} not in 1..{last}"
            )

    def _run(self, fn: Callable[[Any], Any], value: Any, stage: str) -> Any:
        try:
            return fn(value)
        except VersionIncompatibleError:
            raise
        except InvalidFieldError as e:
            raise VersionIncompatibleError(
                self.entity, why_from_field_error(e), f"{stage}: {e}"
            ) from e
        except ValidationError as e:
            raise VersionIncompatibleError(
                self.entity, why_from_validation_error(e), f"{stage}: {e.error_count()} errors"
            ) from e
        except (CodecError, PydanticSerializationError) as e:
            raise VersionIncompatibleError(
                self.entity, Why.MALFORMED_RECORD, f"{stage}: {e}"
            ) from e
