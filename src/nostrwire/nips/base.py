"""
Base class for NIP document models.

[BaseData][nostrwire.nips.base.BaseData] is a frozen pydantic model with two
ways in: a strict ``from_dict()`` for trusted input, where any invalid value
is an error, and a lenient ``parse()`` for documents fetched from the
network, which keeps whatever it can and drops the rest.

See Also:
    [nostrwire.nips.parsing][]: The field parsing engine behind ``parse()``.
    [nostrwire.nips.nip11][]: NIP-11 models built on this class.
"""

from __future__ import annotations

from typing import Any, ClassVar, Self

from pydantic import BaseModel, ConfigDict

from .parsing import FieldSpec, parse_fields


class BaseData(BaseModel):
    """Frozen NIP model with declarative lenient parsing.

    Subclasses set ``_FIELD_SPEC`` and override ``parse()`` only for nested
    objects or values a ``FieldSpec`` cannot express.
    """

    model_config = ConfigDict(frozen=True)

    _FIELD_SPEC: ClassVar[FieldSpec] = FieldSpec()

    @classmethod
    def parse(cls, data: Any) -> dict[str, Any]:
        """Reduce untrusted *data* to valid constructor arguments. Never raises."""
        if not isinstance(data, dict):
            return {}
        return parse_fields(data, cls._FIELD_SPEC)

    @classmethod
    def from_untrusted(cls, data: Any) -> Self:
        """Build an instance from whatever part of *data* is valid."""
        return cls.model_validate(cls.parse(data))

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        """Strictly validate *data*; raises ``pydantic.ValidationError``."""
        return cls.model_validate(data)

    def to_dict(self) -> dict[str, Any]:
        """Serialize, leaving out unset (``None``) fields."""
        return self.model_dump(exclude_none=True, mode="json")
