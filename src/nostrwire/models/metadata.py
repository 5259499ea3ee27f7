"""
Profile metadata: the JSON content of a kind-0 event (NIP-01, NIP-24).

Known keys become typed optional attributes; every other key is kept
verbatim in ``other`` so a profile written by a newer client survives a
parse/serialize round trip.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field, fields
from typing import Any, ClassVar

from nostrwire.core.exceptions import InvalidFieldError

from ._validation import validate_instance


@dataclass(frozen=True, slots=True)
class Metadata:
    """Kind-0 profile content.

    Attributes:
        name: Short handle.
        about: Free-form biography.
        picture: Avatar URL.
        nip05: Internet identifier (``user@domain``).
        display_name: Longer display name (NIP-24).
        website: Personal web page.
        banner: Banner image URL.
        lud06: LNURL-pay address.
        lud16: Lightning address.
        other: Unrecognized keys with their raw JSON values. Not hashed.

    Examples:
        ```python
        meta = Metadata.from_json('{"name":"bob","pronouns":"they/them"}')
        meta.name                 # 'bob'
        meta.other["pronouns"]    # 'they/them'
        meta.to_json()            # '{"name": "bob", "pronouns": "they/them"}'
        ```
    """

    KNOWN_KEYS: ClassVar[tuple[str, ...]] = (
        "name",
        "about",
        "picture",
        "nip05",
        "display_name",
        "website",
        "banner",
        "lud06",
        "lud16",
    )

    name: str | None = None
    about: str | None = None
    picture: str | None = None
    nip05: str | None = None
    display_name: str | None = None
    website: str | None = None
    banner: str | None = None
    lud06: str | None = None
    lud16: str | None = None
    other: dict[str, Any] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        for f in fields(self):
            value = getattr(self, f.name)
            if f.name != "other" and value is not None:
                validate_instance(value, str, f.name)
        validate_instance(self.other, dict, "other")
        clash = set(self.other) & set(self.KNOWN_KEYS)
        if clash:
            raise InvalidFieldError("other", f"known keys belong in attributes: {sorted(clash)}")

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            key: getattr(self, key) for key in self.KNOWN_KEYS if getattr(self, key) is not None
        }
        out.update(self.other)
        return out

    @classmethod
    def from_dict(cls, data: Any) -> Metadata:
        """Split a decoded JSON object into known attributes and ``other``.

        Raises:
            InvalidFieldError: If *data* is not an object or a known key holds
                something other than a string or null.
        """
        if not isinstance(data, dict):
            raise InvalidFieldError("metadata", f"must be a JSON object, got {type(data).__name__}")
        known = {k: data[k] for k in cls.KNOWN_KEYS if k in data}
        other = {k: v for k, v in data.items() if k not in cls.KNOWN_KEYS}
        return cls(**known, other=other)

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False)

    @classmethod
    def from_json(cls, raw: str | bytes) -> Metadata:
        try:
            data = json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise InvalidFieldError("metadata", f"invalid JSON: {e}") from e
        return cls.from_dict(data)
