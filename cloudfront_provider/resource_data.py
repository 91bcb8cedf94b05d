from copy import deepcopy
from typing import Any, Optional, Tuple

from cloudfront_provider.errors import SchemaError
from cloudfront_provider.schema import SchemaMap, normalize_block, normalize_value, zero_value
from cloudfront_provider.types import Json


class ResourceData:
    """
    The configuration side of a single resource, as seen by a lifecycle operation.

    The prior state is what was stored after the last operation.
    The planned values combine the configuration with the prior state:
    configured attributes win, computed attributes fall back to the prior state.
    """

    def __init__(
        self,
        schema: SchemaMap,
        *,
        config: Optional[Json] = None,
        state: Optional[Json] = None,
        resource_id: Optional[str] = None,
    ) -> None:
        self.schema = schema
        prior = dict(state or {})
        state_id = prior.pop("id", None)
        self._id: str = resource_id or state_id or ""
        self._prior = normalize_block(schema, prior)
        if config is None:
            self._values = deepcopy(self._prior)
        else:
            planned = {
                name: config[name] if name in config else (prior.get(name) if s.computed else None)
                for name, s in schema.items()
            }
            unknown = {k: v for k, v in config.items() if k not in schema and k != "id"}
            self._values = normalize_block(schema, {**planned, **unknown})
        self._new_resource = False

    @property
    def id(self) -> str:
        return self._id

    def set_id(self, resource_id: Optional[str]) -> None:
        self._id = resource_id or ""

    def is_new_resource(self) -> bool:
        return self._new_resource

    def mark_new_resource(self) -> None:
        self._new_resource = True

    def get(self, key: str) -> Any:
        if key not in self.schema:
            raise SchemaError(f"Unknown attribute: {key}")
        return deepcopy(self._values[key])

    def get_ok(self, key: str) -> Tuple[Any, bool]:
        value = self.get(key)
        return value, value != zero_value(self.schema[key])

    def set(self, key: str, value: Any) -> None:
        if key not in self.schema:
            raise SchemaError(f"Invalid address to set: {key}")
        self._values[key] = normalize_value(self.schema[key], value, key)

    def has_change(self, key: str) -> bool:
        if key not in self.schema:
            raise SchemaError(f"Unknown attribute: {key}")
        return self._prior[key] != self._values[key]

    def has_changes(self, *keys: str) -> bool:
        return any(self.has_change(key) for key in keys)

    def to_json(self) -> Json:
        return deepcopy(self._values)

    def state(self) -> Optional[Json]:
        if not self._id:
            return None
        return {"id": self._id, **self.to_json()}

    def __repr__(self) -> str:
        return f"ResourceData(id={self._id!r}, values={self._values!r})"
