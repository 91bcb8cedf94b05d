import json
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from attrs import define, field

from cloudfront_provider.errors import SchemaError
from cloudfront_provider.types import Json
from cloudfront_provider.validation import Validator


class SchemaType(Enum):
    string = "string"
    int = "int"
    float = "float"
    bool = "bool"
    list = "list"
    set = "set"


@define(kw_only=True)
class Schema:
    """
    Describes a single attribute of a resource.
    An attribute of type list or set with a dictionary as elem is a nested block.
    """

    type: SchemaType
    required: bool = False
    optional: bool = False
    computed: bool = False
    force_new: bool = False
    default: Any = None
    min_items: int = 0
    max_items: int = 0
    elem: Union[None, SchemaType, "Schema", Dict[str, "Schema"]] = None
    validate: Optional[Validator] = None
    conflicts_with: List[str] = field(factory=list)
    at_least_one_of: List[str] = field(factory=list)
    description: Optional[str] = None

    def is_block(self) -> bool:
        return isinstance(self.elem, dict)

    def is_collection(self) -> bool:
        return self.type in (SchemaType.list, SchemaType.set)

    def element_schema(self) -> "Schema":
        if isinstance(self.elem, Schema):
            return self.elem
        return Schema(type=self.elem if isinstance(self.elem, SchemaType) else SchemaType.string)

    def to_json(self) -> Json:
        js: Json = {"type": self.type.value}
        for flag in ("required", "optional", "computed", "force_new"):
            if getattr(self, flag):
                js[flag] = True
        if self.default is not None:
            js["default"] = self.default
        if self.min_items:
            js["min_items"] = self.min_items
        if self.max_items:
            js["max_items"] = self.max_items
        if self.conflicts_with:
            js["conflicts_with"] = self.conflicts_with
        if self.at_least_one_of:
            js["at_least_one_of"] = self.at_least_one_of
        if isinstance(self.elem, dict):
            js["block"] = schema_to_json(self.elem)
        elif self.elem is not None:
            js["elem"] = self.element_schema().to_json()
        if self.description:
            js["description"] = self.description
        return js


SchemaMap = Dict[str, Schema]


def block(
    attributes: SchemaMap,
    *,
    required: bool = False,
    min_items: int = 0,
    max_items: int = 1,
    description: Optional[str] = None,
) -> Schema:
    return Schema(
        type=SchemaType.list,
        required=required,
        optional=not required,
        min_items=min_items,
        max_items=max_items,
        elem=attributes,
        description=description,
    )


def items_block(
    *,
    required: bool = False,
    elem: Union[SchemaType, Schema, SchemaMap] = SchemaType.string,
    description: Optional[str] = None,
) -> Schema:
    """
    A block holding a single set under the name `items`.
    This is the configuration side of the Quantity/Items lists of the CloudFront API.
    """
    items = Schema(type=SchemaType.set, optional=True, elem=elem)
    return block({"items": items}, required=required, description=description)


def schema_to_json(schema_map: SchemaMap) -> Json:
    return {name: schema.to_json() for name, schema in schema_map.items()}


def zero_value(schema: Schema) -> Any:
    if schema.type == SchemaType.string:
        return ""
    elif schema.type == SchemaType.int:
        return 0
    elif schema.type == SchemaType.float:
        return 0.0
    elif schema.type == SchemaType.bool:
        return False
    else:
        return []


def default_value(schema: Schema) -> Any:
    if schema.default is None:
        return zero_value(schema)
    return list(schema.default) if isinstance(schema.default, list) else schema.default


def is_unset(schema: Schema, value: Any) -> bool:
    return value is None or (schema.is_collection() and isinstance(value, list) and len(value) == 0)


def _set_key(value: Any) -> str:
    return json.dumps(value, sort_keys=True)


def normalize_value(schema: Schema, value: Any, path: str) -> Any:
    if value is None:
        return default_value(schema)
    kind = schema.type
    if kind == SchemaType.string:
        if isinstance(value, str):
            return value
        elif isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
    elif kind == SchemaType.int:
        if isinstance(value, int) and not isinstance(value, bool):
            return value
        elif isinstance(value, float) and value.is_integer():
            return int(value)
        elif isinstance(value, str):
            try:
                return int(value)
            except ValueError:
                pass
    elif kind == SchemaType.float:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return float(value)
        elif isinstance(value, str):
            try:
                return float(value)
            except ValueError:
                pass
    elif kind == SchemaType.bool:
        if isinstance(value, bool):
            return value
        elif isinstance(value, str) and value.lower() in ("true", "false"):
            return value.lower() == "true"
    elif isinstance(value, (list, tuple, set, frozenset)):
        if isinstance(schema.elem, dict):
            attributes = schema.elem
            items = [normalize_block(attributes, item, f"{path}.{idx}") for idx, item in enumerate(value)]
        else:
            element = schema.element_schema()
            items = [
                normalize_value(element, item, f"{path}.{idx}") for idx, item in enumerate(value) if item is not None
            ]
        if kind == SchemaType.set:
            unique = {_set_key(item): item for item in items}
            items = [unique[key] for key in sorted(unique)]
        return items
    raise SchemaError(f"{path}: can not use value {value!r} as {kind.value}")


def normalize_block(schema_map: SchemaMap, values: Optional[Json], path: str = "") -> Json:
    """
    Fill every attribute of the given schema with its value, default or zero value.
    Values are coerced to the type of the attribute, sets are de-duplicated and sorted.
    """
    values = values or {}
    if not isinstance(values, dict):
        raise SchemaError(f"{path or 'value'}: expected an object, got {values!r}")
    unknown = [key for key in values if key not in schema_map]
    if unknown:
        raise SchemaError(f"{path or 'value'}: unknown attributes {', '.join(unknown)}")
    prefix = f"{path}." if path else ""
    return {name: normalize_value(schema, values.get(name), prefix + name) for name, schema in schema_map.items()}


def _type_error(schema: Schema, value: Any, path: str) -> Optional[str]:
    kind = schema.type
    if kind == SchemaType.string:
        ok = isinstance(value, str)
    elif kind == SchemaType.int:
        ok = isinstance(value, int) and not isinstance(value, bool)
    elif kind == SchemaType.float:
        ok = isinstance(value, (int, float)) and not isinstance(value, bool)
    elif kind == SchemaType.bool:
        ok = isinstance(value, bool)
    else:
        ok = isinstance(value, list)
    return None if ok else f'"{path}": expected {kind.value}, got {type(value).__name__}'


def _validate_value(schema: Schema, value: Any, path: str) -> List[str]:
    type_error = _type_error(schema, value, path)
    if type_error:
        return [type_error]
    errors: List[str] = []
    if schema.is_collection():
        if len(value) < schema.min_items:
            errors.append(
                f'"{path}": attribute supports {schema.min_items} item minimum, config has {len(value)} declared'
            )
        if schema.max_items and len(value) > schema.max_items:
            errors.append(
                f'"{path}": attribute supports {schema.max_items} item maximum, config has {len(value)} declared'
            )
        for idx, item in enumerate(value):
            if isinstance(schema.elem, dict):
                errors.extend(validate_config(schema.elem, item or {}, f"{path}.{idx}"))
            elif item is None:
                errors.append(f'"{path}.{idx}": null value is not allowed')
            else:
                errors.extend(_validate_value(schema.element_schema(), item, f"{path}.{idx}"))
    elif schema.validate is not None:
        errors.extend(schema.validate(value, path))
    return errors


def validate_config(schema_map: SchemaMap, config: Any, path: str = "") -> List[str]:
    """
    Check the given configuration against the schema.
    Returns all problems found, an empty list means the configuration is valid.
    """
    if not isinstance(config, dict):
        return [f'"{path or "configuration"}": expected an object']
    prefix = f"{path}." if path else ""
    errors = [f'An argument named "{prefix}{key}" is not expected here.' for key in config if key not in schema_map]
    at_least_one_of: List[List[str]] = []
    for name, schema in schema_map.items():
        value = config.get(name)
        if schema.at_least_one_of and schema.at_least_one_of not in at_least_one_of:
            at_least_one_of.append(schema.at_least_one_of)
        if is_unset(schema, value):
            if schema.required:
                errors.append(f'The argument "{prefix}{name}" is required, but no definition was found.')
            continue
        if schema.computed and not (schema.optional or schema.required):
            errors.append(f'"{prefix}{name}": this field cannot be set')
            continue
        errors.extend(_validate_value(schema, value, prefix + name))
        for other in schema.conflicts_with:
            if other in schema_map and not is_unset(schema_map[other], config.get(other)):
                errors.append(f'"{prefix}{name}": conflicts with {prefix}{other}')
    for names in at_least_one_of:
        if all(is_unset(schema_map[n], config.get(n)) for n in names if n in schema_map):
            errors.append(f'"{prefix}{names[0]}": one of `{",".join(prefix + n for n in names)}` must be specified')
    return errors
