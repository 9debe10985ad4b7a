import typing
from dataclasses import fields, is_dataclass

# Type marker key used for serialization/deserialization
_TYPE_KEY = "_type"

# Registry mapping type names to classes (populated lazily)
_TYPE_REGISTRY: dict[str, type] = {}


def _serialize_for_json(value: typing.Any) -> typing.Any:
    if is_dataclass(value) and not isinstance(value, type):
        result = {
            _TYPE_KEY: type(value).__name__,
        }
        for item in fields(value):
            result[item.name] = _serialize_for_json(getattr(value, item.name))
        return result
    if isinstance(value, dict):
        return {str(key): _serialize_for_json(val) for key, val in value.items()}
    if isinstance(value, (list, tuple, set)):
        return [_serialize_for_json(item) for item in value]
    return value


def serialize_extraction(value: typing.Any) -> dict:
    serialized = _serialize_for_json(value)
    if isinstance(serialized, dict):
        return serialized
    return {"value": serialized}


def _get_type_registry() -> dict[str, type]:
    """Lazily populate and return the type registry."""
    if _TYPE_REGISTRY:
        return _TYPE_REGISTRY

    from slidestudio.extractors import data_types

    for name in dir(data_types):
        obj = getattr(data_types, name)
        if isinstance(obj, type) and is_dataclass(obj):
            _TYPE_REGISTRY[name] = obj

    return _TYPE_REGISTRY


def _unwrap_optional(tp: typing.Any) -> tuple[typing.Any, bool]:
    """Unwrap Optional[X] to (X, True) or return (tp, False) if not Optional."""
    origin = typing.get_origin(tp)
    if origin is typing.Union:
        args = typing.get_args(tp)
        non_none_args = [a for a in args if a is not type(None)]
        if len(non_none_args) == 1 and len(args) == 2:
            return non_none_args[0], True
    return tp, False


def _deserialize_value(value: typing.Any, expected_type: typing.Any) -> typing.Any:
    """Deserialize a value according to its expected type."""
    if value is None:
        return None

    inner_type, is_optional = _unwrap_optional(expected_type)
    if is_optional:
        expected_type = inner_type

    if isinstance(value, dict) and _TYPE_KEY in value:
        return _deserialize_dataclass(value)

    origin = typing.get_origin(expected_type)

    if origin is list:
        item_type = typing.get_args(expected_type)
        item_type = item_type[0] if item_type else typing.Any
        if isinstance(value, list):
            return [_deserialize_value(item, item_type) for item in value]
        return value

    registry = _get_type_registry()
    if isinstance(expected_type, type) and expected_type.__name__ in registry:
        if isinstance(value, dict):
            return _deserialize_dataclass(value, expected_type)
        return value

    return value


def _deserialize_dataclass(
    data: dict, expected_class: typing.Optional[type] = None
) -> typing.Any:
    """Deserialize a dictionary to a dataclass instance."""
    registry = _get_type_registry()

    type_name = data.get(_TYPE_KEY)
    if type_name and type_name in registry:
        cls = registry[type_name]
    elif expected_class is not None:
        cls = expected_class
    else:
        return data

    field_types = typing.get_type_hints(cls)
    field_names = {f.name for f in fields(cls)}

    kwargs = {}
    for field_name in field_names:
        if field_name in data:
            field_type = field_types.get(field_name, typing.Any)
            kwargs[field_name] = _deserialize_value(data[field_name], field_type)

    return cls(**kwargs)


def deserialize_extraction(
    data: dict, expected_class: typing.Optional[type] = None
) -> typing.Any:
    """
    Deserialize a JSON dictionary back to a slidestudio dataclass.

    This is the inverse of serialize_extraction(). The ``_type`` marker picks
    the class; hand-written input without a marker can name the class through
    ``expected_class`` instead.

    Raises:
        ValueError: If the data is not a dictionary or carries no type
            information at all.

    Example:
        >>> deck = analyze_file("kickoff.pptx")
        >>> restored = deserialize_extraction(deck.to_json())
        >>> assert restored == deck
    """
    if not isinstance(data, dict):
        raise ValueError("Input must be a dictionary")

    if _TYPE_KEY not in data and expected_class is None:
        raise ValueError(
            f"Input dictionary must contain '{_TYPE_KEY}' key for deserialization"
        )

    return _deserialize_dataclass(data, expected_class)
