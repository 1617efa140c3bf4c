"""Type validation — checks values against type descriptors.

A type descriptor is any annotation pydantic can build a ``TypeAdapter``
for: ``list[float]``, a ``TypedDict`` or ``BaseModel`` class,
``Literal["a", "b"]``, ``int | None``, and so on. The rest of the
package treats descriptors as opaque and only calls ``validate()``.

Validation is strict: ``"2"`` does not conform to ``float``. Values are
checked in their JSON form by default, so ``"2024-01-01"`` conforms to
``date`` and ``[1, 2]`` to ``tuple[int, int]``. Pass ``mode="python"``
for values built in Python, such as request props set by middleware.

Usage::

    result = validate(list[float], [1, "2", 3])
    if not result:
        print(result.diagnostic)
        # [1, '2', 3] does not conform to type list[float]
"""

from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any, Literal, get_origin

from pydantic import TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError, to_json

Unknown: Any = Any
"""Descriptor for an undeclared payload. Accepts any value."""


def is_unknown(descriptor: Any) -> bool:
    """True if *descriptor* is the ``Unknown`` sentinel."""
    return descriptor is Unknown


@dataclass(frozen=True, slots=True)
class Validation:
    """The outcome of validating one value against one descriptor.

    Falsy when invalid, so you can write::

        result = validate(descriptor, value)
        if not result:
            ...

    ``value`` is the validated value on success and the offending value
    on failure. ``errors`` carries pydantic's per-location details.
    """

    valid: bool
    value: Any = None
    diagnostic: str | None = None
    errors: tuple[dict[str, Any], ...] = field(default=(), repr=False)

    def __bool__(self) -> bool:
        return self.valid


def describe_type(descriptor: Any) -> str:
    """Readable name for a type descriptor (``list[float]``, ``Multiply``)."""
    if descriptor is Unknown:
        return "Any"
    if isinstance(descriptor, type) and get_origin(descriptor) is None:
        return descriptor.__qualname__
    return repr(descriptor).replace("typing.", "")


def validate(
    descriptor: Any, value: Any, *, mode: Literal["json", "python"] = "json"
) -> Validation:
    """Validate *value* against *descriptor*.

    In ``"json"`` mode *value* is a decoded JSON document and is checked
    as pydantic checks JSON input. A value with no JSON form never
    conforms.
    """
    if is_unknown(descriptor):
        return Validation(valid=True, value=value)
    adapter = _adapter_for(descriptor)
    try:
        if mode == "json":
            result = adapter.validate_json(to_json(value), strict=True)
        else:
            result = adapter.validate_python(value, strict=True)
    except ValidationError as exc:
        return _invalid(descriptor, value, tuple(exc.errors(include_url=False)))
    except PydanticSerializationError:
        return _invalid(descriptor, value, ())
    return Validation(valid=True, value=result)


def _invalid(descriptor: Any, value: Any, errors: tuple[dict[str, Any], ...]) -> Validation:
    return Validation(
        valid=False,
        value=value,
        diagnostic=f"{value!r} does not conform to type {describe_type(descriptor)}",
        errors=errors,
    )


def _adapter_for(descriptor: Any) -> TypeAdapter[Any]:
    try:
        hash(descriptor)
    except TypeError:
        # Annotated[...] with unhashable metadata can't be cached
        return TypeAdapter(descriptor)
    return _cached_adapter(descriptor)


@lru_cache(maxsize=512)
def _cached_adapter(descriptor: Any) -> TypeAdapter[Any]:
    return TypeAdapter(descriptor)
