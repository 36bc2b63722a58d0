"""Key schema discovery.

RESPONSIBILITIES
- Find the fields marked with ``ReportKey`` on a root class and on every list
  element class reachable through complex keys.
- Resolve key names and descriptions, reject duplicates and complex keys that
  are not declared on lists.
PROCESS OVERVIEW
1. build_schema() seeds a worklist with the root class.
2. Each class is visited once; its own annotated fields become KeyBindings.
3. Element classes of complex keys are queued unless already visited.
"""

from __future__ import annotations

import dataclasses
import inspect
import sys
import types
from collections import deque
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Annotated, Any, ForwardRef, Iterable, Iterator, Union, get_args, get_origin

from .errors import DuplicateKeyError, InvalidKeyPlacementError, ReportKeyError
from .keys import REPORT_KEY_METADATA, DataType, KeyType, ReportKey
from .utils.log import get_logger

logger = get_logger("schema")

SINGLE_PREFIX = "key_"
COMPLEX_PREFIX = "complex_"


@dataclass(frozen=True)
class KeyBinding:
    """One bindable placeholder and how to read it from its declaring class."""

    name: str
    key_type: KeyType
    data_type: DataType
    optional: bool
    description: str
    owner: type
    attribute: str
    date_format: str
    time_format: str
    element_type: type | None = None

    @property
    def is_complex(self) -> bool:
        return self.key_type is KeyType.COMPLEX

    @property
    def temporal_pattern(self) -> str | None:
        if self.data_type is DataType.DATE:
            return self.date_format
        if self.data_type is DataType.TIME:
            return self.time_format
        return None

    def accepts(self, obj: object) -> bool:
        """Return True when ``obj`` can supply this key."""

        return isinstance(obj, self.owner)

    def read(self, obj: object) -> Any:
        """Read the bound attribute; a missing attribute reads as ``None``."""

        return getattr(obj, self.attribute, None)


class KeySchema(Mapping):
    """Immutable mapping of key name to :class:`KeyBinding`."""

    def __init__(self, root_type: type, bindings: Mapping[str, KeyBinding]) -> None:
        self._root_type = root_type
        self._bindings = types.MappingProxyType(dict(bindings))
        self._complex = frozenset(name for name, b in self._bindings.items() if b.is_complex)

    def __getitem__(self, name: str) -> KeyBinding:
        return self._bindings[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._bindings)

    def __len__(self) -> int:
        return len(self._bindings)

    def __repr__(self) -> str:
        return f"KeySchema(root={self._root_type.__name__}, keys={len(self)})"

    @property
    def root_type(self) -> type:
        return self._root_type

    @property
    def complex_keys(self) -> frozenset[str]:
        return self._complex

    def is_complex(self, name: str) -> bool:
        return name in self._complex


def _strip_optional(hint: Any) -> Any:
    origin = get_origin(hint)
    if origin is Union or origin is types.UnionType:
        args = [arg for arg in get_args(hint) if arg is not type(None)]
        if len(args) == 1:
            return _strip_annotated(args[0])
    return hint


def _strip_annotated(hint: Any) -> Any:
    if get_origin(hint) is Annotated:
        return get_args(hint)[0]
    return hint


def _resolve_forward(ref: Any, cls: type) -> Any:
    """Evaluate a quoted element type in the namespace of its declaring class."""

    if isinstance(ref, ForwardRef):
        ref = ref.__forward_arg__
    if not isinstance(ref, str):
        return ref
    module = sys.modules.get(cls.__module__)
    globalns = dict(vars(module)) if module is not None else {}
    localns = {cls.__name__: cls, **vars(cls)}
    try:
        return eval(ref, globalns, localns)
    except NameError as exc:
        raise ReportKeyError(f"Cannot resolve element type {ref!r} of {cls.__qualname__}: {exc}") from exc


def _list_element_type(hint: Any, cls: type) -> type | None:
    hint = _strip_optional(_strip_annotated(hint))
    if get_origin(hint) is not list:
        return None
    args = get_args(hint)
    if len(args) != 1:
        return None
    element = _strip_annotated(_resolve_forward(args[0], cls))
    return element if isinstance(element, type) else None


def _declared_keys(cls: type) -> Iterable[tuple[str, Any, ReportKey]]:
    """Yield ``(field, type hint, ReportKey)`` for fields declared on ``cls`` itself."""

    try:
        hints = inspect.get_annotations(cls, eval_str=True)
    except (NameError, TypeError) as exc:
        raise ReportKeyError(f"Cannot resolve annotations of {cls.__qualname__}: {exc}") from exc
    dc_fields = {f.name: f for f in dataclasses.fields(cls)} if dataclasses.is_dataclass(cls) else {}

    for field_name, hint in hints.items():
        key: ReportKey | None = None
        if get_origin(hint) is Annotated:
            key = next((meta for meta in hint.__metadata__ if isinstance(meta, ReportKey)), None)
        if key is None and field_name in dc_fields:
            key = dc_fields[field_name].metadata.get(REPORT_KEY_METADATA)
        if key is not None:
            yield field_name, hint, key


def _bind(cls: type, field_name: str, hint: Any, key: ReportKey) -> KeyBinding:
    name = key.name
    if name is None:
        prefix = COMPLEX_PREFIX if key.key_type is KeyType.COMPLEX else SINGLE_PREFIX
        name = f"{prefix}{cls.__name__}_{field_name}"
    description = key.description
    if description is None:
        description = f"object: {cls.__name__}, field: {field_name}"

    element_type = None
    if key.key_type is KeyType.COMPLEX:
        element_type = _list_element_type(hint, cls)
        if element_type is None:
            raise InvalidKeyPlacementError("The annotation ReportKey does not match the field")

    return KeyBinding(
        name=name,
        key_type=key.key_type,
        data_type=key.data_type,
        optional=key.temporary,
        description=description,
        owner=cls,
        attribute=field_name,
        date_format=key.date_format,
        time_format=key.time_format,
        element_type=element_type,
    )


def build_schema(root_type: type, reserved_names: Iterable[str] = ()) -> KeySchema:
    """Build the key schema reachable from ``root_type``.

    Args:
        root_type: Class whose annotated fields form the top-level keys.
        reserved_names: Names no key may take (counter key, metadata sheet).

    Returns:
        The immutable ``KeySchema``.

    Raises:
        DuplicateKeyError: When two fields resolve to the same name.
        InvalidKeyPlacementError: When a complex key is not declared on a list.
    """

    if not isinstance(root_type, type):
        raise TypeError(f"build_schema expects a class, got {type(root_type).__name__}")

    reserved = set(reserved_names)
    bindings: dict[str, KeyBinding] = {}
    visited: set[type] = {root_type}
    pending: deque[type] = deque([root_type])

    while pending:
        cls = pending.popleft()
        for field_name, hint, key in _declared_keys(cls):
            binding = _bind(cls, field_name, hint, key)
            if binding.name in bindings or binding.name in reserved:
                raise DuplicateKeyError("Annotated fields have the identical names of ReportKey")
            bindings[binding.name] = binding
            logger.debug("Bound key %s to %s.%s", binding.name, cls.__name__, field_name)
            element = binding.element_type
            if element is not None and element not in visited:
                visited.add(element)
                pending.append(element)

    schema = KeySchema(root_type, bindings)
    logger.info(
        "Key schema built for %s: %s keys (%s complex) over %s types",
        root_type.__name__,
        len(schema),
        len(schema.complex_keys),
        len(visited),
    )
    return schema


__all__ = ["KeyBinding", "KeySchema", "build_schema", "SINGLE_PREFIX", "COMPLEX_PREFIX"]
