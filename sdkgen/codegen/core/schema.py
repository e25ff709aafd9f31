"""
Core schema representation for code generation.

Converts introspection output into a navigable graph of types and fields
that backends can work with consistently.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Any, Iterator, Tuple
from enum import Enum


class TypeKind(Enum):
    """Kinds of types an introspected API can declare."""

    SCALAR = "SCALAR"
    OBJECT = "OBJECT"
    INTERFACE = "INTERFACE"
    UNION = "UNION"
    ENUM = "ENUM"
    INPUT_OBJECT = "INPUT_OBJECT"
    LIST = "LIST"
    NON_NULL = "NON_NULL"


@dataclass
class TypeRef:
    """Reference to a type, possibly wrapped in LIST / NON_NULL modifiers."""

    kind: TypeKind
    name: Optional[str] = None
    of_type: Optional["TypeRef"] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TypeRef":
        of_type = data.get("ofType")
        return cls(
            kind=TypeKind(data["kind"]),
            name=data.get("name"),
            of_type=cls.from_dict(of_type) if of_type else None,
        )

    def unwrap(self) -> "TypeRef":
        """Return the innermost named type reference."""
        ref = self
        while ref.of_type is not None and ref.kind in (TypeKind.LIST, TypeKind.NON_NULL):
            ref = ref.of_type
        return ref

    @property
    def is_optional(self) -> bool:
        return self.kind != TypeKind.NON_NULL

    @property
    def is_list(self) -> bool:
        ref = self.of_type if self.kind == TypeKind.NON_NULL else self
        return ref is not None and ref.kind == TypeKind.LIST


@dataclass
class InputValue:
    """An argument of a field, or a field of an input object."""

    name: str
    type_ref: TypeRef
    description: Optional[str] = None
    default_value: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "InputValue":
        return cls(
            name=data["name"],
            type_ref=TypeRef.from_dict(data["type"]),
            description=data.get("description") or None,
            default_value=data.get("defaultValue"),
        )


@dataclass
class EnumValue:
    name: str
    description: Optional[str] = None
    is_deprecated: bool = False
    deprecation_reason: Optional[str] = None


@dataclass
class SchemaField:
    """A field declared on an object or interface type."""

    name: str
    type_ref: TypeRef
    description: Optional[str] = None
    args: List[InputValue] = field(default_factory=list)
    is_deprecated: bool = False
    deprecation_reason: Optional[str] = None

    # Back-reference to the declaring type, set by set_schema_parents().
    # Excluded from eq/repr: the type already owns this field.
    parent: Optional["SchemaType"] = field(
        default=None, repr=False, compare=False
    )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SchemaField":
        return cls(
            name=data["name"],
            type_ref=TypeRef.from_dict(data["type"]),
            description=data.get("description") or None,
            args=[InputValue.from_dict(a) for a in data.get("args") or []],
            is_deprecated=bool(data.get("isDeprecated", False)),
            deprecation_reason=data.get("deprecationReason"),
        )


@dataclass
class SchemaType:
    """A named type of the introspected API."""

    kind: TypeKind
    name: str
    description: Optional[str] = None
    fields: List[SchemaField] = field(default_factory=list)
    input_fields: List[InputValue] = field(default_factory=list)
    enum_values: List[EnumValue] = field(default_factory=list)
    interfaces: List[str] = field(default_factory=list)
    possible_types: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SchemaType":
        return cls(
            kind=TypeKind(data["kind"]),
            name=data["name"],
            description=data.get("description") or None,
            fields=[SchemaField.from_dict(f) for f in data.get("fields") or []],
            input_fields=[
                InputValue.from_dict(f) for f in data.get("inputFields") or []
            ],
            enum_values=[
                EnumValue(
                    name=v["name"],
                    description=v.get("description") or None,
                    is_deprecated=bool(v.get("isDeprecated", False)),
                    deprecation_reason=v.get("deprecationReason"),
                )
                for v in data.get("enumValues") or []
            ],
            interfaces=[i["name"] for i in data.get("interfaces") or []],
            possible_types=[p["name"] for p in data.get("possibleTypes") or []],
        )

    def get_field(self, name: str) -> Optional[SchemaField]:
        """Get field by name."""
        for f in self.fields:
            if f.name == name:
                return f
        return None

    @property
    def is_builtin(self) -> bool:
        return self.name.startswith("__")


@dataclass
class Schema:
    """The introspected API surface."""

    types: List[SchemaType] = field(default_factory=list)
    query_type: Optional[str] = None
    mutation_type: Optional[str] = None
    subscription_type: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Schema":
        """
        Build a schema from an introspection ``__schema`` payload.

        Args:
            data: Decoded ``__schema`` object (camelCase keys)

        Returns:
            Schema with parents not yet linked
        """

        def root_name(key: str) -> Optional[str]:
            root = data.get(key)
            return root.get("name") if root else None

        return cls(
            types=[SchemaType.from_dict(t) for t in data.get("types") or []],
            query_type=root_name("queryType"),
            mutation_type=root_name("mutationType"),
            subscription_type=root_name("subscriptionType"),
        )

    def get_type(self, name: str) -> Optional[SchemaType]:
        """Look up a type by name."""
        for t in self.types:
            if t.name == name:
                return t
        return None

    def visible_types(self) -> List[SchemaType]:
        """Types excluding the ``__``-prefixed introspection types, sorted by name."""
        return sorted(
            (t for t in self.types if not t.is_builtin), key=lambda t: t.name
        )

    def iter_fields(self) -> Iterator[Tuple[SchemaType, SchemaField]]:
        for t in self.types:
            for f in t.fields:
                yield t, f

    def missing_type_refs(self) -> List[str]:
        """
        Find references to types the schema does not declare.

        Returns:
            Sorted ``"Type.field -> Missing"`` descriptions (empty if complete)
        """
        declared = {t.name for t in self.types}
        missing = set()

        for t, f in self.iter_fields():
            refs = [f.type_ref] + [a.type_ref for a in f.args]
            for ref in refs:
                name = ref.unwrap().name
                if name and name not in declared:
                    missing.add(f"{t.name}.{f.name} -> {name}")

        for t in self.types:
            for f in t.input_fields:
                name = f.type_ref.unwrap().name
                if name and name not in declared:
                    missing.add(f"{t.name}.{f.name} -> {name}")

        return sorted(missing)


def set_schema_parents(schema: Schema) -> None:
    """Set the parent type of every field declared in the schema."""
    for t in schema.types:
        for f in t.fields:
            f.parent = t
