"""
Output schema contracts for structured generation.

Each structured operation declares the exact JSON shape the generator must
produce as a SchemaDescriptor. Descriptors are rendered to JSON Schema for
the provider prompt and used to validate the parsed response. Validation
only reports problems; it never coerces or repairs a value.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class SchemaKind(Enum):
    """Node types a descriptor can describe."""
    OBJECT = "object"
    ARRAY = "array"
    STRING = "string"
    INTEGER = "integer"
    ENUM = "enum"


class Operation(Enum):
    """Generation operations offered by the pipeline."""
    KEYWORD_RESEARCH = "keyword_research"
    SMART_ANALYSIS = "smart_analysis"
    STRATEGY = "strategy"


@dataclass(frozen=True)
class SchemaDescriptor:
    """
    Recursive description of an expected JSON value.

    Attributes:
        kind: Node type.
        properties: Child descriptors by name (OBJECT only).
        items: Element descriptor (ARRAY only).
        required: Property names that must be present (OBJECT only).
        enum_values: Allowed strings (ENUM only).
        minimum: Inclusive lower bound (INTEGER only).
        maximum: Inclusive upper bound (INTEGER only).
        description: Guidance passed to the generator.
    """
    kind: SchemaKind
    properties: dict[str, "SchemaDescriptor"] = field(default_factory=dict)
    items: Optional["SchemaDescriptor"] = None
    required: frozenset[str] = frozenset()
    enum_values: tuple[str, ...] = ()
    minimum: Optional[int] = None
    maximum: Optional[int] = None
    description: Optional[str] = None

    def __post_init__(self) -> None:
        """Check structural invariants."""
        missing = set(self.required) - set(self.properties)
        if missing:
            raise ValueError(
                f"Required fields not declared as properties: {sorted(missing)}"
            )
        if self.kind == SchemaKind.ARRAY and self.items is None:
            raise ValueError("ARRAY descriptor needs an items descriptor")
        if self.kind == SchemaKind.ENUM and not self.enum_values:
            raise ValueError("ENUM descriptor needs at least one enum value")
        if (
            self.minimum is not None
            and self.maximum is not None
            and self.minimum > self.maximum
        ):
            raise ValueError(f"minimum ({self.minimum}) exceeds maximum ({self.maximum})")

    def to_json_schema(self) -> dict[str, Any]:
        """Render as a JSON Schema dict."""
        if self.kind == SchemaKind.ENUM:
            schema: dict[str, Any] = {"type": "string", "enum": list(self.enum_values)}
        else:
            schema = {"type": self.kind.value}

        if self.description:
            schema["description"] = self.description

        if self.kind == SchemaKind.OBJECT:
            schema["properties"] = {
                name: child.to_json_schema() for name, child in self.properties.items()
            }
            # Keep declaration order for readability
            schema["required"] = [name for name in self.properties if name in self.required]
        elif self.kind == SchemaKind.ARRAY:
            schema["items"] = self.items.to_json_schema()  # type: ignore[union-attr]
        elif self.kind == SchemaKind.INTEGER:
            if self.minimum is not None:
                schema["minimum"] = self.minimum
            if self.maximum is not None:
                schema["maximum"] = self.maximum

        return schema

    def validate(self, value: Any, path: str = "$") -> list[str]:
        """
        Check a parsed JSON value against this descriptor.

        Args:
            value: Parsed JSON value.
            path: Location of ``value`` in the document (for messages).

        Returns:
            List of violations; empty when the value conforms.
        """
        if self.kind == SchemaKind.OBJECT:
            if not isinstance(value, dict):
                return [f"{path}: expected object, got {_type_name(value)}"]
            violations = []
            for name in self.properties:
                if name in self.required and name not in value:
                    violations.append(f"{path}.{name}: required field is missing")
            for name, child in self.properties.items():
                if name in value:
                    violations.extend(child.validate(value[name], f"{path}.{name}"))
            return violations

        if self.kind == SchemaKind.ARRAY:
            if not isinstance(value, list):
                return [f"{path}: expected array, got {_type_name(value)}"]
            violations = []
            for index, item in enumerate(value):
                violations.extend(self.items.validate(item, f"{path}[{index}]"))  # type: ignore[union-attr]
            return violations

        if self.kind == SchemaKind.STRING:
            if not isinstance(value, str):
                return [f"{path}: expected string, got {_type_name(value)}"]
            return []

        if self.kind == SchemaKind.ENUM:
            if not isinstance(value, str):
                return [f"{path}: expected string, got {_type_name(value)}"]
            if value not in self.enum_values:
                return [f"{path}: '{value}' is not one of {list(self.enum_values)}"]
            return []

        # INTEGER - bool is an int subclass in Python but not a JSON integer
        if isinstance(value, bool) or not isinstance(value, int):
            return [f"{path}: expected integer, got {_type_name(value)}"]
        if self.minimum is not None and value < self.minimum:
            return [f"{path}: {value} is below minimum {self.minimum}"]
        if self.maximum is not None and value > self.maximum:
            return [f"{path}: {value} is above maximum {self.maximum}"]
        return []


def _type_name(value: Any) -> str:
    """JSON type name of a parsed value."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


def _string(description: Optional[str] = None) -> SchemaDescriptor:
    return SchemaDescriptor(kind=SchemaKind.STRING, description=description)


def _string_list(description: Optional[str] = None) -> SchemaDescriptor:
    return SchemaDescriptor(kind=SchemaKind.ARRAY, items=_string(), description=description)


# =============================================================================
# Fixed contracts
# =============================================================================

KEYWORD_RESULT_SCHEMA = SchemaDescriptor(
    kind=SchemaKind.OBJECT,
    properties={
        "keyword": _string(),
        "volume": _string("Estimated monthly search volume (e.g., '1k-10k')"),
        "difficulty": SchemaDescriptor(
            kind=SchemaKind.INTEGER,
            minimum=0,
            maximum=100,
            description="SEO Difficulty 0-100. Be realistic.",
        ),
        "intent": SchemaDescriptor(
            kind=SchemaKind.ENUM,
            enum_values=("Informational", "Commercial", "Transactional", "Navigational"),
        ),
        "competition": SchemaDescriptor(
            kind=SchemaKind.ENUM,
            enum_values=("Low", "Medium", "High"),
        ),
    },
    required=frozenset({"keyword", "volume", "difficulty", "intent", "competition"}),
)

KEYWORD_LIST_SCHEMA = SchemaDescriptor(kind=SchemaKind.ARRAY, items=KEYWORD_RESULT_SCHEMA)

SMART_ANALYSIS_SCHEMA = SchemaDescriptor(
    kind=SchemaKind.OBJECT,
    properties={
        "seoScore": SchemaDescriptor(
            kind=SchemaKind.INTEGER,
            minimum=0,
            maximum=100,
            description="Score 0-100 based on original content",
        ),
        "optimizedContent": _string("The full rewritten content, formatted in Markdown."),
        "meta": SchemaDescriptor(
            kind=SchemaKind.OBJECT,
            properties={
                "title": _string(),
                "description": _string(),
                "slug": _string(),
            },
            required=frozenset({"title", "description", "slug"}),
        ),
        "schemaMarkup": _string("JSON-LD script for the content type."),
        "internalLinks": SchemaDescriptor(
            kind=SchemaKind.ARRAY,
            items=SchemaDescriptor(
                kind=SchemaKind.OBJECT,
                properties={
                    "anchor": _string(),
                    "context": _string("Where to insert this link and why"),
                },
                required=frozenset({"anchor", "context"}),
            ),
        ),
        "insights": _string_list("Why these changes were made."),
        "criticalIssues": _string_list("Major SEO errors found in original."),
    },
    required=frozenset({
        "seoScore",
        "optimizedContent",
        "meta",
        "schemaMarkup",
        "internalLinks",
        "insights",
        "criticalIssues",
    }),
)

_REGISTRY: dict[Operation, Optional[SchemaDescriptor]] = {
    Operation.KEYWORD_RESEARCH: KEYWORD_LIST_SCHEMA,
    Operation.SMART_ANALYSIS: SMART_ANALYSIS_SCHEMA,
    Operation.STRATEGY: None,  # Free-form text/HTML
}


def schema_for(operation: Operation) -> Optional[SchemaDescriptor]:
    """
    Look up the output contract of an operation.

    Args:
        operation: The generation operation.

    Returns:
        The operation's SchemaDescriptor, or None for free-form operations.
    """
    return _REGISTRY[operation]
