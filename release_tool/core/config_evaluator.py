# release_tool/core/config_evaluator.py
"""Schema-driven validation and normalization of nested configuration

A schema is a nested mapping whose leaves are :class:`Property` rules. Leaves
can be written either with the combinator API::

    Property("string").optional().named("Application Name")

or, in JSON config templates, as expression strings in the same shape::

    "string.regex(/(\\d+)/).optional().keyed('CFBundleVersion')"

Expression strings are tokenized and turned into the same ``Property`` value;
nothing is ever evaluated as code.
"""

import functools
import re
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple

from ..api.exceptions import SchemaError


TYPE_CHECKS: Dict[str, Callable[[Any], bool]] = {
    "string": lambda v: isinstance(v, str),
    "number": lambda v: isinstance(v, (int, float)) and not isinstance(v, bool),
    "boolean": lambda v: isinstance(v, bool),
    "object": lambda v: isinstance(v, dict),
    "array": lambda v: isinstance(v, list),
}

_REGEX_FLAGS = {
    "i": re.IGNORECASE,
    "m": re.MULTILINE,
    "s": re.DOTALL,
    "g": 0,
    "u": 0,
}

_UNSET = object()


@dataclass(frozen=True)
class NormalizedValue:
    """Normalized leaf: the value plus its external key and display name"""
    value: Any
    key: str
    name: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {"value": self.value, "key": self.key, "name": self.name}


@dataclass
class FieldError:
    """Evaluation error tagged with the dotted path of the field"""
    key_path: str
    message: str

    def to_dict(self) -> Dict[str, str]:
        """Convert to dictionary"""
        return {"key_path": self.key_path, "message": self.message}

    def __str__(self) -> str:
        return f"{self.key_path}: {self.message}"


@dataclass
class EvaluationResult:
    """Outcome of evaluating a raw configuration against a schema"""
    is_valid: bool = True
    errors: List[FieldError] = field(default_factory=list)
    config: Dict[str, Any] = field(default_factory=dict)

    def add_error(self, key_path: str, message: str) -> None:
        """Add error and mark the result invalid"""
        self.errors.append(FieldError(key_path, message))
        self.is_valid = False

    def merge(self, other: 'EvaluationResult') -> None:
        """Merge a child result's validity and errors into this one"""
        self.errors.extend(other.errors)
        if not other.is_valid:
            self.is_valid = False


@dataclass(frozen=True)
class Property:
    """Leaf rule of a schema

    Each combinator returns a new ``Property``; instances are immutable and
    can be shared between schemas.
    """
    type_name: str
    is_optional: bool = False
    default_value: Any = _UNSET
    pattern: Optional[str] = None
    pattern_flags: int = 0
    label: Optional[str] = None
    external_key: Optional[str] = None

    def __post_init__(self):
        if self.type_name not in TYPE_CHECKS:
            raise SchemaError(
                f"Unknown property type '{self.type_name}'. "
                f"Expected one of: {', '.join(TYPE_CHECKS)}"
            )

    def optional(self) -> 'Property':
        return replace(self, is_optional=True)

    def default(self, value: Any) -> 'Property':
        return replace(self, default_value=value)

    def regex(self, pattern: str, flags: int = 0) -> 'Property':
        try:
            re.compile(pattern, flags)
        except re.error as e:
            raise SchemaError(f"Invalid regular expression /{pattern}/: {e}")
        return replace(self, pattern=pattern, pattern_flags=flags)

    def named(self, label: str) -> 'Property':
        return replace(self, label=label)

    def keyed(self, external_key: str) -> 'Property':
        return replace(self, external_key=external_key)

    @property
    def has_default(self) -> bool:
        return self.default_value is not _UNSET

    def evaluate(self, raw_value: Any, key: str) -> Tuple[Optional[NormalizedValue], Optional[str]]:
        """
        Evaluate a raw value against this rule

        Args:
            raw_value: Raw value (or an already normalized value)
            key: Schema key of the field

        Returns:
            Tuple of (normalized value, error message); exactly one is None
        """
        value = raw_value.value if isinstance(raw_value, NormalizedValue) else raw_value

        if self.has_default and not value:
            value = self.default_value

        normalized = NormalizedValue(
            value=value,
            key=self.external_key or key,
            name=self.label,
        )

        if self.is_optional and value is None:
            return normalized, None

        # Regex is only checked once a value is present
        if (self.pattern is not None and value is not None
                and not re.search(self.pattern, str(value), self.pattern_flags)):
            return None, f"value '{value}' does not match /{self.pattern}/"

        if value is None:
            return None, "field is required"

        if not TYPE_CHECKS[self.type_name](value):
            return None, f"type mismatch, {value!r} is not of type: {self.type_name}"

        return normalized, None


class _ExpressionParser:
    """Tokenizer for property expressions such as ``string.optional().named('X')``"""

    _IDENT = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
    _NUMBER = re.compile(r"-?\d+(?:\.\d+)?")

    def __init__(self, expression: str):
        self.text = expression
        self.pos = 0

    def parse(self) -> Property:
        prop = Property(self._ident())
        while True:
            self._skip_ws()
            if self.pos >= len(self.text):
                return prop
            self._expect(".")
            method = self._ident()
            self._expect("(")
            self._skip_ws()
            args = []
            if self._peek() != ")":
                args.append(self._literal())
            self._expect(")")
            prop = self._apply(prop, method, args)

    def _apply(self, prop: Property, method: str, args: list) -> Property:
        if method == "optional" and not args:
            return prop.optional()
        if method == "default" and len(args) == 1:
            return prop.default(args[0])
        if method == "regex" and len(args) == 1:
            arg = args[0]
            if isinstance(arg, tuple):
                return prop.regex(*arg)
            return prop.regex(str(arg))
        if method in ("named", "keyed") and len(args) == 1 and isinstance(args[0], str):
            return getattr(prop, method)(args[0])
        raise self._error(f"unsupported call '{method}' with {len(args)} argument(s)")

    def _literal(self) -> Any:
        self._skip_ws()
        char = self._peek()
        if char in ("'", '"'):
            return self._string(char)
        if char == "/":
            return self._regex()

        for word, value in (("true", True), ("false", False), ("null", None)):
            if self.text.startswith(word, self.pos):
                self.pos += len(word)
                return value

        match = self._NUMBER.match(self.text, self.pos)
        if match:
            self.pos = match.end()
            number = match.group(0)
            return float(number) if "." in number else int(number)

        raise self._error("expected a literal")

    def _string(self, quote: str) -> str:
        self.pos += 1
        chars = []
        while self.pos < len(self.text):
            char = self.text[self.pos]
            if char == "\\" and self.pos + 1 < len(self.text):
                escaped = self.text[self.pos + 1]
                chars.append({"n": "\n", "t": "\t"}.get(escaped, escaped))
                self.pos += 2
                continue
            if char == quote:
                self.pos += 1
                return "".join(chars)
            chars.append(char)
            self.pos += 1
        raise self._error("unterminated string")

    def _regex(self) -> Tuple[str, int]:
        self.pos += 1
        chars = []
        while self.pos < len(self.text):
            char = self.text[self.pos]
            if char == "\\" and self.pos + 1 < len(self.text):
                escaped = self.text[self.pos + 1]
                # "\/" is only an escape of the delimiter
                chars.append("/" if escaped == "/" else char + escaped)
                self.pos += 2
                continue
            if char == "/":
                self.pos += 1
                flags = 0
                while self.pos < len(self.text) and self.text[self.pos] in _REGEX_FLAGS:
                    flags |= _REGEX_FLAGS[self.text[self.pos]]
                    self.pos += 1
                return "".join(chars), flags
            chars.append(char)
            self.pos += 1
        raise self._error("unterminated regular expression")

    def _ident(self) -> str:
        self._skip_ws()
        match = self._IDENT.match(self.text, self.pos)
        if not match:
            raise self._error("expected an identifier")
        self.pos = match.end()
        return match.group(0)

    def _expect(self, token: str) -> None:
        self._skip_ws()
        if not self.text.startswith(token, self.pos):
            raise self._error(f"expected '{token}'")
        self.pos += len(token)

    def _peek(self) -> str:
        return self.text[self.pos] if self.pos < len(self.text) else ""

    def _skip_ws(self) -> None:
        while self.pos < len(self.text) and self.text[self.pos].isspace():
            self.pos += 1

    def _error(self, message: str) -> SchemaError:
        return SchemaError(
            f"Invalid property expression '{self.text}' at position {self.pos}: {message}",
            expression=self.text,
        )


@functools.lru_cache(maxsize=256)
def parse_property_expression(expression: str) -> Property:
    """
    Parse a property expression string

    Args:
        expression: Expression such as ``"string.default('oem')"``

    Returns:
        Property rule

    Raises:
        SchemaError: If the expression is malformed
    """
    return _ExpressionParser(expression).parse()


def as_property(node: Any) -> Property:
    """Coerce a schema leaf (Property or expression string) to a Property"""
    if isinstance(node, Property):
        return node
    if isinstance(node, str):
        return parse_property_expression(node)
    raise SchemaError(f"Schema leaf must be a Property or expression string, got {type(node).__name__}")


def evaluate(schema: Mapping, raw_config: Optional[Mapping] = None,
             prefix: Optional[str] = None) -> EvaluationResult:
    """
    Evaluate a raw configuration against a schema

    Args:
        schema: Nested mapping of Property rules / expression strings
        raw_config: Raw configuration values
        prefix: Dotted key path of ``raw_config`` within the whole tree

    Returns:
        EvaluationResult with path-tagged errors and the normalized tree

    Raises:
        SchemaError: If the schema itself is malformed
    """
    raw_config = raw_config or {}
    result = EvaluationResult()

    for key, node in schema.items():
        key_path = f"{prefix}.{key}" if prefix else key
        raw_value = raw_config.get(key)

        if isinstance(node, Mapping):
            if raw_value is not None and not isinstance(raw_value, Mapping):
                result.add_error(key_path, "expected an object")
                continue

            child = evaluate(node, raw_value, key_path)
            result.merge(child)
            if child.is_valid:
                result.config[key] = child.config
            continue

        normalized, message = as_property(node).evaluate(raw_value, key)
        if message:
            result.add_error(key_path, message)
        else:
            result.config[key] = normalized

    return result


def to_plain(config: Mapping) -> Dict[str, Any]:
    """Strip a normalized tree back to its raw values"""
    plain = {}
    for key, value in config.items():
        if isinstance(value, NormalizedValue):
            plain[key] = value.value
        elif isinstance(value, Mapping):
            plain[key] = to_plain(value)
        else:
            plain[key] = value
    return plain


def iter_values(config: Mapping, prefix: Optional[str] = None) -> Iterator[Tuple[str, NormalizedValue]]:
    """Yield ``(key_path, NormalizedValue)`` for every leaf of a normalized tree"""
    for key, value in config.items():
        key_path = f"{prefix}.{key}" if prefix else key
        if isinstance(value, NormalizedValue):
            yield key_path, value
        elif isinstance(value, Mapping):
            yield from iter_values(value, key_path)
