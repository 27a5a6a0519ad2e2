"""
Structure Validator
Turns untrusted model output into a validated SurfaceDescription.

Passes run in order and the first violation wins:
decode -> shape -> security scan -> compact size -> per-component check ->
reference resolution.
Reference resolution is a separate pass over the complete id set, so a
component may reference one declared later in the list.
"""

from typing import Any

import orjson
from returns.result import Failure, Result, Success

from ..core import get_logger
from ..core.json import JSONParseError, compact_size, reject_wide_integers, strict_loads, validate_json_size
from .catalog import ComponentKind, ComponentWhitelist
from .errors import SurfaceErrorCode, ValidationFailure
from .models import ComponentNode, SurfaceDescription
from .security import scan

logger = get_logger(__name__)

MAX_SURFACE_SIZE = 512 * 1024  # 512KB
MAX_SURFACE_DEPTH = 32


def _schema(message: str, **details: Any) -> ValidationFailure:
    return ValidationFailure(SurfaceErrorCode.SCHEMA_INVALID, message, details)


class StructureValidator:
    """Validates candidate surfaces against the component whitelist."""

    def __init__(
        self,
        max_size: int = MAX_SURFACE_SIZE,
        max_depth: int = MAX_SURFACE_DEPTH,
        strict: bool = False,
    ) -> None:
        self.max_size = max_size
        self.max_depth = max_depth
        self.strict = strict

    def parse(self, raw: str | bytes) -> Result[SurfaceDescription, ValidationFailure]:
        """
        Decode and validate a raw JSON surface.

        The raw text is bounded by ``max_size`` before decoding and the
        compact re-encoding of the decoded document after it, so a printed
        surface always fits wherever its source did.

        Args:
            raw: JSON text produced by the model

        Returns:
            Success with the surface, or Failure with the first violation
        """
        if isinstance(raw, str):
            try:
                raw = raw.encode("utf-8")
            except UnicodeEncodeError as e:
                return self._fail(
                    ValidationFailure(
                        SurfaceErrorCode.JSON_SYNTAX,
                        f"Invalid text at position {e.start}",
                        {"position": e.start, "originalError": e.reason},
                    )
                )

        try:
            validate_json_size(raw, self.max_size, "Surface")
        except JSONParseError as e:
            return self._fail(_schema(str(e), size=len(raw), maxSize=self.max_size))

        try:
            document = strict_loads(raw)
        except orjson.JSONDecodeError as e:
            return self._fail(
                ValidationFailure(
                    SurfaceErrorCode.JSON_SYNTAX,
                    f"Invalid JSON at position {e.pos}",
                    {"position": e.pos, "originalError": e.msg},
                )
            )

        try:
            reject_wide_integers(raw, document)
        except JSONParseError as e:
            return self._fail(_schema(str(e), reason="integerOverflow"))

        return self.validate(document)

    def validate(self, document: Any) -> Result[SurfaceDescription, ValidationFailure]:
        """Validate an already-decoded JSON document."""
        failure = self._check_shape(document)
        if failure is None:
            failure = scan(document, self.max_depth)
        if failure is None:
            failure = self._check_size(document)
        if failure is not None:
            return self._fail(failure)

        update = document["surfaceUpdate"]
        nodes: list[ComponentNode] = []
        seen: set[str] = set()

        for index, entry in enumerate(update["components"]):
            node_or_failure = self._check_entry(entry, index, seen)
            if isinstance(node_or_failure, ValidationFailure):
                return self._fail(node_or_failure)
            seen.add(node_or_failure.id)
            nodes.append(node_or_failure)

        failure = self._resolve_references(nodes, seen)
        if failure is not None:
            return self._fail(failure)

        surface = SurfaceDescription(surface_id=update["surfaceId"], components=nodes)
        logger.debug("surface_validated", surface_id=surface.surface_id, components=len(nodes))
        return Success(surface)

    def _check_shape(self, document: Any) -> ValidationFailure | None:
        if not isinstance(document, dict):
            return _schema(
                "Surface must be a JSON object", missingField="surfaceUpdate", path="root"
            )

        update = document.get("surfaceUpdate")
        if not isinstance(update, dict):
            return _schema(
                "Missing required field: surfaceUpdate", missingField="surfaceUpdate", path="root"
            )
        if not isinstance(update.get("surfaceId"), str):
            return _schema(
                "Missing required field: surfaceId", missingField="surfaceId", path="surfaceUpdate"
            )
        if not isinstance(update.get("components"), list):
            return _schema(
                "Missing required field: components", missingField="components", path="surfaceUpdate"
            )
        return None

    def _check_size(self, document: Any) -> ValidationFailure | None:
        size = compact_size(document)
        if size > self.max_size:
            return _schema(
                f"Surface size {size} bytes exceeds maximum {self.max_size} bytes",
                size=size,
                maxSize=self.max_size,
            )
        return None

    def _check_entry(self, entry: Any, index: int, seen: set[str]) -> ComponentNode | ValidationFailure:
        path = f"surfaceUpdate.components[{index}]"

        if not isinstance(entry, dict):
            return _schema(f"Component at index {index} must be an object", index=index, path=path)

        component_id = entry.get("id")
        if not isinstance(component_id, str) or not component_id.strip():
            return _schema(
                f"Component at index {index} missing required field: id",
                missingField="id",
                path=path,
            )

        component = entry.get("component")
        if not isinstance(component, dict):
            return _schema(
                f"Component at index {index} missing required field: component",
                missingField="component",
                path=path,
            )
        if len(component) != 1:
            return _schema(
                f"Component {component_id} must have exactly one kind key",
                path=f"{path}.component",
                keys=sorted(component),
            )

        if component_id in seen:
            return _schema(
                f"Duplicate component ID: {component_id}", duplicate=component_id, index=index
            )

        kind, properties = next(iter(component.items()))
        if not ComponentWhitelist.is_allowed(kind):
            return ValidationFailure(
                SurfaceErrorCode.UNKNOWN_COMPONENT,
                f"Component type {kind} not allowed",
                {"kind": kind, "allowedKinds": ComponentWhitelist.kinds()},
            )

        if not isinstance(properties, dict):
            if self.strict or properties is not None:
                return _schema(
                    f"Component {component_id} properties must be an object",
                    path=f"{path}.component.{kind}",
                )
            properties = {}

        if self.strict:
            failure = self._check_contract(component_id, ComponentKind(kind), properties, path)
            if failure is not None:
                return failure

        return ComponentNode(id=component_id, kind=ComponentKind(kind), properties=properties)

    def _check_contract(
        self, component_id: str, kind: ComponentKind, properties: dict[str, Any], path: str
    ) -> ValidationFailure | None:
        contract = ComponentWhitelist.contract_for(kind)
        prop_path = f"{path}.component.{kind.value}"

        for name in contract.required:
            if name not in properties:
                return _schema(
                    f"Component {component_id} missing required property: {name}",
                    missingField=name,
                    path=prop_path,
                )

        for name, allowed in contract.choices.items():
            if name in properties and properties[name] not in allowed:
                return _schema(
                    f"Component {component_id} has invalid {name}: {properties[name]!r}",
                    path=f"{prop_path}.{name}",
                    allowed=list(allowed),
                )
        return None

    def _resolve_references(
        self, nodes: list[ComponentNode], ids: set[str]
    ) -> ValidationFailure | None:
        kinds = {node.id: node.kind for node in nodes}

        for node in nodes:
            contract = ComponentWhitelist.contract_for(node.kind)
            for field in ComponentWhitelist.reference_fields(node.kind):
                target = node.properties.get(field)
                # Only string targets are references; absent/empty means no reference
                if not isinstance(target, str) or not target:
                    continue
                if target not in ids:
                    return ValidationFailure(
                        SurfaceErrorCode.INVALID_REFERENCE,
                        f"Component {node.id} references non-existent ID {target}",
                        {"sourceId": node.id, "targetId": target, "field": field},
                    )
                allowed = contract.reference_kinds.get(field)
                if self.strict and allowed and kinds[target] not in allowed:
                    return ValidationFailure(
                        SurfaceErrorCode.INVALID_REFERENCE,
                        f"Component {node.id} {field} must reference a {allowed[0].value}",
                        {"sourceId": node.id, "targetId": target, "field": field},
                    )
        return None

    @staticmethod
    def _fail(failure: ValidationFailure) -> Result[SurfaceDescription, ValidationFailure]:
        logger.warning(
            "surface_rejected",
            code=failure.code.value,
            message=failure.message,
            path=failure.details.get("path"),
        )
        return Failure(failure)


def parse_surface(raw: str | bytes) -> Result[SurfaceDescription, ValidationFailure]:
    """
    Convenience function to validate raw surface JSON with default limits.

    Args:
        raw: Surface JSON string

    Returns:
        Result with the validated surface or the first failure
    """
    return StructureValidator().parse(raw)
