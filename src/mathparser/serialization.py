"""
Serialization helpers for expression trees and parser options.

Provides lossless JSON/YAML round-trip via intermediate dict representation.
Custom function implementations are code and are not serialized: a
deserialized call keeps the definition's name and argument range, and its
implementation is supplied to calc() through CustomFunctions.
"""
from __future__ import annotations

import json
from typing import Any, Dict

import yaml

from mathparser.config import ParseOptions
from mathparser.expressions import (
    BinaryExpression,
    BinaryOperator,
    Comparison,
    ComparisonOperator,
    Constant,
    Expression,
    FreeformCall,
    UnaryExpression,
    UnaryOperator,
    Variable,
)
from mathparser.model import CustomFunctions, FunctionDefinition


def definition_to_dict(d: FunctionDefinition) -> Dict[str, Any]:
    return {"name": d.name, "min_args": d.min_args, "max_args": d.max_args}


def definition_from_dict(d: Dict[str, Any]) -> FunctionDefinition:
    return FunctionDefinition(name=d["name"], min_args=d["min_args"], max_args=d["max_args"])


def expr_to_dict(expr: Expression | None) -> Any:
    if expr is None:
        return None
    if isinstance(expr, Constant):
        return {"type": "const", "value": expr.value}
    if isinstance(expr, Variable):
        return {"type": "var", "name": expr.name}
    if isinstance(expr, UnaryExpression):
        return {
            "type": "unary",
            "operator": expr.operator.value,
            "operand": expr_to_dict(expr.operand),
        }
    if isinstance(expr, BinaryExpression):
        return {
            "type": "binary",
            "operator": expr.operator.value,
            "left": expr_to_dict(expr.left),
            "right": expr_to_dict(expr.right),
        }
    if isinstance(expr, FreeformCall):
        return {
            "type": "call",
            "definition": definition_to_dict(expr.definition),
            "arguments": [expr_to_dict(a) for a in expr.arguments],
        }
    if isinstance(expr, Comparison):
        return {
            "type": "compare",
            "operator": expr.operator.value,
            "left": expr_to_dict(expr.left),
            "right": expr_to_dict(expr.right),
        }
    raise TypeError(f"Unsupported Expression type: {type(expr)}")


def expr_from_dict(d: Any) -> Expression | None:
    if d is None:
        return None
    t = d.get("type")
    if t == "const":
        return Constant(d["value"])
    if t == "var":
        return Variable(d["name"])
    if t == "unary":
        op = UnaryOperator(d["operator"])
        return UnaryExpression(operator=op, operand=expr_from_dict(d["operand"]))
    if t == "binary":
        op = BinaryOperator(d["operator"])
        left = expr_from_dict(d["left"])
        right = expr_from_dict(d["right"])
        return BinaryExpression(operator=op, left=left, right=right)
    if t == "call":
        definition = definition_from_dict(d["definition"])
        arguments = tuple(expr_from_dict(a) for a in d.get("arguments", []))
        return FreeformCall(definition=definition, arguments=arguments)
    if t == "compare":
        op = ComparisonOperator(d["operator"])
        left = expr_from_dict(d["left"])
        right = expr_from_dict(d["right"])
        return Comparison(operator=op, left=left, right=right)
    raise TypeError(f"Unsupported expression dict type: {t}")


def expression_to_json(expr: Expression) -> str:
    return json.dumps(expr_to_dict(expr), sort_keys=True)


def expression_from_json(s: str) -> Expression:
    return expr_from_dict(json.loads(s))


def expression_to_yaml(expr: Expression) -> str:
    return yaml.safe_dump(expr_to_dict(expr))


def expression_from_yaml(s: str) -> Expression:
    return expr_from_dict(yaml.safe_load(s))


def options_to_dict(o: ParseOptions) -> Dict[str, Any]:
    return {
        "is_minus_negative_function": o.is_minus_negative_function,
        "is_implicit_multiplication": o.is_implicit_multiplication,
        "variable_names": sorted(o.variable_names),
        "custom_functions": [definition_to_dict(f) for f in o.custom_functions],
        "max_depth": o.max_depth,
    }


def options_from_dict(d: Dict[str, Any]) -> ParseOptions:
    defaults = ParseOptions()
    return ParseOptions(
        is_minus_negative_function=d.get("is_minus_negative_function", defaults.is_minus_negative_function),
        is_implicit_multiplication=d.get("is_implicit_multiplication", defaults.is_implicit_multiplication),
        variable_names=d.get("variable_names", defaults.variable_names),
        custom_functions=CustomFunctions(
            definition_from_dict(f) for f in d.get("custom_functions", [])
        ),
        max_depth=d.get("max_depth", defaults.max_depth),
    )


def options_to_yaml(o: ParseOptions) -> str:
    return yaml.safe_dump(options_to_dict(o))


def options_from_yaml(s: str) -> ParseOptions:
    return options_from_dict(yaml.safe_load(s) or {})
