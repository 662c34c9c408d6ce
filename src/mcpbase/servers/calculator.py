# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#                github.com/dedalus-labs/mcpbase-python/LICENSE
# ==============================================================================

"""Calculator server.

Arithmetic failures (division by zero, math domain errors) are answers, not
crashes: they come back as a successful call whose structured payload holds
``{"error": ...}``.
"""

from __future__ import annotations

from collections.abc import Callable
import math
from typing import Any, Literal

from pydantic import BaseModel

from ..server import BaseMCPServer


class CalculateInput(BaseModel):
    operation: Literal["add", "subtract", "multiply", "divide"]
    a: float
    b: float


class CalculateOutput(BaseModel):
    result: float | None = None
    expression: str | None = None
    error: str | None = None


class AdvancedMathInput(BaseModel):
    operation: str
    value: float
    exponent: float | None = None


class AdvancedMathOutput(BaseModel):
    result: float | None = None
    error: str | None = None


_UNARY: dict[str, Callable[[float], float]] = {
    "sqrt": math.sqrt,
    "log": math.log,
    "sin": math.sin,
    "cos": math.cos,
    "tan": math.tan,
}


def _fmt(value: float) -> str:
    return f"{value:.15g}"


def _error(message: str) -> tuple[str, dict[str, Any]]:
    return f"Error: {message}", {"error": message}


class CalculatorServer(BaseMCPServer):
    def register_components(self) -> None:
        self.register_tool(
            "calculate",
            {
                "description": "Perform basic arithmetic calculations",
                "input_schema": CalculateInput,
                "output_schema": CalculateOutput,
            },
            self.calculate,
        )
        self.register_tool(
            "advanced_math",
            {
                "description": "Perform advanced mathematical operations",
                "input_schema": AdvancedMathInput,
                "output_schema": AdvancedMathOutput,
            },
            self.advanced_math,
        )

    def calculate(self, params: CalculateInput) -> tuple[str, dict[str, Any]]:
        a, b = params.a, params.b
        if params.operation == "add":
            result, symbol = a + b, "+"
        elif params.operation == "subtract":
            result, symbol = a - b, "-"
        elif params.operation == "multiply":
            result, symbol = a * b, "×"
        else:
            if b == 0:
                return _error("Division by zero")
            result, symbol = a / b, "÷"

        if not math.isfinite(result):
            return _error("Result out of range")

        expression = f"{_fmt(a)} {symbol} {_fmt(b)} = {_fmt(result)}"
        return expression, {"result": result, "expression": expression}

    def advanced_math(self, params: AdvancedMathInput) -> tuple[str, dict[str, Any]]:
        try:
            if params.operation == "pow":
                exponent = params.exponent if params.exponent is not None else 2
                result = math.pow(params.value, exponent)
            elif params.operation in _UNARY:
                result = _UNARY[params.operation](params.value)
            else:
                return _error("Unknown operation")
        except (ValueError, OverflowError) as exc:
            return _error(str(exc))

        if not math.isfinite(result):
            return _error("Result out of range")

        return f"Result: {_fmt(result)}", {"result": result}


__all__ = ["CalculatorServer"]
