"""Error handling patterns for all tool functions."""

import asyncio
import traceback
from collections.abc import Awaitable, Callable
from functools import wraps
from typing import List, ParamSpec

import duckdb

from mini_mcp.protocol.types import SecurityCheckResult, ToolResult
from mini_mcp.utils.logger import log_error

P = ParamSpec("P")


class ToolInputError(ValueError):
    """Raised when tool arguments are missing or malformed."""


def create_error_result(message: str) -> List[ToolResult]:
    """Build the error content returned to the client."""
    return [ToolResult(text=f"Error: {message}", is_error=True)]


def create_security_error(check: SecurityCheckResult) -> List[ToolResult]:
    """Build the error content for a rejected security check."""
    text = f"Error: Security: {check.reason}"
    if check.warning:
        text += f"\n{check.warning}"
    return [ToolResult(text=text, is_error=True)]


def handle_tool_errors(
    operation_name: str,
) -> Callable[
    [Callable[P, Awaitable[List[ToolResult]]]],
    Callable[P, Awaitable[List[ToolResult]]],
]:
    """Decorator converting expected tool failures into error results."""

    def decorator(
        func: Callable[P, Awaitable[List[ToolResult]]],
    ) -> Callable[P, Awaitable[List[ToolResult]]]:
        @wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> List[ToolResult]:
            try:
                return await func(*args, **kwargs)
            except (TimeoutError, asyncio.TimeoutError) as e:
                log_error(f"{operation_name} timed out: {str(e)}")
                return create_error_result(str(e))
            except duckdb.Error as e:
                log_error(
                    f"Query error in {operation_name}: {str(e)}",
                    {"traceback": traceback.format_exc()},
                )
                return create_error_result(f"Query failed: {str(e)}")
            except ValueError as e:
                # Raised deliberately with a user-facing message
                log_error(f"{operation_name} rejected: {str(e)}")
                return create_error_result(str(e))
            except (TypeError, KeyError, AttributeError, OSError) as e:
                log_error(
                    f"Error in {operation_name}: {str(e)}",
                    {"traceback": traceback.format_exc()},
                )
                return create_error_result(f"Error in {operation_name}: {str(e)}")

        return wrapper

    return decorator
