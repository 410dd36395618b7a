import asyncio
from collections.abc import Awaitable, Callable
import functools
import logging
from typing import Any, TypeVar

from sqlalchemy.exc import OperationalError, SQLAlchemyError

from core.exceptions import DatabaseError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def db_operation(action: str, *, retries: int = 1) -> Callable[[Callable[..., Awaitable[T]]], Callable[..., Awaitable[T]]]:
    """Wrap a repository coroutine so SQLAlchemy failures surface as DatabaseError.

    Args:
        action: Human readable description used in log lines
        retries: Attempts for transient OperationalError; 1 disables retrying.
            Only read operations should retry.
    """

    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> T:
            for attempt in range(1, retries + 1):
                try:
                    return await func(*args, **kwargs)
                except OperationalError as e:
                    if attempt < retries:
                        logger.warning("OperationalError while %s%s (attempt %s): %s", action, _entity_info(args, kwargs), attempt, e)
                        await asyncio.sleep(0.1 * (2 ** (attempt - 1)))
                        continue
                    logger.error("Database error while %s%s: %s", action, _entity_info(args, kwargs), e)
                    raise DatabaseError(message=f"Database failure while {action}") from e
                except SQLAlchemyError as e:
                    logger.error("Database error while %s%s: %s", action, _entity_info(args, kwargs), e)
                    raise DatabaseError(message=f"Database failure while {action}") from e
            raise DatabaseError(message=f"Database failure while {action}")

        return wrapper

    return decorator


def _entity_info(args: tuple, kwargs: dict) -> str:
    # Skip the first argument (the AsyncSession)
    if len(args) > 1 and isinstance(args[1], int | str):
        return f" {args[1]}"
    for key in ("post_id", "slug"):
        if key in kwargs:
            return f" {key}={kwargs[key]}"
    return ""
