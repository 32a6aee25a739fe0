"""
Module: cashflow_kernel.selectors.base
Responsibility: Abstract base class for all read-only query selectors, and the
    guarded read path that turns untyped rows into typed facts.
Architecture position: Kernel > Selectors.  May import from db/, models/ and
    domain/.  MUST NOT import from engines or outer layers.
    Selectors NEVER create, modify, or delete data.

Invariants enforced:
    - Read-only access: selectors accept a Session from the caller and never
      call session.add(), session.delete(), session.commit(), or
      session.flush().
    - DTO return convention: selectors return frozen fact dataclasses, not
      ORM instances or raw rows.
    - Degradation: an unavailable data store yields an empty fact list and a
      malformed row is skipped individually; neither raises to the caller.

Failure modes:
    - UpstreamUnavailableError raised by ``guarded_read`` and recovered by
      ``read_facts`` (logged as ``upstream_unavailable``).
    - MalformedFactError raised by coercion and recovered per row (logged
      as ``malformed_fact_skipped``).
"""

from abc import ABC
from collections.abc import Callable, Mapping
from typing import Any, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.sql import Executable

from cashflow_kernel.exceptions import MalformedFactError, UpstreamUnavailableError
from cashflow_kernel.logging_config import get_logger

logger = get_logger("selectors")

FactType = TypeVar("FactType")


class BaseSelector(ABC):
    """
    Abstract base class for all selectors.

    Contract:
        Selectors accept a Session from the caller, perform read-only queries,
        and return typed facts.  They MUST NOT mutate any data.

    Non-goals:
        - No retries; a failed read degrades immediately.
    """

    def __init__(self, session: Session):
        self.session = session

    def guarded_read(self, source: str, stmt: Executable) -> list[Mapping[str, Any]]:
        """
        Execute ``stmt`` and return its rows as mappings.

        The failed transaction is rolled back so later reads on the same
        session still work.

        Raises:
            UpstreamUnavailableError: wrapping any SQLAlchemyError.
        """
        try:
            return [row._mapping for row in self.session.execute(stmt)]
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise UpstreamUnavailableError(source, type(exc).__name__) from exc

    def read_facts(
        self,
        source: str,
        stmt: Executable,
        coerce: Callable[[Mapping[str, Any]], FactType],
    ) -> list[FactType]:
        """
        Read ``stmt`` and coerce every row, skipping malformed ones.

        Returns:
            Typed facts in query order; empty when the store is unavailable.
        """
        try:
            rows = self.guarded_read(source, stmt)
        except UpstreamUnavailableError as exc:
            logger.warning("upstream_unavailable", extra={
                "source": exc.source,
                "reason": exc.reason,
            })
            return []

        facts: list[FactType] = []
        skipped = 0
        for row in rows:
            try:
                facts.append(coerce(row))
            except MalformedFactError as exc:
                skipped += 1
                logger.warning("malformed_fact_skipped", extra={
                    "source": source,
                    "fact_type": exc.fact_type,
                    "field": exc.field,
                    "value": repr(exc.value),
                })

        logger.debug("facts_read", extra={
            "source": source,
            "row_count": len(rows),
            "fact_count": len(facts),
            "skipped_count": skipped,
        })
        return facts
