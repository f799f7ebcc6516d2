"""
ClosingGateway -- caller-facing boundary of the closing engine.

Responsibility:
    Parses caller payloads (camelCase keys, as sent by the operator
    front end) into typed requests, dispatches to the catalog service or
    the batch executor, and maps every outcome into a status/body pair.
    HTTP transport is out of scope; a web layer would forward
    ``GatewayResponse.status`` and ``.body`` unchanged.

Error mapping:
    - ClosingEngineError subclasses -> 400 with ``{message, code, details}``.
    - InfrastructureError -> 503 with the same body shape.
    Anything else propagates.

Construction:
    ``ClosingGateway.from_settings(session, settings)`` wires selectors,
    validator, invoker and executor against one session.  The caller owns
    the transaction (see ``closing_kernel.db.session_scope``).
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from datetime import tzinfo
from typing import Any

from sqlalchemy.orm import Session

from closing_config.schema import EngineSettings
from closing_kernel.domain.clock import Clock, SystemClock
from closing_kernel.exceptions import (
    ClosingEngineError,
    InfrastructureError,
    RequestShapeError,
)
from closing_kernel.logging_config import get_logger
from closing_kernel.selectors import (
    ClosingPeriodSelector,
    HistorySelector,
    ProcessSelector,
)
from closing_kernel.services import (
    DEFAULT_PROCEDURE_NAME,
    DeadlineValidator,
    ProcedureInvoker,
    StoredProcedureInvoker,
)

from closing_batch.domain.types import ExecutionRequest
from closing_batch.services.catalog_service import CatalogService
from closing_batch.services.executor import (
    COMPANY_WIDE_SENTINEL,
    DEFAULT_ACTOR,
    BatchExecutor,
)

logger = get_logger("batch.gateway")

STATUS_OK = 200
STATUS_BAD_REQUEST = 400
STATUS_UNAVAILABLE = 503

_TRUE_FLAGS = frozenset({"S", "Y", "TRUE", "1"})
_FALSE_FLAGS = frozenset({"N", "FALSE", "0", ""})


@dataclass(frozen=True)
class GatewayResponse:
    status: int
    body: Any

    @property
    def ok(self) -> bool:
        return self.status == STATUS_OK


# -------------------------------------------------------------------------
# Payload parsing
# -------------------------------------------------------------------------


def _required_str(payload: Mapping[str, Any], key: str) -> str:
    value = payload.get(key)
    if value is None or not str(value).strip():
        raise RequestShapeError(f"'{key}' is required", field=key)
    return str(value).strip()


def _optional_str(payload: Mapping[str, Any], key: str) -> str | None:
    value = payload.get(key)
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def _int_field(payload: Mapping[str, Any], key: str, required: bool = True) -> int | None:
    value = payload.get(key)
    if value is None or value == "":
        if required:
            raise RequestShapeError(f"'{key}' is required", field=key)
        return None
    if isinstance(value, bool):
        raise RequestShapeError(f"'{key}' must be an integer", field=key)
    if isinstance(value, float) and not value.is_integer():
        raise RequestShapeError(f"'{key}' must be a whole number", field=key)
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise RequestShapeError(f"'{key}' must be an integer", field=key) from exc


def _flag_field(payload: Mapping[str, Any], key: str) -> bool:
    value = payload.get(key)
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    text = str(value).strip().upper()
    if text in _TRUE_FLAGS:
        return True
    if text in _FALSE_FLAGS:
        return False
    raise RequestShapeError(f"'{key}' must be a boolean", field=key)


def _process_codes(payload: Mapping[str, Any]) -> tuple[str, ...]:
    value = payload.get("processCodes")
    if value is None:
        return ()
    if isinstance(value, (str, bytes)) or not isinstance(value, Iterable):
        raise RequestShapeError("'processCodes' must be a list", field="processCodes")
    return tuple(str(code).strip() for code in value)


def parse_execution_request(
    payload: Mapping[str, Any],
    actor: str | None = None,
    override_privilege: bool = False,
) -> ExecutionRequest:
    """Build an ExecutionRequest from a caller payload.

    Only types are checked here; the executor applies the business rules.
    """
    return ExecutionRequest(
        category=_optional_str(payload, "category") or "",
        data_type=_optional_str(payload, "dataType") or "",
        month=_int_field(payload, "month"),
        year=_int_field(payload, "year"),
        process_codes=_process_codes(payload),
        purge_existing=_flag_field(payload, "purge"),
        preview=_flag_field(payload, "preview"),
        scope_company=_optional_str(payload, "company"),
        scope_carrier_code=_optional_str(payload, "carrierCode"),
        scope_cpf=_optional_str(payload, "cpf"),
        actor=actor,
        override_privilege=override_privilege,
    )


def error_response(error: ClosingEngineError) -> GatewayResponse:
    status = (
        STATUS_UNAVAILABLE
        if isinstance(error, InfrastructureError)
        else STATUS_BAD_REQUEST
    )
    body: dict[str, Any] = {"message": str(error), "code": error.code}
    details = error.details()
    if details is not None:
        body["details"] = details
    return GatewayResponse(status=status, body=body)


# -------------------------------------------------------------------------
# Gateway
# -------------------------------------------------------------------------


class ClosingGateway:
    """Entry point for the three operator operations."""

    def __init__(self, catalog: CatalogService, executor: BatchExecutor):
        self._catalog = catalog
        self._executor = executor

    @classmethod
    def from_settings(
        cls,
        session: Session,
        settings: EngineSettings,
        clock: Clock | None = None,
        invoker: ProcedureInvoker | None = None,
    ) -> ClosingGateway:
        """Wire a gateway from an ``EngineSettings`` instance."""
        return cls.build(
            session,
            reserved_codes=settings.reserved_codes,
            procedure_name=settings.procedure_name,
            company_wide_sentinel=settings.company_wide_sentinel,
            default_actor=settings.default_actor,
            tz=settings.tzinfo,
            clock=clock,
            invoker=invoker,
        )

    @classmethod
    def build(
        cls,
        session: Session,
        reserved_codes: Iterable[str] = (),
        procedure_name: str = DEFAULT_PROCEDURE_NAME,
        company_wide_sentinel: str = COMPANY_WIDE_SENTINEL,
        default_actor: str = DEFAULT_ACTOR,
        tz: tzinfo | None = None,
        clock: Clock | None = None,
        invoker: ProcedureInvoker | None = None,
    ) -> ClosingGateway:
        processes = ProcessSelector(session, reserved_codes)
        periods = ClosingPeriodSelector(session)
        history = HistorySelector(session)
        validator = DeadlineValidator(periods, processes, clock or SystemClock(), tz)
        executor = BatchExecutor(
            validator,
            processes,
            invoker or StoredProcedureInvoker(session, procedure_name),
            company_wide_sentinel=company_wide_sentinel,
            default_actor=default_actor,
        )
        return cls(CatalogService(processes, periods, history), executor)

    def list_processes(self, params: Mapping[str, Any]) -> GatewayResponse:
        """``{category, dataType, month?, year?}`` -> list of processes."""

        def run() -> Any:
            processes = self._catalog.list_processes(
                _required_str(params, "category"),
                _required_str(params, "dataType"),
                _int_field(params, "month", required=False),
                _int_field(params, "year", required=False),
            )
            return [p.to_dict() for p in processes]

        return self._dispatch("list_processes", run)

    def list_history(self, params: Mapping[str, Any]) -> GatewayResponse:
        """``{category, processCode, month, year}`` -> history, newest first."""

        def run() -> Any:
            entries = self._catalog.list_history(
                _required_str(params, "category"),
                _required_str(params, "processCode"),
                _int_field(params, "month"),
                _int_field(params, "year"),
            )
            return [e.to_dict() for e in entries]

        return self._dispatch("list_history", run)

    def execute(
        self,
        payload: Mapping[str, Any],
        actor: str | None = None,
        override_privilege: bool = False,
    ) -> GatewayResponse:
        """Run a closing batch.

        ``actor`` and ``override_privilege`` come from the caller's
        identity, never from the payload.
        """

        def run() -> Any:
            request = parse_execution_request(payload, actor, override_privilege)
            return self._executor.execute(request).to_dict()

        return self._dispatch("execute", run)

    def _dispatch(self, operation: str, run: Callable[[], Any]) -> GatewayResponse:
        try:
            body = run()
        except ClosingEngineError as exc:
            response = error_response(exc)
            log = logger.error if response.status == STATUS_UNAVAILABLE else logger.warning
            log(
                "request_rejected",
                extra={
                    "operation": operation,
                    "status": response.status,
                    "error_code": exc.code,
                    "error": str(exc),
                },
            )
            return response
        return GatewayResponse(status=STATUS_OK, body=body)
