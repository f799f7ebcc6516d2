"""
BatchExecutor -- sequential closing run with per-process failure isolation.

Contract:
    ``execute()`` validates a request, enforces the deadline gate for the
    whole batch, then invokes each process in the caller's order and
    returns an ExecutionOutcome.  A failing process is recorded and the
    run continues with the next one.

Architecture: closing_batch/services.  Imports from closing_batch.domain
    and kernel services/selectors.  Holds no session of its own; the
    invoker owns the SAVEPOINT for each call.

Invariants enforced:
    - No backend call before the request passes its structural checks.
    - All-or-nothing gate: if any code is past its deadline and the caller
      lacks override privilege, nothing is invoked.
    - Caller order is execution order; ``order`` on the catalog row is
      never used to re-sort a batch.
    - Every attempted code lands in exactly one of succeeded/failed.
    - Unknown, inactive or mismatched codes never abort the run; they are
      reported as "process not found" and skip the deadline gate.
    - Processes run strictly one at a time.
"""

from __future__ import annotations

from uuid import uuid4

from closing_kernel.domain.dtos import ProcessDefinitionInfo
from closing_kernel.exceptions import DeadlineViolationError
from closing_kernel.logging_config import LogContext, get_logger
from closing_kernel.selectors.process_selector import ProcessSelector
from closing_kernel.services.deadline_validator import DeadlineValidator
from closing_kernel.services.procedure_invoker import ProcedureCall, ProcedureInvoker

from closing_batch.domain.rules import check_request_shape, resolve_scope
from closing_batch.domain.types import (
    PROCESS_NOT_FOUND_MESSAGE,
    ExecutionOutcome,
    ExecutionRequest,
    ExecutionScope,
    ProcessFailure,
    ProcessRunStatus,
)

logger = get_logger("batch.executor")

DEFAULT_ACTOR = "SYSTEM"
COMPANY_WIDE_SENTINEL = "ALL"


class BatchExecutor:
    """Closing-run engine.

    Non-goals:
        - Does NOT call ``session.commit()`` -- caller controls boundaries.
        - Does NOT retry failed processes.
        - Does NOT run processes in parallel.
    """

    def __init__(
        self,
        validator: DeadlineValidator,
        processes: ProcessSelector,
        invoker: ProcedureInvoker,
        company_wide_sentinel: str = COMPANY_WIDE_SENTINEL,
        default_actor: str = DEFAULT_ACTOR,
    ):
        self._validator = validator
        self._processes = processes
        self._invoker = invoker
        self._sentinel = company_wide_sentinel
        self._default_actor = default_actor

    def execute(self, request: ExecutionRequest) -> ExecutionOutcome:
        """Run every requested process for the reference period.

        Raises:
            RequestShapeError: Structurally invalid request.
            PeriodNotFoundError: Current period missing from the calendar.
            DeadlineViolationError: One or more codes past their deadline
                without override privilege.
            InfrastructureError: Catalog or calendar unreadable.
        """
        actor = request.actor or self._default_actor

        with LogContext.bind(
            correlation_id=str(uuid4()),
            actor=actor,
            category=request.category,
            period=request.period_label,
        ):
            check_request_shape(request, self._sentinel)

            logger.info(
                "closing_run_started",
                extra={
                    "data_type": request.data_type,
                    "process_count": len(request.process_codes),
                    "preview": request.preview,
                    "purge_existing": request.purge_existing,
                    "override_privilege": request.override_privilege,
                },
            )

            definitions = {
                code: self._resolve(code, request)
                for code in dict.fromkeys(request.process_codes)
            }
            report = self._validator.validate_many(
                [code for code in request.process_codes if definitions[code] is not None],
                request.month,
                request.year,
                request.override_privilege,
            )
            if not report.all_valid:
                error = DeadlineViolationError(report.invalid)
                logger.warning(
                    "closing_run_rejected",
                    extra={
                        "reason": error.code,
                        "invalid_codes": list(error.process_codes),
                    },
                )
                raise error

            scope = resolve_scope(request, self._sentinel)
            outcome = self._run(request, definitions, scope, actor)

            logger.info(
                "closing_run_completed",
                extra={
                    "succeeded": len(outcome.succeeded),
                    "failed": len(outcome.failed),
                    "failed_codes": list(outcome.failed_codes),
                },
            )
            return outcome

    def _resolve(
        self, code: str, request: ExecutionRequest,
    ) -> ProcessDefinitionInfo | None:
        """The runnable definition for a code, or None if it is unknown,
        inactive, or belongs to another category/data type."""
        definition = self._processes.find(code)
        if (
            definition is None
            or not definition.active
            or not definition.matches(request.category, request.data_type)
        ):
            return None
        return definition

    def _run(
        self,
        request: ExecutionRequest,
        definitions: dict[str, ProcessDefinitionInfo | None],
        scope: ExecutionScope,
        actor: str,
    ) -> ExecutionOutcome:
        succeeded: list[str] = []
        failed: list[ProcessFailure] = []

        for code in request.process_codes:
            with LogContext.bind(process_code=code):
                definition = definitions[code]
                if definition is None:
                    failed.append(ProcessFailure(code, PROCESS_NOT_FOUND_MESSAGE))
                    logger.warning(
                        "process_not_found",
                        extra={"status": ProcessRunStatus.FAILED.value},
                    )
                    continue

                call = ProcedureCall(
                    process_code=code,
                    month=request.month,
                    year=request.year,
                    preview=request.preview,
                    purge=request.purge_existing,
                    actor=actor,
                    scope_all=scope.all_companies,
                    scope_company=scope.company,
                    scope_carrier_code=scope.carrier_code,
                    scope_cpf=scope.cpf,
                    category=request.category,
                    data_type=request.data_type,
                )

                logger.info(
                    "process_started",
                    extra={"description": definition.description},
                )
                try:
                    self._invoker.invoke(call)
                except Exception as exc:
                    failed.append(ProcessFailure(code, str(exc)))
                    logger.error(
                        "process_failed",
                        extra={
                            "status": ProcessRunStatus.FAILED.value,
                            "error_type": type(exc).__name__,
                            "error": str(exc),
                        },
                    )
                    continue

                succeeded.append(code)
                logger.info(
                    "process_succeeded",
                    extra={"status": ProcessRunStatus.SUCCEEDED.value},
                )

        return ExecutionOutcome(succeeded=tuple(succeeded), failed=tuple(failed))
