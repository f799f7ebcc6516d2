"""
closing_batch -- closing runs for health-plan billing cycles.

Runs batches of closing processes for a reference period with an
all-or-nothing deadline gate and per-process failure isolation, and
exposes the catalog and execution history to operators.

Architecture:
    closing_batch/ is a top-level package.  Nothing in closing_kernel/
    imports from closing_batch.
"""
