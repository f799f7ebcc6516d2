"""
Closing Kernel

Reference-data reads and deadline governance for the monthly health-plan
billing close:
- Process catalog and closing period lookups
- Per-process execution windows with privileged override
- Stored-procedure bridge for closing processes
- Read-only execution history
"""

__version__ = "0.1.0"
