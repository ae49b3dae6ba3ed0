"""FastAPI routers for the payroll application."""

from .deductions import router as deductions_router
from .payroll import router as payroll_router

__all__ = ["deductions_router", "payroll_router"]
