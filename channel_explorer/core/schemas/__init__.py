"""Shared API schemas."""

from channel_explorer.core.schemas.problem_details import ProblemDetails

__all__ = ["ProblemDetails"]
