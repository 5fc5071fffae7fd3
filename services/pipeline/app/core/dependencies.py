"""
Dependency injection for the pipeline service.
"""

from fastapi import HTTPException, Request, status

from workers.pipeline.coordinator import PipelineCoordinator


def get_coordinator(request: Request) -> PipelineCoordinator:
    """
    Get the coordinator built during application startup.

    Args:
        request: Incoming request

    Returns:
        PipelineCoordinator

    Raises:
        HTTPException: If the application has not finished starting
    """
    coordinator = getattr(request.app.state, "coordinator", None)
    if coordinator is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Pipeline not initialized",
        )
    return coordinator
