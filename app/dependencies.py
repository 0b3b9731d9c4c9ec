from typing import Annotated

from fastapi import Depends, Request

from app.core.config import Settings, get_settings
from app.services.pipeline.orchestrator import DecryptionCoordinator


# Settings dependency
SettingsDep = Annotated[Settings, Depends(get_settings)]


# Coordinator dependency, built once in the application lifespan
def get_coordinator(request: Request) -> DecryptionCoordinator:
    """Get the shared decryption coordinator."""
    return request.app.state.coordinator

CoordinatorDep = Annotated[DecryptionCoordinator, Depends(get_coordinator)]
