"""Harness settings."""

import logging
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class HarnessSettings(BaseModel):
    """Knobs shared by every test in a ServerTestCase subclass.

    Override per class:

        class UserApiTest(ServerTestCase):
            settings = HarnessSettings(startup_timeout=10.0)
    """

    model_config = ConfigDict(frozen=True)

    bind_host: str = Field(
        default="127.0.0.1", description="Interface the server under test listens on"
    )
    startup_timeout: float = Field(
        default=5.0, gt=0, description="Seconds to wait for the server to start"
    )
    shutdown_timeout: float = Field(
        default=5.0, gt=0, description="Seconds to wait for the server thread to exit"
    )
    server_log_level: str = Field(
        default="warning", description="uvicorn log level for the server under test"
    )
    request_timeout: float = Field(
        default=30.0, gt=0, description="httpx timeout used when no TimeoutOption is given"
    )
    log_file: Optional[str] = Field(
        None, description="Also write harness logs to this rotating file"
    )
    log_level: int = Field(default=logging.INFO, description="Harness log level")
