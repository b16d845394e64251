"""Step wrapper shared by the sample runners."""
from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Generator

from azure.core.exceptions import AzureError

from src.errors import SampleError

logger = logging.getLogger(__name__)


@contextmanager
def sample_step(sample: str, step: str) -> Generator[None, None, None]:
    """Turn Azure SDK failures inside one step into SampleError."""
    try:
        yield
    except AzureError as e:
        logger.error("[%s] %s failed: %s", sample, step, e)
        raise SampleError(sample, step, str(e)) from e
