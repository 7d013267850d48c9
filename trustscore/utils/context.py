import uuid
import time
from contextvars import ContextVar
from typing import Optional

run_id_var: ContextVar[Optional[str]] = ContextVar("verification_run_id", default=None)
run_start_time_var: ContextVar[Optional[float]] = ContextVar("verification_run_start_time", default=None)

def start_run(message_id: int) -> str:
    """Bind a fresh run id for the current task; log records use it for correlation."""
    run_id = f"verify-{message_id}-{uuid.uuid4().hex[:8]}"
    run_id_var.set(run_id)
    run_start_time_var.set(time.time())
    return run_id

def get_run_id() -> Optional[str]:
    return run_id_var.get()

def get_run_duration_ms() -> int:
    start_time = run_start_time_var.get()
    if start_time:
        return int((time.time() - start_time) * 1000)
    return 0
