"""Health check routes."""
import os
import platform
import sys
import time
from datetime import datetime, timezone
from pathlib import Path

import loguru
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from ide_api.dependencies import get_settings, get_workspace_root
from shared.config import Settings

router = APIRouter(prefix="/health")

_STARTED_AT = time.monotonic()


def _uptime() -> float:
    return round(time.monotonic() - _STARTED_AT, 3)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _load_average() -> list[float] | None:
    # os.getloadavg 在 Windows 上不可用
    if not hasattr(os, "getloadavg"):
        return None
    try:
        return list(os.getloadavg())
    except OSError:
        return None


def _count_folders(root: Path) -> int:
    try:
        with os.scandir(root) as it:
            return sum(1 for entry in it if entry.is_dir())
    except OSError as e:
        loguru.logger.warning(f"Could not count workspace folders: {e}")
        return 0


@router.get("")
async def health(
    root: Path = Depends(get_workspace_root),
    settings: Settings = Depends(get_settings),
):
    """Health check endpoint; 503 when the workspace is inaccessible."""
    workspace_error = None
    if not root.is_dir():
        workspace_error = f"Workspace directory {root} does not exist"
    elif not os.access(root, os.R_OK | os.W_OK | os.X_OK):
        workspace_error = f"Workspace directory {root} is not readable and writable"
    accessible = workspace_error is None

    uptime = _uptime()
    data = {
        "success": True,
        "status": "healthy",
        "message": "IDE Server is running",
        "timestamp": _now(),
        "server": {
            "port": settings.port,
            "environment": settings.environment,
            "uptime": f"{int(uptime // 60)} minutes",
        },
        "workspace": {
            "path": str(root),
            "status": "accessible" if accessible else "inaccessible",
            "folderCount": _count_folders(root) if accessible else 0,
            "error": workspace_error,
        },
        "system": {
            "platform": sys.platform,
            "arch": platform.machine(),
            "pythonVersion": platform.python_version(),
            "pid": os.getpid(),
            "uptime": uptime,
        },
    }

    if not accessible:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                **data,
                "success": False,
                "status": "degraded",
                "message": "Server running but workspace inaccessible",
            },
        )
    return data


@router.get("/detailed")
async def health_detailed(root: Path = Depends(get_workspace_root)):
    """Detailed workspace, process and OS information."""
    workspace = {
        "accessible": False,
        "folders": [],
        "totalSize": 0,
        "error": None,
    }
    try:
        with os.scandir(root) as it:
            entries = [entry for entry in it if entry.is_dir()]
        workspace["accessible"] = True
    except OSError as e:
        workspace["error"] = str(e)
        entries = []

    for entry in entries:
        try:
            st = entry.stat()
        except OSError as e:
            loguru.logger.warning(f"Could not get stats for {entry.name}: {e}")
            continue
        created = getattr(st, "st_birthtime", st.st_ctime)
        workspace["folders"].append({
            "name": entry.name,
            "created": datetime.fromtimestamp(created, tz=timezone.utc).isoformat(),
            "size": st.st_size,
        })
        workspace["totalSize"] += st.st_size

    cpu = os.times()
    uname = platform.uname()
    return {
        "success": True,
        "timestamp": _now(),
        "workspace": workspace,
        "process": {
            "pid": os.getpid(),
            "version": sys.version,
            "implementation": platform.python_implementation(),
            "platform": sys.platform,
            "uptime": _uptime(),
            "cpu": {"user": cpu.user, "system": cpu.system},
        },
        "system": {
            "type": uname.system,
            "platform": sys.platform,
            "arch": uname.machine,
            "release": uname.release,
            "hostname": uname.node,
            "cpus": os.cpu_count(),
            "loadavg": _load_average(),
        },
    }
