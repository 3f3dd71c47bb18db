import threading
from typing import Optional

import uvicorn
from fastapi import FastAPI, BackgroundTasks, HTTPException
from pydantic import BaseModel

from config import load_config
from core.executor import PlanExecutor
from core.indexer import FolderIndexer
from core.planner import PlanBuilder
from core.report import summarize_plan, summarize_log
from core.safety import SafetyMonitor, SafetyException, NothingToDeleteError
from core.types import OperationCancelled
from logger_setup import setup_logger, format_api_error
from providers.google_provider import GoogleDriveClient
from providers.interface import TransportError
from providers.local_provider import LocalDriveClient

logger, _ = setup_logger("drive_cleaner_web")

app = FastAPI(title="Google Drive Folder Cleaner")

# Global lock for app_state
app_lock = threading.Lock()

app_state = {
    "config": load_config(),
    "client": None,
    "busy": False,
    "cancel_requested": False,
    "status": "idle",
    "message": "",
    "detail": "",
    "folder": None,
    "plan": None,
    "log": None,
}


class PlanRequest(BaseModel):
    name: str
    id: str


class ClearRequest(BaseModel):
    simulate: bool = False


def get_client():
    """Return the Drive client, connecting on first use."""
    if app_state["client"] is not None:
        return app_state["client"]

    config = app_state["config"]
    if config.get("local_path"):
        client = LocalDriveClient(config["local_path"], page_size=config["page_size"])
    else:
        from google_service import connect_google
        service, message = connect_google(config)
        if service is None:
            raise HTTPException(status_code=503, detail=message)
        client = GoogleDriveClient(service, page_size=config["page_size"])

    app_state["client"] = client
    return client


def _start(status, message):
    with app_lock:
        if app_state["busy"]:
            return False
        app_state["busy"] = True
        app_state["cancel_requested"] = False
        app_state["status"] = status
        app_state["message"] = message
        app_state["detail"] = ""
        return True


def _finish(status, message):
    with app_lock:
        app_state["busy"] = False
        app_state["status"] = status
        app_state["message"] = message
        app_state["detail"] = ""


def tell_detail(message):
    with app_lock:
        app_state["detail"] = message


def cancel_requested():
    return app_state["cancel_requested"]


def _plan_to_json(plan):
    return [
        {"delete": "Y" if e.is_deletable else "N", "name": e.display_name, "id": e.id}
        for e in plan
    ]


def _log_to_json(log):
    return [
        {"name": e.display_name, "id": e.id, "action": e.action_text, "ok": e.reason is None}
        for e in log
    ]


def run_plan_task(client, folder_name, folder_id):
    config = app_state["config"]
    try:
        plan = PlanBuilder(client).build_plan(folder_name, folder_id, tell_detail, cancel_requested)
        SafetyMonitor(
            max_deletions=config["max_deletions"],
            protected_names=config["protected_names"]
        ).analyze_plan(plan)
    except OperationCancelled:
        app_state["plan"] = None
        _finish("cancelled", "Delete plan cancelled")
        return
    except NothingToDeleteError as e:
        app_state["plan"] = None
        _finish("nothing_to_delete", str(e))
        return
    except SafetyException as e:
        app_state["plan"] = None
        _finish("error", str(e))
        return
    except TransportError as e:
        logger.error(format_api_error(e))
        app_state["plan"] = None
        _finish("error", f"Unable to create a delete plan: {e}")
        return
    except Exception as e:
        logger.error(f"Plan task failed: {e}")
        app_state["plan"] = None
        _finish("error", f"Unable to create a delete plan: {e}")
        return

    app_state["plan"] = plan
    summary = summarize_plan(plan)
    _finish("plan_ready", f"Number of files to be removed: {summary.files_to_delete}. "
                          f"({summary.folders_examined} folders examined)")


def run_clear_task(client, plan, simulate):
    try:
        log = PlanExecutor(client).execute(plan, simulate=simulate, progress=tell_detail,
                                            should_cancel=cancel_requested)
    except OperationCancelled as e:
        app_state["log"] = e.completed
        app_state["plan"] = None
        _finish("cancelled", f"Clean up cancelled after {len(e.completed)} file(s)")
        return
    except Exception as e:
        logger.error(f"Clean up failed: {e}")
        _finish("error", f"Clean up operation did not complete as expected: {e}")
        return

    app_state["log"] = log
    app_state["plan"] = None
    summary = summarize_log(log)
    if summary.failed:
        _finish("cleared", f"{summary.failed} issues found. Please review the issues")
    else:
        _finish("cleared", "Clean up operation is successful")


@app.get("/api/status")
def get_status():
    safe_keys = ["busy", "status", "message", "detail", "folder"]
    return {k: app_state.get(k) for k in safe_keys}


@app.get("/api/folders")
def get_folders(name: Optional[str] = None, id: Optional[str] = None):
    client = get_client()
    # the client is shared with the background tasks, one caller at a time
    with app_lock:
        if app_state["busy"]:
            return {"status": "already_running"}
        app_state["busy"] = True

    config = app_state["config"]
    indexer = FolderIndexer(client, max_folders=config["max_folders"])
    try:
        listing = indexer.list_folders(name or None, id or None)
    except TransportError as e:
        logger.error(format_api_error(e))
        raise HTTPException(status_code=502, detail=str(e))
    finally:
        with app_lock:
            app_state["busy"] = False

    result = {
        "folders": [
            {"name": f.name, "id": f.id, "paths": sorted(f.paths)} for f in listing.entries
        ],
        "maxed": listing.truncated,
    }
    if listing.truncated:
        result["notice"] = (f"The number of folders exceeds the allowed maximum of "
                            f"{indexer.max_folders}. You may need to refine the search criteria")
    return result


@app.post("/api/cancel")
def cancel():
    with app_lock:
        if not app_state["busy"]:
            return {"status": "idle"}
        app_state["cancel_requested"] = True
    return {"status": "cancelling"}


@app.post("/api/plan")
def start_plan(request: PlanRequest, background_tasks: BackgroundTasks):
    client = get_client()
    if not _start("planning", "Examining folder contents"):
        return {"status": "already_running"}

    app_state["plan"] = None
    app_state["log"] = None
    app_state["folder"] = {"name": request.name, "id": request.id}
    background_tasks.add_task(run_plan_task, client, request.name, request.id)
    return {"status": "started"}


@app.get("/api/plan")
def get_plan():
    plan = app_state["plan"]
    if plan is None:
        return {"plan": [], "files_to_delete": 0}
    return {"plan": _plan_to_json(plan), "files_to_delete": summarize_plan(plan).files_to_delete}


@app.post("/api/clear")
def start_clear(request: ClearRequest, background_tasks: BackgroundTasks):
    plan = app_state["plan"]
    if not plan or summarize_plan(plan).files_to_delete == 0:
        return {"status": "error", "message": "There are no files to remove!"}

    client = get_client()
    if not _start("clearing", "Clearing folder contents per plan"):
        return {"status": "already_running"}

    background_tasks.add_task(run_clear_task, client, plan, request.simulate)
    return {"status": "started"}


@app.get("/api/log")
def get_log():
    log = app_state["log"]
    if log is None:
        return {"log": [], "deleted": 0, "failed": 0}
    summary = summarize_log(log)
    return {"log": _log_to_json(log), "deleted": summary.deleted, "failed": summary.failed}


if __name__ == "__main__":
    port = app_state["config"].get("port", 8766)
    logger.info(f"Starting server on port {port}")
    uvicorn.run(app, host="127.0.0.1", port=port)
