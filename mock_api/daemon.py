"""
mock_api.daemon
---------------
A small HTTP API using FastAPI, to exercise the request orchestrator
against a real server. It echoes requests back, answers with any status
code on demand and can respond slowly. Intended for local development,
testing and demonstration purposes.

Run it with: python -m mock_api.daemon --port 8000
"""
import asyncio
import json
import logging
import socket
from typing import Any

import typer
import uvicorn
from fastapi import FastAPI, HTTPException, Query, Request, Response
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from common.app_setup import print_and_log, setup_logging

logger = logging.getLogger(__name__)


# Output model for an echoed request
class EchoModel(BaseModel):
    method: str
    path: str
    headers: dict[str, str]
    query: dict[str, list[str]] = Field(default_factory=dict)
    body: Any = None


# In-memory log of echoed requests
received: list[EchoModel] = []

app = FastAPI(title="Aurora mock API")


@app.get("/status")
def status():
    """Health/status endpoint."""
    return {"status": "ok", "received": len(received)}


@app.api_route("/status/{code}", methods=["GET", "POST", "PUT", "PATCH", "DELETE"])
def respond_with_status(code: int):
    """Answer with the requested status code."""
    if not 100 <= code <= 599:
        raise HTTPException(status_code=400, detail="Status code must be between 100 and 599")
    logger.info(f"Responding with status {code}")
    if code < 200 or code in (204, 304):
        return Response(status_code=code)
    return JSONResponse(status_code=code, content={"status": code})


@app.get("/slow")
async def slow(delay: float = Query(1.0, ge=0, le=60)):
    """Respond after ``delay`` seconds."""
    logger.info(f"Sleeping {delay}s before responding")
    await asyncio.sleep(delay)
    return {"slept": delay}


@app.get("/received", response_model=list[EchoModel])
def list_received() -> list[EchoModel]:
    return received


@app.delete("/received", status_code=204)
def clear_received():
    received.clear()


@app.api_route("/echo", methods=["GET", "POST", "PUT", "PATCH", "DELETE"], response_model=EchoModel)
@app.api_route("/echo/{subpath:path}", methods=["GET", "POST", "PUT", "PATCH", "DELETE"], response_model=EchoModel)
async def echo(request: Request) -> EchoModel:
    """Return the method, path, headers, query and body of the request."""
    raw = await request.body()
    body: Any = None
    if raw:
        try:
            body = json.loads(raw)
        except ValueError:
            body = raw.decode(errors="replace")
    query = {key: request.query_params.getlist(key) for key in request.query_params.keys()}
    echoed = EchoModel(
        method=request.method,
        path=request.url.path,
        headers=dict(request.headers),
        query=query,
        body=body,
    )
    received.append(echoed)
    logger.info(f"Echoed {request.method} {request.url.path}")
    return echoed


app_cli = typer.Typer()


@app_cli.command()
def run(port: int = typer.Option(None, help="Port to run the server on (auto if not set)")):
    """Run the FastAPI app using Uvicorn on localhost, reporting the actual port used."""
    setup_logging(app_name="aurora-mock-api", console=True)
    if port is None or port == 0:
        # Bind to port 0 to get a free port, then close and reuse
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
            s.bind(("127.0.0.1", 0))
            port = s.getsockname()[1]
        print(json.dumps({"event": "port_selected", "port": port}), flush=True)
    else:
        print(json.dumps({"event": "port_used", "port": port}), flush=True)
    print_and_log(f"Serving mock API on http://127.0.0.1:{port}")
    uvicorn.run(app, host="127.0.0.1", port=port, log_level="info")


if __name__ == "__main__":
    app_cli()
