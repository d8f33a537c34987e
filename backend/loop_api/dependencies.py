"""
Loop API — Shared Resource Dependencies
=========================================

What:  FastAPI dependencies handing the process-wide backend store and
       realtime connection to route handlers.
How:   create_app() stores both on app.state; these functions read them back
       for each request.

A handler that runs on an app without these resources is a wiring bug, so
both raise RuntimeError instead of returning None.
"""

from fastapi import Request

from loop_api.services.realtime import RealtimeConnection
from loop_api.services.store_base import DataStore


def get_store(request: Request) -> DataStore:
    store = getattr(request.app.state, "store", None)
    if store is None:
        raise RuntimeError("No DataStore configured on the application")
    return store


def get_realtime(request: Request) -> RealtimeConnection:
    realtime = getattr(request.app.state, "realtime", None)
    if realtime is None:
        raise RuntimeError("No RealtimeConnection configured on the application")
    return realtime
