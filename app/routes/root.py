"""
DocStore API — Root Route
==========================

What:  GET / greeting, a liveness check that touches no dependency.
"""

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

router = APIRouter(tags=["Root"])

GREETING = "Hello World!"


@router.get("/", response_class=PlainTextResponse, summary="Greeting")
async def get_hello() -> str:
    return GREETING
