# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Translate RBAC errors into HTTP responses."""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from src.rbac import RbacError, StoreUnavailable

logger = logging.getLogger(__name__)


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(RbacError)
    async def _handle_rbac_error(_: Request, exc: RbacError) -> JSONResponse:
        if isinstance(exc, StoreUnavailable):
            logger.error(f"Store unavailable: {exc.message}")
        else:
            logger.info(f"{type(exc).__name__}: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})
