# Copyright 2026 Dell Inc. or its subsidiaries. All Rights Reserved.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Demonstration endpoints sitting behind the submission guard."""

import logging
import threading
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, File, Request, Response, UploadFile, status

from .schemas import OrderRequest, OrderResponse, UploadResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["demo"])


class SubmissionLog:
    """Thread-safe record of what the handlers accepted."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._entries: List[Dict[str, Any]] = []

    def append(self, kind: str, **details: Any) -> int:
        """Store an entry and return its 1-based id."""
        with self._lock:
            self._entries.append({"kind": kind, **details})
            return len(self._entries)

    def count(self, kind: str) -> int:
        """Number of entries of the given kind."""
        with self._lock:
            return sum(1 for entry in self._entries if entry["kind"] == kind)


def get_submission_log(request: Request) -> SubmissionLog:
    """FastAPI dependency returning the application's submission log."""
    return request.app.state.submission_log


@router.get("/health")
def health() -> Dict[str, str]:
    """Liveness probe."""
    return {"status": "ok"}


@router.post("/hello")
async def hello(request: Request) -> Response:
    """Echo the raw JSON body back to the caller."""
    body = await request.body()
    return Response(content=body, media_type="application/json")


@router.post("/orders", response_model=OrderResponse, status_code=status.HTTP_201_CREATED)
async def create_order(
    order: OrderRequest,
    request: Request,
    submission_log: SubmissionLog = Depends(get_submission_log),
) -> OrderResponse:
    """Accept an order.

    The body has already been consumed once by the guard; FastAPI parses it
    again from the replayed stream.
    """
    order_id = submission_log.append("order", item=order.item, qty=order.qty)
    logger.info("Order %d accepted", order_id)
    return OrderResponse(
        order_id=order_id,
        item=order.item,
        qty=order.qty,
        fingerprint=getattr(request.state, "submission_fingerprint", None),
    )


@router.post("/uploads", response_model=UploadResponse, status_code=status.HTTP_201_CREATED)
async def upload(
    file: UploadFile = File(...),
    submission_log: SubmissionLog = Depends(get_submission_log),
) -> UploadResponse:
    """Accept a multipart upload (never deduplicated)."""
    content = await file.read()
    upload_id = submission_log.append("upload", filename=file.filename, size=len(content))
    return UploadResponse(upload_id=upload_id, filename=file.filename, size=len(content))
