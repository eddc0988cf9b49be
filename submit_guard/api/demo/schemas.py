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

"""Pydantic schemas for the demonstration endpoints."""

from typing import Optional

from pydantic import BaseModel, Field


class OrderRequest(BaseModel):
    """Order submission payload."""

    item: str = Field(..., min_length=1, max_length=128)
    qty: int = Field(..., gt=0)


class OrderResponse(BaseModel):
    """Accepted order."""

    order_id: int
    item: str
    qty: int
    fingerprint: Optional[str] = None


class UploadResponse(BaseModel):
    """Accepted upload."""

    upload_id: int
    filename: Optional[str] = None
    size: int
