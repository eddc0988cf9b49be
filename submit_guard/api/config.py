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

"""Submission guard settings loaded from the environment or a YAML file."""

import logging
import os
from pathlib import Path
from typing import Annotated, Any, Dict, Optional, Tuple, Union

import yaml
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

logger = logging.getLogger(__name__)

ENV_PREFIX = "SUBMIT_GUARD_"
CONFIG_PATH_ENV = "SUBMIT_GUARD_CONFIG"
YAML_SECTION = "submit_guard"


class GuardSettings(BaseSettings):
    """Configuration consumed by the submission guard.

    Values come from ``SUBMIT_GUARD_*`` environment variables unless passed
    explicitly. List settings accept a comma-separated string;
    ``route_ttl_seconds`` accepts a JSON object in the environment.

    Attributes:
        eligible_content_types: Content-type prefixes whose bodies are captured.
        max_body_bytes: Maximum number of body bytes buffered per request.
        ttl_seconds: Retention window for submission records.
        include_caller: Deduplicate per caller instead of globally.
        caller_header: Header holding the caller identity.
        canonical_json: Normalize JSON bodies before fingerprinting.
        release_on_failure: Forget a submission when its handler fails.
        exempt_paths: Paths never checked for duplicates.
        route_ttl_seconds: Per-path retention window overrides.
    """

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        case_sensitive=False,
        populate_by_name=True,
        extra="forbid",
        frozen=True,
    )

    eligible_content_types: Annotated[Tuple[str, ...], NoDecode] = Field(
        default=("application/json",),
        validation_alias="SUBMIT_GUARD_CONTENT_TYPES",
    )
    max_body_bytes: int = Field(default=1024 * 1024, gt=0)
    ttl_seconds: float = Field(default=5.0, gt=0)
    include_caller: bool = False
    caller_header: str = "authorization"
    canonical_json: bool = False
    release_on_failure: bool = False
    exempt_paths: Annotated[Tuple[str, ...], NoDecode] = ()
    route_ttl_seconds: Dict[str, float] = Field(default_factory=dict)

    @field_validator("eligible_content_types", "exempt_paths", mode="before")
    @classmethod
    def _split_list(cls, v: Any) -> Tuple[str, ...]:
        items = v.split(",") if isinstance(v, str) else list(v or ())
        return tuple(str(item).strip() for item in items if str(item).strip())

    @field_validator("caller_header")
    @classmethod
    def _normalize_header(cls, v: str) -> str:
        v = v.strip().lower()
        if not v:
            raise ValueError("caller_header cannot be empty")
        return v

    @field_validator("route_ttl_seconds")
    @classmethod
    def _positive_overrides(cls, v: Dict[str, float]) -> Dict[str, float]:
        for path, ttl in v.items():
            if ttl <= 0:
                raise ValueError(f"TTL override for {path} must be positive, got {ttl}")
        return v

    def ttl_for(self, path: str) -> Optional[float]:
        """Return the TTL override for a path, if one is configured."""
        return self.route_ttl_seconds.get(path)

    def is_exempt(self, path: str) -> bool:
        """Check whether a path bypasses duplicate checking."""
        return path in self.exempt_paths

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "GuardSettings":
        """Build settings from the ``submit_guard`` section of a YAML file.

        File values take precedence over environment variables, which fill
        in whatever the file leaves out. Unknown keys are rejected.

        Raises:
            FileNotFoundError: If the file does not exist.
            ValueError: If the document is malformed or a value is invalid.
        """
        with open(path, "r", encoding="utf-8") as handle:
            document = yaml.safe_load(handle) or {}
        if not isinstance(document, dict):
            raise ValueError(f"Expected a mapping at the top of {path}")
        section = document.get(YAML_SECTION) or {}
        if not isinstance(section, dict):
            raise ValueError(f"Expected a mapping under '{YAML_SECTION}' in {path}")
        return cls(**section)


def load_settings() -> GuardSettings:
    """Load settings from the YAML file named by SUBMIT_GUARD_CONFIG, else the environment."""
    config_path = os.getenv(CONFIG_PATH_ENV)
    if config_path:
        logger.info("Loading submit guard settings from %s", config_path)
        return GuardSettings.from_yaml(config_path)
    return GuardSettings()
