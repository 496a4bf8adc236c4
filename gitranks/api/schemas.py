from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


class RankRequest(BaseModel):
    usernames: List[Optional[str]] = Field(default_factory=list, description="GitHub logins to rank")
