from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

MAX_PAGE_SIZE = 500

DeviceStatus = Literal["APPROVED", "PENDING", "DECOMMISSIONED"]
DeviceClass = Literal[
    "WINDOWS_WORKSTATION",
    "WINDOWS_SERVER",
    "MAC",
    "LINUX_WORKSTATION",
    "LINUX_SERVER",
]

PageSize = Optional[int]
Id = Union[int, str]


class _Input(BaseModel):
    """Strict input: unknown keys are rejected, camelCase and snake_case accepted."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")


class PageInput(_Input):
    page_size: PageSize = Field(default=None, alias="pageSize", gt=0, le=MAX_PAGE_SIZE)
    cursor: Optional[str] = None


class DeviceListInput(PageInput):
    org_id: Optional[Id] = Field(default=None, alias="orgId")
    status: Optional[DeviceStatus] = None
    class_in: Optional[List[DeviceClass]] = Field(default=None, alias="classIn")
    online: Optional[bool] = None

    @field_validator("class_in", mode="before")
    @classmethod
    def _split_csv(cls, value: Any) -> Any:
        # Query strings carry the list as "A,B"
        if isinstance(value, str):
            return [part.strip() for part in value.split(",") if part.strip()]
        return value


class AlertListInput(PageInput):
    status: Optional[str] = None


class ResetAlertInput(_Input):
    activity: Optional[str] = None
    note: Optional[str] = None


class RunScriptInput(_Input):
    script_id: Id = Field(alias="scriptId")
    parameters: Dict[str, Any] = Field(default_factory=dict)
    dry_run: bool = Field(default=True, alias="dryRun")


__all__ = [
    "MAX_PAGE_SIZE",
    "DeviceStatus",
    "DeviceClass",
    "PageInput",
    "DeviceListInput",
    "AlertListInput",
    "ResetAlertInput",
    "RunScriptInput",
]
