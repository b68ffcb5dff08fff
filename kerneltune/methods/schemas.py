"""
Request Schemas

Pydantic models for method payloads. Validation failures are reported with
the bus convention: errorCode -1 and an "Invalid or missing ..." text naming
the offending field.
"""

import typing
from typing import Any, ClassVar, TypeVar

from pydantic import (
    BaseModel,
    ConfigDict,
    StrictFloat,
    StrictInt,
    StrictStr,
    ValidationError,
    field_validator,
)

from ..common.exceptions import InvalidRequestError
from ..common.validation import is_valid_token


class RequestModel(BaseModel):
    """Base for request payloads; unknown fields are ignored, NaN and Infinity rejected"""
    model_config = ConfigDict(extra="ignore", allow_inf_nan=False)

    # Array field name -> label used for errors inside its elements
    entry_labels: ClassVar[dict[str, str]] = {}


class Param(RequestModel):
    """A name/value pair targeting one attribute file"""
    name: StrictStr
    value: StrictStr

    @field_validator("name", "value")
    @classmethod
    def _token(cls, v: str) -> str:
        if not is_valid_token(v):
            raise ValueError("must match [A-Za-z0-9_]+")
        return v


class CpufreqParamsRequest(RequestModel):
    """set_cpufreq_params / stick_cpufreq_params"""
    genericParams: list[Param]
    governorParams: list[Param]

    entry_labels: ClassVar[dict[str, str]] = {
        "genericParams": "genericEntry",
        "governorParams": "governorEntry",
    }

    @property
    def governor(self) -> str | None:
        """Governor selected by a scaling_governor generic param, if any"""
        governor = None
        for param in self.genericParams:
            if param.name == "scaling_governor":
                governor = param.value
        return governor


class GovernorQuery(RequestModel):
    """get_cpufreq_params"""
    governor: StrictStr | None = None

    @field_validator("governor")
    @classmethod
    def _token(cls, v: str | None) -> str | None:
        if v is not None and not is_valid_token(v):
            raise ValueError("must match [A-Za-z0-9_]+")
        return v


class ValueRequest(RequestModel):
    """set_tcp_congestion_control"""
    value: StrictStr

    @field_validator("value")
    @classmethod
    def _token(cls, v: str) -> str:
        if not is_valid_token(v):
            raise ValueError("must match [A-Za-z0-9_]+")
        return v


class CompcacheConfigRequest(RequestModel):
    """set_compcache_config / stick_compcache_config"""
    compcacheConfig: list[Param]

    entry_labels: ClassVar[dict[str, str]] = {"compcacheConfig": "compcacheEntry"}

    def _lookup(self, name: str) -> str | None:
        found = None
        for param in self.compcacheConfig:
            if param.name == name:
                found = param.value
        return found

    @property
    def enable(self) -> bool:
        return self._lookup("compcache_enabled") == "1"

    @property
    def memlimit(self) -> str:
        memlimit = self._lookup("compcache_memlimit")
        if memlimit is None:
            raise InvalidRequestError("Invalid or missing memlimit")
        return memlimit


class ProfilesQuery(RequestModel):
    """getProfiles"""
    returnid: StrictStr


class ProfileSelection(RequestModel):
    """setProfile"""
    profileid: StrictInt | StrictFloat


M = TypeVar("M", bound=RequestModel)


def _is_array_field(model: type[RequestModel], field: str) -> bool:
    info = model.model_fields.get(field)
    return info is not None and typing.get_origin(info.annotation) is list


def describe_error(model: type[RequestModel], loc: tuple) -> str:
    """Turn a pydantic error location into the bus error text"""
    field = str(loc[0]) if loc else "payload"

    if not _is_array_field(model, field):
        return f"Invalid or missing {field}"
    if len(loc) == 1:
        return f"Invalid or missing {field} array"
    if len(loc) == 2:
        return f"Invalid or missing {field} array element"
    label = model.entry_labels.get(field, field)
    return f"Invalid or missing {loc[2]} {label}"


def parse_request(model: type[M], payload: dict[str, Any]) -> M:
    """
    Validate a payload against a request model.

    Raises:
        InvalidRequestError: first validation failure, before any side effect
    """
    try:
        return model.model_validate(payload)
    except ValidationError as e:
        first = e.errors()[0]
        raise InvalidRequestError(describe_error(model, tuple(first["loc"]))) from e
