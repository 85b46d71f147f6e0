"""Config parsing shared by the built-in backends."""

from __future__ import annotations

from typing import Any, Mapping, TypeVar

from pydantic import BaseModel

C = TypeVar("C", bound=BaseModel)


def parse_backend_config(
    model: type[C], config: C | Mapping[str, Any] | None, **overrides: Any
) -> C:
    """Validate a backend config given as a model, a mapping, or nothing.

    Keyword overrides take precedence over values from ``config``.
    """
    if isinstance(config, model) and not overrides:
        return config
    data: dict[str, Any] = {}
    if isinstance(config, BaseModel):
        data.update(config.model_dump())
    elif config is not None:
        data.update(config)
    data.update(overrides)
    return model.model_validate(data)
