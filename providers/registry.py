from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from models.suggestion import Suggestion, SuggestionType
from providers.base import BaseSuggestionProvider
from providers.http_provider import HttpSuggestionProvider
from providers.static_provider import StaticSuggestionProvider


def _suggestion_from_dict(item: Any) -> Suggestion:
    if isinstance(item, str):
        return Suggestion(display_text=item)
    if not isinstance(item, dict) or not item.get("display_text"):
        raise ValueError(f"Invalid suggestion entry: {item!r}")
    return Suggestion(
        display_text=str(item["display_text"]),
        group_name=item.get("group_name"),
        type=SuggestionType(item.get("type", SuggestionType.GENERIC.value)),
        job_title=item.get("job_title"),
        email_address=item.get("email_address"),
        icon=item.get("icon"),
        target_url=item.get("target_url"),
    )


def _expand_env(value: Any) -> Any:
    if isinstance(value, str):
        return os.path.expandvars(value)
    if isinstance(value, dict):
        return {k: _expand_env(v) for k, v in value.items()}
    return value


@dataclass
class ProviderRegistry:
    _providers: list[BaseSuggestionProvider]

    @classmethod
    def from_yaml(cls, path: str | None = None) -> "ProviderRegistry":
        registry_path = (
            Path(path) if path else Path(__file__).resolve().parent.parent / "config" / "suggestion_providers.yaml"
        )
        if not registry_path.exists():
            raise ValueError(f"Provider registry not found at {registry_path}")

        data = yaml.safe_load(registry_path.read_text(encoding="utf-8"))
        if not data or "providers" not in data:
            raise ValueError("Invalid provider registry: missing providers")
        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ProviderRegistry":
        entries = data.get("providers") or []
        if not isinstance(entries, list):
            raise ValueError("Invalid provider registry: providers must be a list")

        providers: list[BaseSuggestionProvider] = []
        seen: set[str] = set()
        for entry in entries:
            name = entry.get("name")
            if not name:
                raise ValueError("Missing provider name in registry entry")
            if name in seen:
                raise ValueError(f"Duplicate provider name: {name}")
            seen.add(name)

            kind = entry.get("type", "static")
            enabled = bool(entry.get("enabled", True))
            if kind == "static":
                zero_term = entry.get("zero_term_suggestions")
                providers.append(
                    StaticSuggestionProvider(
                        name=name,
                        suggestions=[_suggestion_from_dict(s) for s in entry.get("suggestions", [])],
                        zero_term_suggestions=(
                            [_suggestion_from_dict(s) for s in zero_term] if zero_term is not None else None
                        ),
                        max_results=int(entry.get("max_results", 10)),
                        enabled=enabled,
                    )
                )
            elif kind == "http":
                providers.append(
                    HttpSuggestionProvider(
                        name=name,
                        url=_expand_env(entry.get("url", "")),
                        zero_term_url=_expand_env(entry.get("zero_term_url")),
                        term_parameter=entry.get("term_parameter", "q"),
                        headers=_expand_env(entry.get("headers") or {}),
                        timeout_s=float(entry.get("timeout_s", 5.0)),
                        enabled=enabled,
                    )
                )
            else:
                raise ValueError(f"Unknown provider type '{kind}' for provider {name}")

        return cls(_providers=providers)

    def providers(self) -> list[BaseSuggestionProvider]:
        return list(self._providers)

    def get(self, name: str) -> BaseSuggestionProvider | None:
        return next((p for p in self._providers if p.name == name), None)

    def enabled_providers(self) -> list[BaseSuggestionProvider]:
        return [p for p in self._providers if p.enabled]
