"""JIRA content preprocessor storing time spent in the source status.

Configured in the pipeline as::

    name: State Time Processor
    settings:
      target_field: time_in_source
      remove_non_status_items: true
      working_hours:
        start_hour: 8
        end_hour: 18
        hours_per_day: 8

``target_field`` is required; dot notation nests the value inside each status
item. Every other option falls back to the defaults in ``core.config``.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from jira_worktime.core.settings import PreprocessorSettings, load_settings

from .transitions import TransitionWalker, WalkResult

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class PreprocessChainContext:
    """Collects data warnings raised while one document passes the chain."""

    warnings: list[str] = field(default_factory=list)

    def add_data_warning(self, preprocessor_name: str, message: str) -> None:
        self.warnings.append(f"{preprocessor_name}: {message}")


class TimeInSourceStatusPreprocessor:
    def __init__(self, name: str, settings: Mapping[str, Any] | PreprocessorSettings | None = None):
        self.name = name
        self.settings: PreprocessorSettings | None = None
        if settings is not None:
            self.init(settings)

    @classmethod
    def from_yaml(cls, path: str | Path, *, name: str = "State Time Processor") -> TimeInSourceStatusPreprocessor:
        return cls(name, load_settings(path, name=name))

    def init(self, settings: Mapping[str, Any] | PreprocessorSettings | None) -> None:
        if isinstance(settings, PreprocessorSettings):
            self.settings = settings
        else:
            self.settings = PreprocessorSettings.from_mapping(settings, name=self.name)
        logger.debug("Preprocessor %s writes durations to %s", self.name, self.settings.target_field)

    @property
    def target_field(self) -> str | None:
        return self.settings.target_field if self.settings else None

    def preprocess_data(
        self,
        data: dict[str, Any] | None,
        chain_context: PreprocessChainContext | None = None,
    ) -> dict[str, Any] | None:
        """Enrich ``data`` in place and return it; None passes through."""
        return self.run(data, chain_context).document

    def run(
        self,
        data: dict[str, Any] | None,
        chain_context: PreprocessChainContext | None = None,
    ) -> WalkResult:
        if self.settings is None:
            raise RuntimeError(f"Preprocessor {self.name} used before init()")
        cfg = self.settings

        def report(context: str, message: str) -> None:
            logger.warning("%s %s: %s", self.name, context, message)
            if chain_context is not None:
                chain_context.add_data_warning(self.name, f"{context}: {message}")

        walker = TransitionWalker(
            cfg.target_field,
            cfg.profile,
            remove_non_status_items=cfg.remove_non_status_items,
            source_date_format=cfg.source_date_format,
            created_field=cfg.created_field,
            changelog_field=cfg.changelog_field,
            context_fields=cfg.context_fields,
            reporter=report,
        )
        return walker.walk(data)
