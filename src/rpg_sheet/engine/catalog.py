"""Source catalog resolution.

Collects the character's candidate sources (obtained feats, effect instances
currently in effect, class, subclass) and expands them by following grant
chains:

- ``grantsClassFeat`` names class feats; each discovered class feat is
  expanded in turn until nothing new is found.
- ``grantsEffect`` names effects; they are unlocked only when present in the
  class-effect catalog (an allow-list) and are not expanded further.

A grant naming a source already on its own grant chain is reported as a
cycle and that branch stops. Missing documents are reported and dropped.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from datetime import datetime

from rpg_sheet.core import constants
from rpg_sheet.core.exceptions import (
    CycleDetectedError,
    DocumentUnavailableError,
    MalformedFieldError,
)
from rpg_sheet.core.logging import get_logger
from rpg_sheet.engine.notices import absorb
from rpg_sheet.models.enums import NoticeKind
from rpg_sheet.models.fields import FieldMap, as_text_list, to_plain, variant_name
from rpg_sheet.models.inputs import RecomputeInput
from rpg_sheet.models.state import CharacterState
from rpg_sheet.storage.documents import FieldReader, normalize_path


logger = get_logger(__name__)


@dataclass
class ResolvedSources:
    """Result of resolving the source catalog.

    Attributes:
        sources: Final source paths in emission order.
        feat_sources: Paths that count as feats for HP bonus bucketing.
        obtained_class_feats: Class feats discovered through grants.
        unlocked_effects: Catalog effects unlocked through grants.
    """

    sources: list[str] = field(default_factory=list)
    feat_sources: set[str] = field(default_factory=set)
    obtained_class_feats: list[str] = field(default_factory=list)
    unlocked_effects: list[str] = field(default_factory=list)


def _append_unique(items: list[str], path: str) -> bool:
    if path in items:
        return False
    items.append(path)
    return True


class SourceCatalogResolver:
    """Build the deduplicated, cycle-safe source list for a pass."""

    def __init__(self, reader: FieldReader) -> None:
        self._reader = reader

    def seed(self, data: RecomputeInput, now: datetime) -> list[str]:
        """Initial frontier: feats, in-effect instances, class, subclass."""
        seeds: list[str] = []
        candidates = [
            *data.obtained_feats,
            *(
                instance.source_path
                for instance in data.effect_instances
                if instance.is_in_effect(now)
            ),
            data.class_path or "",
            data.subclass_path or "",
        ]
        for candidate in candidates:
            path = normalize_path(candidate)
            if path:
                _append_unique(seeds, path)
        return seeds

    def resolve(
        self,
        data: RecomputeInput,
        state: CharacterState,
        *,
        now: datetime,
    ) -> ResolvedSources:
        """Resolve the final source set and record it on ``state``.

        Args:
            data: The recompute input.
            state: State being built; receives the inferred sets, the
                source list and any notices.
            now: Moment used to decide which effect instances are in effect.

        Returns:
            The resolved sources.
        """
        seeds = self.seed(data, now)
        catalog = data.class_effect_catalog
        class_feats: list[str] = []
        unlocked: list[str] = []
        emitted: list[str] = list(seeds)
        missing: set[str] = set()
        expanded: set[str] = set()

        frontier: deque[tuple[str, tuple[str, ...]]] = deque((path, (path,)) for path in seeds)
        while frontier:
            path, chain = frontier.popleft()
            if path in expanded:
                continue
            expanded.add(path)

            try:
                blocks = self._reader.resolve_feature_blocks(path, data.level)
            except DocumentUnavailableError as exc:
                missing.add(path)
                absorb(state, NoticeKind.DOCUMENT_UNAVAILABLE, exc)
                continue

            for block in blocks:
                for feat in self._grant_targets(block, constants.FIELD_GRANTS_CLASS_FEAT, path, state):
                    if feat in chain:
                        absorb(
                            state,
                            NoticeKind.CYCLE_DETECTED,
                            CycleDetectedError(
                                f"Grant chain loops back to {feat}",
                                source=path,
                                details={"chain": [*chain, feat]},
                            ),
                        )
                        continue
                    if _append_unique(class_feats, feat):
                        _append_unique(emitted, feat)
                        frontier.append((feat, (*chain, feat)))

                for effect in self._grant_targets(block, constants.FIELD_GRANTS_EFFECT, path, state):
                    if not self._reader.is_in_catalog(effect, catalog):
                        logger.debug("Effect grant outside catalog ignored", source=path, effect=effect)
                        continue
                    if _append_unique(unlocked, effect):
                        if not self._reader.exists(effect):
                            missing.add(effect)
                            absorb(
                                state,
                                NoticeKind.DOCUMENT_UNAVAILABLE,
                                DocumentUnavailableError("Unlocked effect not found", path=effect),
                            )
                        _append_unique(emitted, effect)

        feat_paths = {normalize_path(feat) for feat in data.obtained_feats}
        resolved = ResolvedSources(
            sources=[path for path in emitted if path not in missing],
            feat_sources=feat_paths | set(class_feats),
            obtained_class_feats=class_feats,
            unlocked_effects=unlocked,
        )

        state.obtained_class_feats = list(class_feats)
        state.unlocked_effects = list(unlocked)
        state.sources = list(resolved.sources)
        logger.debug(
            "Sources resolved",
            sources=len(resolved.sources),
            class_feats=len(class_feats),
            unlocked_effects=len(unlocked),
            missing=len(missing),
        )
        return resolved

    def _grant_targets(
        self,
        block: FieldMap,
        key: str,
        source: str,
        state: CharacterState,
    ) -> list[str]:
        """Read a grant field written as one path or a list of paths."""
        value = block.get(key)
        if value is None:
            return []
        targets = as_text_list(value)
        if targets is None:
            absorb(
                state,
                NoticeKind.MALFORMED_FIELD,
                MalformedFieldError(
                    f"{key} must be a path or a list of paths",
                    field_name=key,
                    expected="TextList",
                    source=source,
                    details={"actual": variant_name(value), "value": to_plain(value)},
                ),
            )
            return []
        return [path for path in (normalize_path(target) for target in targets) if path]


__all__ = [
    "ResolvedSources",
    "SourceCatalogResolver",
]
