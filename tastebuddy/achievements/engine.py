from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from tastebuddy.achievements.catalog import AchievementCatalog, default_catalog
from tastebuddy.achievements.interface import AchievementDefinition
from tastebuddy.achievements.ledger import AchievementGrant, GrantLedger
from tastebuddy.achievements.matcher import AchievementMatcher
from tastebuddy.achievements.metrics import MetricCollector
from tastebuddy.achievements.notifications import NotificationEmitter, NullNotifier
from tastebuddy.stores.interface import AchievementStore
from tastebuddy.utils.tracing import trace_span

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EvaluationResult:
    user_id: str
    new_achievements: list[AchievementGrant] = field(default_factory=list)
    all_achievements: list[AchievementGrant] = field(default_factory=list)

    @property
    def new_ids(self) -> list[str]:
        return [g.achievement_id for g in self.new_achievements]

    @property
    def all_ids(self) -> frozenset[str]:
        return frozenset(g.achievement_id for g in self.all_achievements)


class AchievementsEngine:
    '''
    Evaluates one user: collect metrics, match against the catalog, diff
    against the ledger, persist what is new, then announce it.

    Read and write failures propagate as NotFoundError or
    StoreUnavailableError. Notification failures never do: by the time the
    notifier runs the grants are committed and the result is final.
    '''

    def __init__(
        self,
        collector: MetricCollector,
        matcher: AchievementMatcher,
        ledger: GrantLedger,
        notifier: Optional[NotificationEmitter] = None,
    ) -> None:
        self.collector = collector
        self.matcher = matcher
        self.ledger = ledger
        self.notifier = notifier or NullNotifier()

    @property
    def catalog(self) -> AchievementCatalog:
        return self.matcher.catalog

    def evaluate(self, user_id: str) -> EvaluationResult:
        with trace_span('achievements.evaluate', {'user_id': user_id}) as span:
            metrics = self.collector.collect(user_id)
            qualifying = self.matcher.qualifying(metrics)
            existing = self.ledger.granted(user_id)
            span.metadata['qualifying'] = len(qualifying)

            to_grant = qualifying - {g.achievement_id for g in existing}
            if not to_grant:
                return EvaluationResult(user_id, [], existing)

            new_rows = self.ledger.grant(user_id, to_grant)
            span.metadata['granted'] = len(new_rows)
            if len(new_rows) < len(to_grant):
                # A concurrent evaluation granted some of these first
                all_rows = self.ledger.granted(user_id)
            else:
                all_rows = existing + new_rows

        if new_rows:
            logger.info(
                f'User {user_id} earned achievements: '
                f'{", ".join(g.achievement_id for g in new_rows)}'
            )
        self._announce(user_id, new_rows)
        return EvaluationResult(user_id, new_rows, all_rows)

    def _announce(self, user_id: str, grants: list[AchievementGrant]) -> None:
        for grant in grants:
            definition = self.catalog.get(grant.achievement_id)
            if definition is None:
                continue
            try:
                self.notifier.notify(user_id, definition)
            except Exception:
                logger.exception(
                    f'Failed to notify user {user_id} about {grant.achievement_id}'
                )

    def achievements_for(
        self, user_id: str
    ) -> list[tuple[AchievementGrant, Optional[AchievementDefinition]]]:
        '''A user's grants, newest first, with their catalog definitions.'''
        grants = sorted(
            self.ledger.granted(user_id),
            key=lambda g: (g.earned_at, g.achievement_id),
            reverse=True,
        )
        return [(g, self.catalog.get(g.achievement_id)) for g in grants]


def build_engine(
    store: AchievementStore,
    catalog: Optional[AchievementCatalog] = None,
    notifier: Optional[NotificationEmitter] = None,
) -> AchievementsEngine:
    return AchievementsEngine(
        collector=MetricCollector(store),
        matcher=AchievementMatcher(catalog or default_catalog()),
        ledger=GrantLedger(store),
        notifier=notifier,
    )
