"""Triage: aggregate counts and ranked recommendations.

Triage never needs an acyclic graph, so it still succeeds when planning fails
on a cycle.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass

from .issues import Issue, IssueStatus
from .merge import MergedUniverse
from .models import TriagePolicy

RECOMMENDATION_LIMIT = 10


@dataclass(frozen=True)
class QuickRef:
    open_count: int = 0
    blocked_count: int = 0
    ready_count: int = 0
    in_progress_count: int = 0
    closed_count: int = 0
    total_count: int = 0


@dataclass(frozen=True)
class Recommendation:
    """A ranked, non-closed issue with its score and the reasons behind it."""

    id: str
    title: str
    score: float
    priority: int
    status: str
    issue_type: str
    blocked: bool
    blocked_by: tuple[str, ...] = ()
    unblocks: int = 0
    reasons: tuple[str, ...] = ()


@dataclass(frozen=True)
class TriageResult:
    quick_ref: QuickRef
    recommendations: tuple[Recommendation, ...]
    diagnostics: tuple[str, ...] = ()


def score_issue(issue: Issue, *, blocked: bool, policy: TriagePolicy) -> float:
    """Score an issue; higher scores rank first.

    Example:
        >>> from beadview.issues import Issue, IssueType
        >>> policy = TriagePolicy()
        >>> score_issue(Issue(id="a", priority=0, issue_type=IssueType.BUG),
        ...             blocked=False, policy=policy)
        43.0
        >>> score_issue(Issue(id="a", priority=0, issue_type=IssueType.BUG),
        ...             blocked=True, policy=policy)
        18.0
    """
    clamped = min(max(issue.priority, 0), policy.max_priority)
    score = policy.priority_weight * (policy.max_priority - clamped)
    score += policy.type_weight(issue.issue_type.value)
    if blocked:
        score -= policy.blocked_penalty
    return float(score)


def _reasons(issue: Issue, *, blocked_by: tuple[str, ...], unblocks: int) -> tuple[str, ...]:
    reasons = [f"priority P{issue.priority}"]
    if blocked_by:
        reasons.append("blocked by " + ", ".join(blocked_by))
    else:
        reasons.append("ready to start")
    if issue.status is IssueStatus.IN_PROGRESS:
        reasons.append("already in progress")
    if unblocks:
        reasons.append(f"unblocks {unblocks} issue(s)")
    return tuple(reasons)


def compute_triage(
    universe: MergedUniverse,
    *,
    policy: TriagePolicy | None = None,
    limit: int = RECOMMENDATION_LIMIT,
) -> TriageResult:
    """Count and rank the visible issues of ``universe``.

    Blocked state uses the full graph, so a visible issue waiting on a
    filtered-out project's open issue is still blocked.
    """
    policy = policy or TriagePolicy()
    waiting_on: dict[str, int] = defaultdict(int)
    for issue_id, issue in universe.issues.items():
        if issue.is_closed:
            continue
        for blocker in universe.open_blockers(issue_id):
            waiting_on[blocker] += 1

    open_count = blocked_count = in_progress_count = closed_count = 0
    candidates: list[Recommendation] = []
    for issue in universe.visible_issues():
        if issue.is_closed:
            closed_count += 1
            continue
        open_count += 1
        if issue.status is IssueStatus.IN_PROGRESS:
            in_progress_count += 1
        blocked_by = universe.open_blockers(issue.id)
        blocked = bool(blocked_by)
        if blocked:
            blocked_count += 1
        unblocks = waiting_on.get(issue.id, 0)
        candidates.append(
            Recommendation(
                id=issue.id,
                title=issue.title,
                score=score_issue(issue, blocked=blocked, policy=policy),
                priority=issue.priority,
                status=issue.status_name,
                issue_type=issue.type_name,
                blocked=blocked,
                blocked_by=blocked_by,
                unblocks=unblocks,
                reasons=_reasons(issue, blocked_by=blocked_by, unblocks=unblocks),
            )
        )

    candidates.sort(key=lambda rec: (-rec.score, rec.id))
    quick_ref = QuickRef(
        open_count=open_count,
        blocked_count=blocked_count,
        ready_count=open_count - blocked_count,
        in_progress_count=in_progress_count,
        closed_count=closed_count,
        total_count=open_count + closed_count,
    )
    diagnostics = tuple(
        ref.describe() for ref in universe.dangling if universe.is_visible(ref.issue_id)
    )
    return TriageResult(
        quick_ref=quick_ref,
        recommendations=tuple(candidates[: max(limit, 0)]),
        diagnostics=diagnostics,
    )
