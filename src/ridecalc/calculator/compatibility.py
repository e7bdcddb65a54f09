"""
Drivetrain compatibility rules.

Each rule inspects the proposed setup (falling back to the current setup for
parts the proposal keeps) and returns its issues and paired solutions. All
rules run and their findings accumulate; nothing short-circuits.

Rules:
- Freehub: cassette spline must be supported by the hub
- Derailleur capacity: largest cog and total tooth spread within limits
- Chain speed: chain speed count must match the cassette
"""

import logging
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict

from ..enums import CompatibilityStatus, Difficulty, IssueType, Severity, SolutionType
from ..io.loaders import BikeSetup, Component
from .constants import (
    CHAIN_REPLACEMENT_COST_USD,
    CONFIDENCE_PENALTY_PER_ISSUE,
    DEFAULT_DERAILLEUR_MAX_COG,
    DERAILLEUR_UPGRADE_COST_USD,
    FREEHUB_SWAP_COST_USD,
)
from .drivetrain import chainring_teeth

logger = logging.getLogger(__name__)


class CompatibilityIssue(BaseModel):
    """A rule violation between two components."""
    model_config = ConfigDict(frozen=True)

    type: IssueType
    severity: Severity
    message: str
    components: Tuple[str, ...]  # Component ids involved
    estimated_cost: float = 0.0


class CompatibilitySolution(BaseModel):
    """Suggested remediation for a CompatibilityIssue."""
    model_config = ConfigDict(frozen=True)

    type: SolutionType
    description: str
    cost: float
    difficulty: Difficulty
    components: Tuple[str, ...] = ()


class CompatibilityResult(BaseModel):
    """Outcome of all compatibility rules for one setup."""
    model_config = ConfigDict(frozen=True)

    status: CompatibilityStatus
    issues: Tuple[CompatibilityIssue, ...] = ()
    solutions: Tuple[CompatibilitySolution, ...] = ()
    confidence: int = 100

    @property
    def is_compatible(self) -> bool:
        return self.status != CompatibilityStatus.INCOMPATIBLE

    @property
    def critical_issues(self) -> List[CompatibilityIssue]:
        return [i for i in self.issues if i.severity == Severity.CRITICAL]

    @property
    def total_solution_cost(self) -> float:
        return sum(s.cost for s in self.solutions)


RuleOutput = Tuple[List[CompatibilityIssue], List[CompatibilitySolution]]


def _pick(proposed: BikeSetup, current: Optional[BikeSetup], slot: str) -> Optional[Component]:
    """Proposed component for a slot, or the current one it keeps."""
    component = getattr(proposed, slot)
    if component is None and current is not None:
        component = getattr(current, slot)
    return component


def _check_freehub(cassette: Component, hub: Optional[Component]) -> RuleOutput:
    """Cassette spline must be one the hub's freehub accepts."""
    if hub is None or hub.hub is None:
        return [], []

    freehub = cassette.cassette.freehub_type
    supported = hub.hub.freehub_types
    if freehub in supported:
        return [], []

    supported_names = ", ".join(f.value for f in supported)
    issue = CompatibilityIssue(
        type=IssueType.FREEHUB,
        severity=Severity.CRITICAL,
        message=(
            f"{cassette.name} needs a {freehub.value} freehub; "
            f"{hub.name} supports {supported_names}"
        ),
        components=(cassette.id, hub.id),
        estimated_cost=FREEHUB_SWAP_COST_USD,
    )
    solution = CompatibilitySolution(
        type=SolutionType.REPLACE,
        description="Replace freehub body or select compatible cassette",
        cost=FREEHUB_SWAP_COST_USD,
        difficulty=Difficulty.MEDIUM,
        components=(hub.id,),
    )
    return [issue], [solution]


def _check_derailleur_capacity(
    cassette: Component,
    derailleur: Optional[Component],
    drive: Optional[Component],
) -> RuleOutput:
    """Largest cog and total wrap must fit the rear derailleur."""
    if derailleur is None or derailleur.derailleur is None:
        return [], []

    cogs = cassette.cassette.cogs
    if not cogs:
        return [], []

    issues = []
    spec = derailleur.derailleur
    max_cog = spec.max_cog if spec.max_cog is not None else DEFAULT_DERAILLEUR_MAX_COG
    largest = max(cogs)
    if largest > max_cog:
        issues.append(CompatibilityIssue(
            type=IssueType.CAPACITY,
            severity=Severity.HIGH,
            message=(
                f"{cassette.name} largest cog ({largest}T) exceeds "
                f"{derailleur.name} max cog ({max_cog}T)"
            ),
            components=(cassette.id, derailleur.id),
            estimated_cost=DERAILLEUR_UPGRADE_COST_USD,
        ))

    if spec.capacity is not None:
        rings = chainring_teeth(drive)
        ring_spread = (max(rings) - min(rings)) if rings else 0
        total_wrap = largest - min(cogs) + ring_spread
        if total_wrap > spec.capacity:
            issues.append(CompatibilityIssue(
                type=IssueType.CAPACITY,
                severity=Severity.HIGH,
                message=(
                    f"Total tooth spread ({total_wrap}T) exceeds "
                    f"{derailleur.name} capacity ({spec.capacity}T)"
                ),
                components=(cassette.id, derailleur.id),
                estimated_cost=DERAILLEUR_UPGRADE_COST_USD,
            ))

    if not issues:
        return [], []

    solution = CompatibilitySolution(
        type=SolutionType.UPGRADE,
        description=f"Upgrade to a derailleur rated for at least {largest}T",
        cost=DERAILLEUR_UPGRADE_COST_USD,
        difficulty=Difficulty.EASY,
        components=(derailleur.id,),
    )
    return issues, [solution]


def _check_chain_speed(cassette: Component, chain: Optional[Component]) -> RuleOutput:
    """Chain width must match the cassette speed count."""
    if chain is None or chain.chain is None:
        return [], []

    chain_speeds = chain.chain.speeds
    cassette_speeds = cassette.cassette.speeds
    if chain_speeds == cassette_speeds:
        return [], []

    issue = CompatibilityIssue(
        type=IssueType.CHAIN,
        severity=Severity.MEDIUM,
        message=(
            f"{chain.name} is {chain_speeds}-speed but "
            f"{cassette.name} is {cassette_speeds}-speed"
        ),
        components=(chain.id, cassette.id),
        estimated_cost=CHAIN_REPLACEMENT_COST_USD,
    )
    solution = CompatibilitySolution(
        type=SolutionType.REPLACE,
        description=f"Replace chain with a {cassette_speeds}-speed chain",
        cost=CHAIN_REPLACEMENT_COST_USD,
        difficulty=Difficulty.EASY,
        components=(chain.id,),
    )
    return [issue], [solution]


def check_compatibility(
    current: Optional[BikeSetup],
    proposed: BikeSetup,
) -> CompatibilityResult:
    """
    Run every compatibility rule against the proposed setup.

    Hub, derailleur, chain and drive come from the proposal, falling back to
    the current setup's parts when the proposal does not replace them.

    Args:
        current: Setup being replaced (may be None)
        proposed: Setup to check

    Returns:
        CompatibilityResult with accumulated issues and solutions
    """
    issues: List[CompatibilityIssue] = []
    solutions: List[CompatibilitySolution] = []

    cassette = _pick(proposed, current, 'cassette')
    if cassette is not None and cassette.cassette is not None:
        hub = _pick(proposed, current, 'hub')
        derailleur = _pick(proposed, current, 'derailleur')
        chain = _pick(proposed, current, 'chain')
        drive = proposed.drive if proposed.drive is not None else (current.drive if current else None)

        for rule_issues, rule_solutions in (
            _check_freehub(cassette, hub),
            _check_derailleur_capacity(cassette, derailleur, drive),
            _check_chain_speed(cassette, chain),
        ):
            issues.extend(rule_issues)
            solutions.extend(rule_solutions)
    else:
        logger.debug("No cassette in either setup, skipping compatibility rules")

    if any(i.severity == Severity.CRITICAL for i in issues):
        status = CompatibilityStatus.INCOMPATIBLE
    elif issues:
        status = CompatibilityStatus.WARNING
    else:
        status = CompatibilityStatus.COMPATIBLE

    confidence = max(0, 100 - CONFIDENCE_PENALTY_PER_ISSUE * len(issues))
    logger.debug(f"Compatibility {status.value}: {len(issues)} issue(s)")

    return CompatibilityResult(
        status=status,
        issues=tuple(issues),
        solutions=tuple(solutions),
        confidence=confidence,
    )
