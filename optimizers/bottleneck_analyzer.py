"""
Bottleneck Analyzer

Detects workflow bottlenecks with critical path analysis over the step
dependency graph.

Key Responsibilities:
    - Validate the dependency graph (unknown references, cycles)
    - Compute a topological order once per call
    - Find the longest-duration path through the DAG
    - Rank every step's bottleneck severity and impact
    - Suggest improvements for steps that constrain throughput
"""

import logging
from typing import Dict, List, Optional

from models.policy import SchedulingPolicy
from models.workflow import Bottleneck, BottleneckAnalysis, WorkflowImprovement, WorkflowStep
from optimizers.errors import CyclicWorkflowError, InvalidInputError
from utils.deadline import Deadline

logger = logging.getLogger(__name__)

SEVERITY_RANK = {"critical": 0, "high": 1, "medium": 2, "low": 3}

SOLUTIONS = {
    "critical": [
        "Add parallel capacity for this step",
        "Reduce step duration through process redesign",
        "Schedule preventive maintenance outside production hours",
    ],
    "high": [
        "Reduce step duration on the critical path",
        "Pre-stage materials and tooling",
    ],
    "medium": [
        "Monitor queue length before this step",
        "Cross-train operators for this step",
    ],
    "low": [],
}

# Color marks for depth-first cycle detection
WHITE, GREY, BLACK = 0, 1, 2


class BottleneckAnalyzer:
    """
    Critical path and bottleneck analysis for a workflow DAG.

    Example:
        >>> analyzer = BottleneckAnalyzer()
        >>> analysis = analyzer.analyze(steps)
        >>> analysis.critical_path
        ['prep', 'cut', 'deburr']
    """

    def __init__(self, policy: Optional[SchedulingPolicy] = None):
        self.policy = policy or SchedulingPolicy()

    def analyze(self, steps: List[WorkflowStep], deadline: Optional[Deadline] = None) -> BottleneckAnalysis:
        """
        Run the full bottleneck analysis.

        Args:
            steps: Workflow steps; dependencies must reference existing step ids
            deadline: Optional call deadline

        Returns:
            BottleneckAnalysis

        Raises:
            InvalidInputError: If a step id is duplicated or a dependency is unknown
            CyclicWorkflowError: If the dependencies contain a cycle
        """
        deadline = deadline or Deadline.unbounded()

        if not steps:
            return BottleneckAnalysis()

        step_map = self._index_steps(steps)
        order = self.topological_order(steps, step_map, deadline)
        critical_path, path_duration = self.critical_path(steps, step_map, order, deadline)

        on_path = set(critical_path)
        bottlenecks = [self.assess_step(step, step_id in on_path, path_duration)
                       for step_id, step in step_map.items()]
        bottlenecks.sort(key=lambda b: (SEVERITY_RANK[b.severity], -b.impact))

        improvements = self.identify_improvements(step_map, bottlenecks)
        efficiency_score = self.calculate_efficiency(step_map, critical_path)

        logger.info("Workflow analysis: critical path %s (%.1f min), efficiency %.1f",
                    " -> ".join(critical_path), path_duration, efficiency_score)

        return BottleneckAnalysis(
            bottlenecks=bottlenecks,
            critical_path=critical_path,
            critical_path_duration=path_duration,
            improvement_opportunities=improvements,
            efficiency_score=efficiency_score,
        )

    @staticmethod
    def _index_steps(steps: List[WorkflowStep]) -> Dict[str, WorkflowStep]:
        step_map: Dict[str, WorkflowStep] = {}
        for step in steps:
            if step.step_id in step_map:
                raise InvalidInputError(f"Duplicate workflow step id: {step.step_id}")
            step_map[step.step_id] = step

        for step in steps:
            for dependency in step.dependencies:
                if dependency not in step_map:
                    raise InvalidInputError(
                        f"Step {step.step_id} depends on unknown step {dependency}"
                    )
        return step_map

    def topological_order(self, steps: List[WorkflowStep], step_map: Dict[str, WorkflowStep],
                          deadline: Deadline) -> List[str]:
        """
        Iterative depth-first search over dependencies with white/grey/black marks.

        Post-order places every step after all of its dependencies.

        Raises:
            CyclicWorkflowError: When a grey step is reached again
        """
        color = {step_id: WHITE for step_id in step_map}
        order: List[str] = []

        for root in steps:
            if color[root.step_id] != WHITE:
                continue

            color[root.step_id] = GREY
            stack = [(root.step_id, iter(root.dependencies))]
            while stack:
                deadline.check("topological_sort")
                step_id, dependencies = stack[-1]
                advanced = False

                for dependency in dependencies:
                    if color[dependency] == GREY:
                        path = [entry[0] for entry in stack]
                        cycle = path[path.index(dependency):] + [dependency]
                        raise CyclicWorkflowError(cycle)
                    if color[dependency] == WHITE:
                        color[dependency] = GREY
                        stack.append((dependency, iter(step_map[dependency].dependencies)))
                        advanced = True
                        break

                if not advanced:
                    color[step_id] = BLACK
                    order.append(step_id)
                    stack.pop()

        return order

    def critical_path(self, steps: List[WorkflowStep], step_map: Dict[str, WorkflowStep],
                      order: List[str], deadline: Deadline):
        """
        Longest path by dynamic programming over the topological order.

        longest_to[s] = duration[s] + max(longest_to[d] for d in dependencies, default 0)

        Returns:
            Tuple of (step ids from source to sink, path duration)
        """
        longest_to: Dict[str, float] = {}
        best_predecessor: Dict[str, Optional[str]] = {}

        for step_id in order:
            deadline.check("critical_path")
            step = step_map[step_id]
            best_dependency = None
            best_length = 0.0
            for dependency in step.dependencies:
                if best_dependency is None or longest_to[dependency] > best_length:
                    best_dependency = dependency
                    best_length = longest_to[dependency]
            longest_to[step_id] = step.duration + best_length
            best_predecessor[step_id] = best_dependency

        has_successor = {dependency for step in steps for dependency in step.dependencies}
        sinks = [step.step_id for step in steps if step.step_id not in has_successor]

        end = sinks[0]
        for sink in sinks[1:]:
            if longest_to[sink] > longest_to[end]:
                end = sink

        path = []
        current: Optional[str] = end
        while current is not None:
            path.append(current)
            current = best_predecessor[current]
        path.reverse()

        return path, longest_to[end]

    def assess_step(self, step: WorkflowStep, on_critical_path: bool, path_duration: float) -> Bottleneck:
        """Classify one step and collect its causes and solutions."""
        if on_critical_path and step.bottleneck_potential > self.policy.critical_bottleneck_potential:
            severity = "critical"
        elif on_critical_path:
            severity = "high"
        elif step.bottleneck_potential > self.policy.medium_bottleneck_potential:
            severity = "medium"
        else:
            severity = "low"

        causes = []
        if on_critical_path:
            causes.append("Lies on the critical path")
        if step.bottleneck_potential > self.policy.medium_bottleneck_potential:
            causes.append(f"High bottleneck potential ({step.bottleneck_potential:.0%})")
        for resource in step.resources:
            if resource.availability < self.policy.low_availability_threshold:
                causes.append(
                    f"Limited {resource.type} availability: {resource.resource_id} "
                    f"({resource.availability:.0%})"
                )

        impact = round(step.duration / path_duration * 100, 1) if path_duration > 0 else 0.0

        return Bottleneck(
            step_id=step.step_id,
            step_name=step.name,
            severity=severity,
            impact=impact,
            causes=causes,
            solutions=list(SOLUTIONS[severity]),
        )

    def identify_improvements(self, step_map: Dict[str, WorkflowStep],
                              bottlenecks: List[Bottleneck]) -> List[WorkflowImprovement]:
        improvements = []

        for bottleneck in bottlenecks:
            if bottleneck.severity not in ("critical", "high"):
                continue

            step = step_map[bottleneck.step_id]
            critical = bottleneck.severity == "critical"
            improvements.append(WorkflowImprovement(
                area=step.name,
                description=(f"Add capacity or redesign '{step.name}' to shorten the critical path"
                             if critical else
                             f"Shorten '{step.name}' to reduce total lead time"),
                potential_gain=step.duration * step.bottleneck_potential * self.policy.improvement_gain_ratio,
                complexity="high" if critical else "medium",
                timeline="1-3 months" if critical else "2-4 weeks",
            ))

        return improvements

    @staticmethod
    def calculate_efficiency(step_map: Dict[str, WorkflowStep], critical_path: List[str]) -> float:
        """100 minus the mean bottleneck potential (percent) along the critical path."""
        if not critical_path:
            return 100.0

        total_potential = sum(step_map[step_id].bottleneck_potential for step_id in critical_path)
        return round(max(0.0, 100 - total_potential / len(critical_path) * 100), 1)
