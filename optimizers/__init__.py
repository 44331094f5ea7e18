"""
Optimizers package for the Laser Shop Scheduling Engine.

This package contains the deterministic analysis components:
- Sequencing: JobPrioritizer, MaterialGrouper, GroupedPrioritySequencer
- SetupTimeModel: Changeover cost with a per-instance cache
- ScheduleBuilder / EfficiencyAnalyzer: Timed schedule and its metrics
- SetupTimeMatrixBuilder: Observed changeover matrix and material groups
- DowntimePredictor: Downtime patterns and forecasts
- BatchOptimizer: Economic batching of orders
- BottleneckAnalyzer: Critical path and bottleneck ranking
"""

__all__ = [
    'JobPrioritizer', 'MaterialGrouper', 'GroupedPrioritySequencer',
    'SetupTimeModel', 'ScheduleBuilder', 'EfficiencyAnalyzer',
    'SetupTimeMatrixBuilder', 'DowntimePredictor', 'BatchOptimizer', 'BottleneckAnalyzer',
]
