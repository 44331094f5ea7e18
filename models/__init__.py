"""
Core data models package for the Laser Shop Scheduling Engine.

This package contains all data structures used throughout the system:
- Job: A cutting job waiting to be sequenced
- ScheduledJob / OptimizedSchedule: The timed cut sequence and its metrics
- DowntimeEvent / DowntimePrediction: Downtime history and forecasts
- JobTransition / SetupTimeMatrix: Observed changeovers and the setup matrix
- Order / Batch: Customer orders and material batches
- WorkflowStep / BottleneckAnalysis: Process graph and its bottlenecks
- SchedulingPolicy: Tunable engine constants
"""

__all__ = [
    'Job', 'SetupRequirement', 'ScheduledJob', 'OptimizedSchedule',
    'DowntimeEvent', 'DowntimePrediction', 'JobTransition', 'SetupTimeMatrix',
    'Order', 'Part', 'Batch', 'BatchConfiguration',
    'WorkflowStep', 'Resource', 'BottleneckAnalysis', 'SchedulingPolicy',
]
