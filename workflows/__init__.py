"""
Workflows package - LangGraph orchestration of the scheduling pipelines.
"""

__all__ = ['SchedulingEngine', 'SequencingState']
