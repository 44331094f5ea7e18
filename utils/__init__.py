"""
Utility modules for the Laser Shop Scheduling Engine.

- config_loader: YAML/JSON policy loading
- deadline: Per-call time limits
- data_generator: Synthetic scenarios and CSV export
- baseline_scheduler: FIFO comparison schedule
"""

__all__ = ['config_loader', 'deadline', 'data_generator', 'baseline_scheduler']
