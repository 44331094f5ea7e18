"""
Test Data Generator - Create realistic shop scenarios for testing

This module provides functions to generate test data including:
- Randomly generated cutting jobs
- Downtime event histories
- Customer orders for batching
- A standard laser shop workflow graph
- Complete demo scenarios
- CSV export/import of jobs and downtime history
"""

import random
from datetime import datetime, timedelta
from typing import List, Optional, Dict, Any
import pandas as pd
from pathlib import Path

from models.job import Job
from models.downtime import DowntimeEvent, DOWNTIME_TYPES
from models.order import Order, Part
from models.setup_matrix import JobTransition
from models.workflow import WorkflowStep, Resource
from models.policy import SEVERITY_LEVELS


# Material configurations
MATERIALS = {
    'steel': {'thicknesses': [1.5, 3.0, 6.0], 'avg_time': 40, 'variance': 15},
    'stainless': {'thicknesses': [1.0, 2.0, 4.0], 'avg_time': 55, 'variance': 20},
    'aluminum': {'thicknesses': [2.0, 5.0], 'avg_time': 30, 'variance': 10},
}

PRIORITIES = ["low", "medium", "high"]
COMPLEXITIES = ["simple", "medium", "complex"]

DOWNTIME_CAUSES = {
    'planned': "Scheduled maintenance",
    'unplanned': "Resonator fault",
    'setup': "Nozzle change overrun",
    'material': "Sheet stock shortage",
    'operator': "Operator unavailable",
    'quality': "Edge quality inspection failure",
}


def generate_random_jobs(
    num_jobs: int,
    urgent_probability: float = 0.1,
    start: Optional[datetime] = None,
    seed: Optional[int] = None
) -> List[Job]:
    """
    Generate random cutting jobs for testing.

    Args:
        num_jobs: Number of jobs to generate
        urgent_probability: Probability (0-1) that a job is urgent
        start: Reference time for due dates (defaults to now)
        seed: Random seed for reproducible data

    Returns:
        List of Job objects
    """
    rng = random.Random(seed)
    start = start or datetime.now()

    jobs = []
    for i in range(num_jobs):
        material = rng.choice(list(MATERIALS.keys()))
        config = MATERIALS[material]

        duration = config['avg_time'] + rng.randint(-config['variance'], config['variance'])
        priority = "urgent" if rng.random() < urgent_probability else rng.choice(PRIORITIES)

        jobs.append(Job(
            job_id=f"J{i+1:03d}",
            material_type=material,
            thickness=rng.choice(config['thicknesses']),
            estimated_duration=max(5, duration),
            priority=priority,
            due_date=start + timedelta(hours=rng.randint(4, 24 * 7)),
            complexity=rng.choice(COMPLEXITIES),
        ))

    return jobs


def generate_downtime_history(
    num_events: int,
    days: int = 180,
    end: Optional[datetime] = None,
    seed: Optional[int] = None
) -> List[DowntimeEvent]:
    """
    Generate a random downtime history ending at `end`.

    Unplanned events are weighted to be the most common type.

    Args:
        num_events: Number of events
        days: Length of the history window
        end: End of the window (defaults to now)
        seed: Random seed

    Returns:
        List of DowntimeEvent objects sorted by timestamp
    """
    rng = random.Random(seed)
    end = end or datetime.now()
    weights = [2, 4, 2, 1, 1, 1]  # Same order as DOWNTIME_TYPES

    events = []
    for _ in range(num_events):
        event_type = rng.choices(DOWNTIME_TYPES, weights=weights)[0]
        events.append(DowntimeEvent(
            timestamp=end - timedelta(minutes=rng.randint(0, days * 24 * 60)),
            type=event_type,
            duration=round(rng.uniform(0.25, 6.0), 2),
            cause=DOWNTIME_CAUSES[event_type],
            severity=rng.choice(SEVERITY_LEVELS),
            resolved=rng.random() > 0.1,
        ))

    return sorted(events, key=lambda e: e.timestamp)


def generate_random_orders(
    num_orders: int,
    start: Optional[datetime] = None,
    seed: Optional[int] = None
) -> List[Order]:
    """
    Generate random customer orders with 1-3 part lines each.

    Args:
        num_orders: Number of orders
        start: Reference time for due dates (defaults to now)
        seed: Random seed

    Returns:
        List of Order objects
    """
    rng = random.Random(seed)
    start = start or datetime.now()

    orders = []
    for i in range(num_orders):
        parts = []
        for _ in range(rng.randint(1, 3)):
            material = rng.choice(list(MATERIALS.keys()))
            parts.append(Part(
                material_type=material,
                thickness=rng.choice(MATERIALS[material]['thicknesses']),
                quantity=rng.randint(5, 150),
                processing_time=round(rng.uniform(0.2, 3.0), 2),
            ))

        orders.append(Order(
            order_id=f"O{i+1:03d}",
            parts=parts,
            due_date=start + timedelta(days=rng.randint(1, 21)),
            priority=rng.randint(1, 5),
            customer_type=rng.choice(["standard", "standard", "premium", "strategic"]),
        ))

    return orders


def create_laser_workflow() -> List[WorkflowStep]:
    """
    Standard laser shop order workflow.

    Returns:
        Workflow steps forming a DAG
    """
    return [
        WorkflowStep("quote", "Quotation", 30, [], [Resource("operator", "sales", 0.9)], 0.2),
        WorkflowStep("program", "CAM programming", 45, ["quote"], [Resource("operator", "programmer", 0.6)], 0.7),
        WorkflowStep("material", "Material picking", 20, ["quote"], [Resource("material", "sheet_rack", 0.95)], 0.3),
        WorkflowStep("cut", "Laser cutting", 90, ["program", "material"], [Resource("equipment", "laser_1", 0.85)], 0.9),
        WorkflowStep("deburr", "Deburring", 25, ["cut"], [Resource("tool", "deburr_station", 1.0)], 0.4),
        WorkflowStep("bend", "Press brake bending", 40, ["cut"], [Resource("equipment", "press_brake", 0.7)], 0.65),
        WorkflowStep("inspect", "Quality inspection", 15, ["deburr", "bend"], [Resource("operator", "qc", 0.9)], 0.2),
    ]


def create_sample_transitions(start: Optional[datetime] = None) -> List[JobTransition]:
    """
    Observed changeovers between common materials.

    Returns:
        List of JobTransition objects
    """
    start = start or datetime.now()

    def job(job_id, material, thickness):
        return Job(job_id, material, thickness, 30, "medium", start + timedelta(days=2))

    steel = job("T1", "steel", 3.0)
    stainless = job("T2", "stainless", 2.0)
    aluminum = job("T3", "aluminum", 5.0)

    return [
        JobTransition(steel, stainless, 4),
        JobTransition(stainless, steel, 5),
        JobTransition(steel, aluminum, 25),
        JobTransition(aluminum, steel, 35),
        JobTransition(stainless, aluminum, 22),
    ]


def create_demo_scenario(seed: Optional[int] = None, start: Optional[datetime] = None) -> Dict[str, Any]:
    """
    Complete demo scenario for all five pipelines.

    Args:
        seed: Random seed
        start: Reference time (defaults to now)

    Returns:
        Dictionary with jobs, downtime_history, orders, workflow and transitions
    """
    start = start or datetime.now()
    return {
        'name': 'Laser Shop Week',
        'description': 'Mixed materials, a downtime history and a standard order workflow',
        'jobs': generate_random_jobs(15, urgent_probability=0.15, start=start, seed=seed),
        'downtime_history': generate_downtime_history(40, end=start, seed=seed),
        'orders': generate_random_orders(12, start=start, seed=seed),
        'workflow': create_laser_workflow(),
        'transitions': create_sample_transitions(start),
    }


def jobs_to_dataframe(jobs: List[Job]) -> pd.DataFrame:
    """Flatten jobs into a DataFrame (setup requirements are not exported)."""
    return pd.DataFrame([
        {
            'job_id': job.job_id,
            'material_type': job.material_type,
            'thickness': job.thickness,
            'estimated_duration': job.estimated_duration,
            'priority': job.priority,
            'due_date': job.due_date,
            'complexity': job.complexity,
        }
        for job in jobs
    ])


def export_jobs_to_csv(jobs: List[Job], output_path: str):
    """
    Export jobs to CSV file.

    Args:
        jobs: List of Job objects
        output_path: Path to save CSV
    """
    jobs_to_dataframe(jobs).to_csv(output_path, index=False)


def load_jobs_from_csv(input_path: str) -> List[Job]:
    """
    Load jobs from a CSV file written by export_jobs_to_csv.

    Args:
        input_path: Path to CSV

    Returns:
        List of Job objects
    """
    df = pd.read_csv(input_path, parse_dates=['due_date'], dtype={'job_id': str})
    return [
        Job(
            job_id=row.job_id,
            material_type=row.material_type,
            thickness=float(row.thickness),
            estimated_duration=float(row.estimated_duration),
            priority=row.priority,
            due_date=row.due_date.to_pydatetime(),
            complexity=row.complexity,
        )
        for row in df.itertuples(index=False)
    ]


def export_downtime_to_csv(events: List[DowntimeEvent], output_path: str):
    """
    Export downtime history to CSV file.

    Args:
        events: Downtime events
        output_path: Path to save CSV
    """
    pd.DataFrame([
        {
            'timestamp': event.timestamp,
            'type': event.type,
            'duration': event.duration,
            'cause': event.cause,
            'severity': event.severity,
            'resolved': event.resolved,
        }
        for event in events
    ]).to_csv(output_path, index=False)


def load_downtime_from_csv(input_path: str) -> List[DowntimeEvent]:
    """
    Load downtime history from a CSV file written by export_downtime_to_csv.

    Args:
        input_path: Path to CSV

    Returns:
        List of DowntimeEvent objects
    """
    df = pd.read_csv(input_path, parse_dates=['timestamp'], keep_default_na=False)
    return [
        DowntimeEvent(
            timestamp=row.timestamp.to_pydatetime(),
            type=row.type,
            duration=float(row.duration),
            cause=str(row.cause),
            severity=row.severity,
            resolved=bool(row.resolved),
        )
        for row in df.itertuples(index=False)
    ]


# Example usage and CLI
if __name__ == "__main__":
    print("="*60)
    print("TEST DATA GENERATOR")
    print("="*60)

    scenario = create_demo_scenario(seed=42)
    print(f"\n{scenario['name']}")
    print(f"{scenario['description']}")
    print(f"Jobs: {len(scenario['jobs'])}, downtime events: {len(scenario['downtime_history'])}, "
          f"orders: {len(scenario['orders'])}, workflow steps: {len(scenario['workflow'])}")

    output_dir = Path(__file__).parent.parent / 'data'
    output_dir.mkdir(exist_ok=True)

    export_jobs_to_csv(scenario['jobs'], str(output_dir / 'demo_jobs.csv'))
    export_downtime_to_csv(scenario['downtime_history'], str(output_dir / 'demo_downtime.csv'))

    print(f"\n✓ Demo scenario exported to {output_dir}")
