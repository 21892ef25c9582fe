import json
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from .collapser import Heuristic


@dataclass
class SolverSettings:
    """
    Solver options that control cell selection, budgets and backtracking.
    """
    heuristic: Heuristic = Heuristic.ENTROPY
    backtracking: bool = False            # roll back to a checkpoint on contradiction
    max_backtracks: int = 1000            # give up (contradicted) after this many rollbacks
    max_iterations: Optional[int] = None  # collapse steps before the run is exhausted
    time_limit: Optional[float] = None    # seconds before the run is exhausted
    initial_propagation: bool = True      # make the empty wave arc consistent first

    def to_dict(self) -> dict:
        return {
            'heuristic': self.heuristic.value,
            'backtracking': self.backtracking,
            'max_backtracks': self.max_backtracks,
            'max_iterations': self.max_iterations,
            'time_limit': self.time_limit,
            'initial_propagation': self.initial_propagation
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'SolverSettings':
        return cls(
            heuristic=Heuristic(data.get('heuristic', Heuristic.ENTROPY.value)),
            backtracking=data.get('backtracking', False),
            max_backtracks=data.get('max_backtracks', 1000),
            max_iterations=data.get('max_iterations'),
            time_limit=data.get('time_limit'),
            initial_propagation=data.get('initial_propagation', True)
        )

    @classmethod
    def load(cls, filepath: Union[str, Path]) -> 'SolverSettings':
        """
        Read settings from a JSON file.

        Raises:
            FileNotFoundError: If file doesn't exist
            ValueError: If the file is not valid JSON or has a bad value
        """
        path = Path(filepath)
        if not path.exists():
            raise FileNotFoundError(f"File not found: {filepath}")
        try:
            data = json.loads(path.read_text(encoding='utf-8'))
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid settings file: {e}")
        return cls.from_dict(data)
