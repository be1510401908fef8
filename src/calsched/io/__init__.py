# calsched/io - Constraint file handling
from .csv_loader import constraints_to_dataframe, load_constraints, save_constraints

__all__ = ["load_constraints", "save_constraints", "constraints_to_dataframe"]
