"""
Logging utilities for evaluation runs.

Provides console-plus-file logging and timestamped run directories so that
metric tables from different comparisons never overwrite each other.
"""

import os
import datetime
from pathlib import Path
from typing import Optional, Dict


def log_message(message: str, log_file: Optional[str] = None) -> None:
    """
    Prints a progress message and appends it to the run log when one is given.

    Args:
        message: Text message to log
        log_file: Optional path to the run's ``run_log.txt``

    Example:
        >>> log_message("Comparing detectors for Region2 (slice z=35)", paths["log_file"])
        >>> log_message("Region2: Binary mask: TP=1 FP=2 FN=1 TN=12")  # Console only
    """
    print(message)
    if log_file:
        try:
            with open(log_file, 'a', encoding='utf-8') as f:
                f.write(f"{message}\n")
        except OSError as e:
            print(f"Warning: Could not write to log file {log_file}: {e}")


def create_dir_with_permissions(path_obj: Path, mode: int = 0o755) -> Path:
    """
    Creates a run output directory (run folder or its ``tables/``) if absent.

    Args:
        path_obj: Directory to create
        mode: Unix permissions applied after creation (default: 0o755)

    Returns:
        The directory path

    Raises:
        FileExistsError: If path exists but is not a directory

    Example:
        >>> table_dir = create_dir_with_permissions(Path("results/run_20250101-120000") / "tables")
    """
    if not path_obj.exists():
        path_obj.mkdir(parents=True, exist_ok=False)
        try:
            os.chmod(path_obj, mode)
        except OSError as e:
            print(f"Warning: Could not chmod {path_obj} to {oct(mode)}: {e}")
    elif not path_obj.is_dir():
        raise FileExistsError(f"Path {path_obj} exists but is not a directory.")
    return path_obj


def setup_logging(output_dir_base: str) -> Dict[str, Path]:
    """
    Sets up a timestamped run directory for one evaluation run.

    Layout:
    - output_dir/run_YYYYMMDD-HHMMSS/
      - tables/
      - run_log.txt

    Args:
        output_dir_base: Base directory for all evaluation outputs

    Returns:
        Dictionary containing paths:
            - 'run_dir': Root directory for this run
            - 'log_file': Path to log file (str)
            - 'table_dir': Directory for metric tables
    """
    current_timestamp = datetime.datetime.now().strftime("%Y%m%d-%H%M%S")
    run_dir_path = Path(output_dir_base) / f"run_{current_timestamp}"

    Path(output_dir_base).mkdir(parents=True, exist_ok=True)

    run_dir = create_dir_with_permissions(run_dir_path)
    tables_dir = create_dir_with_permissions(run_dir / "tables")
    log_file_path = run_dir / "run_log.txt"

    log_message(f"Logging initialized. Run Directory: {run_dir}", str(log_file_path))
    log_message(f"  Log file: {log_file_path}", str(log_file_path))
    log_message(f"  Tables: {tables_dir}", str(log_file_path))

    return {
        "run_dir": run_dir,
        "log_file": str(log_file_path),
        "table_dir": tables_dir,
    }
