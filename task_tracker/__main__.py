"""Allow ``python -m task_tracker``."""

from task_tracker.cli import main

main()
