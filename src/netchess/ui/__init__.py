"""PyQt6 front end: draws board snapshots and turns mouse clicks into coordinates."""
