"""Record view engine: stateful view over in-memory records."""

from recordflow.view.engine import ProjectionListener, RecordView

__all__ = [
    "RecordView",
    "ProjectionListener",
]
