import os
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List

from dataclasses_json import dataclass_json


@dataclass_json
@dataclass
class MigrationState:
    """Journal of a migration run: which phases completed and what they created.

    Phases only ever move forward, so the journal is append-only. When a state
    store is configured it is rewritten after every phase.
    """
    id: str
    vm_name: str
    zone: str
    started_at: str
    completed_phases: List[str] = field(default_factory=list)
    failures: Dict[str, str] = field(default_factory=dict)
    snapshots: Dict[str, str] = field(default_factory=dict)
    zoned_disks: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def init_for_run(cls, vm_name: str, zone: str):
        return MigrationState(str(uuid.uuid4()), vm_name, str(zone), datetime.now().isoformat(timespec="seconds"))

    def record_completed(self, phase: str):
        if phase in self.completed_phases:
            raise ValueError("Phase {} is already recorded as completed".format(phase))
        self.completed_phases.append(phase)

    def record_failure(self, phase: str, reason: str):
        self.failures[phase] = reason

    def commit(self, store: str):
        string = self.to_json(indent=2)

        os.makedirs(store, exist_ok=True)
        with open(MigrationState._get_path(store, self.id), "w", encoding="utf-8") as f:
            f.write(string)

    @classmethod
    def _get_path(cls, store: str, id: str):
        return os.path.join(store, "{}.json".format(id))
