"""Replay every worker's advance ledger and report stored balances that drifted.

Read-only: nothing is rewritten. Exit code 1 when any ledger is inconsistent.
"""

from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.payroll_ledger.payroll_ledger.container import build_container


def main() -> int:
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)

    bad = 0
    for worker in container.workers_repo.list_workers():
        result = container.salary_service.verify(worker.worker_id)
        if result.consistent:
            continue
        bad += 1
        print(
            f"DRIFT worker={worker.worker_id} stored={result.stored_balance} "
            f"expected={result.expected_balance} entries={[d.entry_id for d in result.drifts]}"
        )

    print("OK: all ledgers consistent" if bad == 0 else f"FAIL: {bad} inconsistent ledger(s)")
    return 1 if bad else 0


if __name__ == "__main__":
    sys.exit(main())
