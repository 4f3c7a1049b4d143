"""Example: drive the service layer without Flask.

Controllers stay thin; the rules live in the services and the workflow.
"""

import asyncio
from datetime import datetime

from src.kitchen_attendance.kitchen_attendance.attendance.model import LocationFix
from src.kitchen_attendance.kitchen_attendance.container import build_container
from src.kitchen_attendance.kitchen_attendance.storage.memory import InMemoryStorage


def main():
    container = build_container(
        storage_config={"backend": "memory"},
        ai_config={},
        attendance_config={"history_redirect_delay_seconds": 30},
        storage=InMemoryStorage(),
    )

    async def check_in():
        workflow = container.workflow
        volunteer = workflow.search("budi")[0]
        await workflow.select_volunteer(volunteer.id)
        await container.devices.submit_location(LocationFix(-6.2607, 106.8552, 12.0))
        await workflow.wait_for_devices(timeout=1)
        # 00:20 is before the Cook deadline (00:30), so this is on time.
        return await workflow.clock_in(now=datetime.now().replace(hour=0, minute=20))

    try:
        record = container.runner.run(check_in())
        print(record.status.value, record.verification_note)
        print(container.attendance_service.history_rows(limit=5))
    finally:
        container.shutdown()


if __name__ == "__main__":
    main()
