from locust import HttpUser, task, between, events
import random
import os
import time
import uuid
import requests


EVENT_NUMBER = int(os.getenv("LOCUST_EVENT_NUMBER", "9001"))
STUDENT_CODES = [str(100000 + i) for i in range(50)]


@events.test_start.add_listener
def on_test_start(environment, **kwargs):
    from dotenv import load_dotenv
    load_dotenv()

    base_url = os.getenv("LOCUST_HOST") or environment.host

    print(f"Ensuring load-test event {EVENT_NUMBER} exists...")
    response = requests.post(
        f"{base_url}/createEvent",
        json={"name": "Load test", "eventNumber": EVENT_NUMBER},
    )
    # 409 means a previous run already created it
    if response.status_code not in (201, 409):
        raise RuntimeError(f"Failed to create event in test setup: {response.status_code} {response.text}")


class ScannerUser(HttpUser):
    """A capture device uploading scans and refreshing its scan list."""
    wait_time = between(0.5, 2)

    def on_start(self):
        self.device_id = f"locust-{uuid.uuid4().hex[:8]}"
        self.recorded = []

    @task(5)
    def record_scan(self):
        scan = {
            "id": uuid.uuid4().hex,
            "eventId": EVENT_NUMBER,
            "code": random.choice(STUDENT_CODES),
            "timestamp": int(time.time() * 1000),
            "deviceId": self.device_id,
        }
        with self.client.post(
            "/addScanRecord",
            json=scan,
            name="POST /addScanRecord",
            catch_response=True
        ) as response:
            if response.status_code != 200:
                response.failure(f"Scan upload failed {response.status_code} {response.text}")
                return
            self.recorded.append(scan)

    @task(2)
    def list_scans(self):
        with self.client.get(
            f"/getScanRecords?eventNumber={EVENT_NUMBER}",
            name="GET /getScanRecords",
            catch_response=True
        ) as response:
            if response.status_code != 200:
                response.failure(f"Scan list failed {response.status_code}")

    @task(1)
    def replay_scan(self):
        """Scanners retry uploads; a replay must succeed and not duplicate."""
        if not self.recorded:
            return
        scan = random.choice(self.recorded)
        with self.client.post(
            "/addScanRecord",
            json=scan,
            name="POST /addScanRecord (replay)",
            catch_response=True
        ) as response:
            if response.status_code != 200:
                response.failure(f"Replay failed for {scan['id']}  {response.text}")
