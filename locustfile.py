from locust import HttpUser, task, between
import io
import random

SAMPLE_FEEDBACK = [
    "Delivery was fast and the packaging was great",
    "The app keeps crashing when I open settings",
    "Support took three days to answer my ticket",
    "Good value for the price, would buy again",
    "Checkout flow is confusing on mobile",
]


def generate_csv():
    row_count = random.randint(5, 50)
    rows = ["text,rating,source\n"]
    rows += [
        f'"{random.choice(SAMPLE_FEEDBACK)} #{i}",{random.randint(1, 5)},locust\n'
        for i in range(row_count)
    ]
    return io.BytesIO("".join(rows).encode("utf-8"))


class FeedbackUser(HttpUser):
    wait_time = between(1, 2)

    def on_start(self):
        self.headers = {"X-User-Id": f"locust_{random.randint(1, 20)}"}

    @task(3)
    def analyze_batch(self):
        items = [
            {"text": random.choice(SAMPLE_FEEDBACK), "rating": random.randint(1, 5)}
            for _ in range(random.randint(1, 10))
        ]
        self.client.post("/api/analyze", json={"items": items}, headers=self.headers)

    @task(1)
    def upload_csv(self):
        files = {"file": ("feedback.csv", generate_csv(), "text/csv")}
        self.client.post("/api/upload/", files=files, headers=self.headers)

    @task(2)
    def recent_feedback(self):
        self.client.get("/api/feedback?limit=20", headers=self.headers)
