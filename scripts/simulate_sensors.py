"""
Post synthetic river readings to the ingest endpoint.

Stands in for the field device during development. Levels drift slowly and
occasionally surge past the flood threshold so the alert path is exercised.
"""

import argparse
import logging
import os
import random
import sys
import time

import requests

logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger("floodwatch-simulator")

API_URL = os.getenv("API_URL", "http://localhost:8000/api/v1")


def wait_for_api():
    base_url = API_URL.replace("/api/v1", "").rstrip("/")
    health_url = f"{base_url}/health"

    logger.info(f"Waiting for API at {health_url}...")
    for _ in range(60):
        try:
            if requests.get(health_url, timeout=5).status_code == 200:
                logger.info("API is Up.")
                return
        except requests.RequestException:
            pass
        time.sleep(2)
    logger.error("API unreachable.")
    sys.exit(1)


def next_levels(right, left, surge_chance):
    """Random walk around the current levels with an occasional surge."""
    if random.random() < surge_chance:
        bump = random.uniform(30.0, 60.0)
        logger.info(f"Simulating surge (+{bump:.1f} cm)")
        right += bump
        left += bump * random.uniform(0.8, 1.0)
    else:
        right += random.uniform(-3.0, 3.0)
        left += random.uniform(-3.0, 3.0)
        # Pull back toward a normal river level
        right += (110.0 - right) * 0.1
        left += (105.0 - left) * 0.1
    return max(right, 0.0), max(left, 0.0)


def build_payload(right, left, legacy_keys):
    right_flow = round(right * random.uniform(0.6, 0.8), 1)
    left_flow = round(left * random.uniform(0.6, 0.8), 1)
    if legacy_keys:
        return {
            "h_kanan": round(right, 1),
            "h_kiri": round(left, 1),
            "q_kanan": right_flow,
            "q_kiri": left_flow,
        }
    return {
        "right_level": round(right, 1),
        "left_level": round(left, 1),
        "right_flow": right_flow,
        "left_flow": left_flow,
    }


def send_reading(payload):
    try:
        res = requests.post(f"{API_URL}/readings", json=payload, timeout=15)
        if res.status_code == 201:
            body = res.json()
            verdict = body["verdict"]
            logger.info(
                f"Reading {body['reading']['id']}: {verdict['status']} "
                f"({verdict['confidence']:g}%, {verdict['source']}) alert_sent={body['alert_sent']}"
            )
        else:
            logger.error(f"Ingest failed. Status: {res.status_code} - {res.text}")
    except requests.RequestException as e:
        logger.error(f"Error sending reading: {e}")


def main():
    parser = argparse.ArgumentParser(description="Floodwatch sensor simulator")
    parser.add_argument("--interval", type=float, default=5.0, help="Seconds between readings")
    parser.add_argument("--count", type=int, default=0, help="Readings to send (0 = forever)")
    parser.add_argument("--surge-chance", type=float, default=0.05)
    parser.add_argument("--legacy-keys", action="store_true", help="Send h_kanan/h_kiri/q_kanan/q_kiri")
    args = parser.parse_args()

    logger.info("Starting Floodwatch sensor simulator...")
    wait_for_api()

    right, left = 110.0, 105.0
    sent = 0
    while args.count == 0 or sent < args.count:
        right, left = next_levels(right, left, args.surge_chance)
        send_reading(build_payload(right, left, args.legacy_keys))
        sent += 1
        time.sleep(args.interval)

    logger.info(f"Simulation complete: {sent} readings sent.")


if __name__ == "__main__":
    main()
