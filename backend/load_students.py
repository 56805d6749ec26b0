"""
Data Loader Script - registers the sample students through the portal API.

Reads sample_students.json and posts each record to /register of a running
server. Records the server rejects (duplicate email, missing fields) are
reported rather than treated as fatal.

Usage:
    python load_students.py                           # Uses default URL
    python load_students.py http://localhost:8080     # Custom server URL
"""

import json
import os
import sys

import httpx

SAMPLE_FILE = os.path.join(os.path.dirname(os.path.abspath(__file__)), "sample_students.json")


def load_students(client: httpx.Client, students: list) -> dict:
    """
    POST each student to /register using the client's base URL.

    Returns a summary: {"registered": [...ids], "rejected": [{"email", "message"}]}.
    """
    summary = {"registered": [], "rejected": []}
    for student in students:
        resp = client.post("/register", json=student)
        result = resp.json()
        if result.get("success"):
            summary["registered"].append(result["studentId"])
        else:
            summary["rejected"].append({
                "email": student.get("email"),
                "message": result.get("message", "HTTP {}".format(resp.status_code))
            })
    return summary


def main():
    api_url = sys.argv[1] if len(sys.argv) > 1 else os.getenv("API_URL", "http://localhost:3000")

    if not os.path.exists(SAMPLE_FILE):
        print(f"Error: Could not find {SAMPLE_FILE}")
        sys.exit(1)

    print(f"Loading data from: {SAMPLE_FILE}")
    with open(SAMPLE_FILE, "r") as f:
        students = json.load(f)

    print(f"Found {len(students)} students, sending to: {api_url}/register")
    print()

    try:
        with httpx.Client(base_url=api_url, timeout=30.0) as client:
            summary = load_students(client, students)
    except httpx.HTTPError as e:
        print(f"Error talking to {api_url}: {e}")
        sys.exit(1)

    print("=" * 60)
    print("REGISTRATION SUMMARY")
    print("=" * 60)
    print(f"  Registered: {len(summary['registered'])}")
    print(f"  Rejected:   {len(summary['rejected'])}")
    print("=" * 60)
    for rejected in summary["rejected"]:
        print(f"  {rejected['email']}: {rejected['message']}")

    print()
    print(f"Done. Visit {api_url}/students to see the directory.")


if __name__ == "__main__":
    main()
