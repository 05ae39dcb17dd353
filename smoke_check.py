#!/usr/bin/env python3
"""
Smoke check for a running server: submit a search and poll until it resolves
"""

import sys
import time

import requests

BASE_URL = 'http://127.0.0.1:5000'


def check_search(base_url=BASE_URL, timeout=15.0):
    """Submit a writ petition search and wait for the outcome"""

    print("🌐 Testing Web Search Flow")
    print("=" * 50)

    http = requests.Session()
    test_data = {
        'case_type': 'writ',
        'case_number': '1234/2024',
        'filing_year': '2024'
    }

    print(f"🔍 Testing search: {test_data['case_type']} {test_data['case_number']}/{test_data['filing_year']}")

    try:
        response = http.post(f'{base_url}/api/search', json=test_data)
        print(f"📊 Response Status: {response.status_code}")
        if response.status_code != 202:
            print(f"❌ FAIL: Unexpected status code: {response.status_code}")
            print(f"Response content: {response.text[:500]}")
            return False

        # A second submission must be refused while the first is in flight
        duplicate = http.post(f'{base_url}/api/search', json=test_data)
        if duplicate.status_code == 409:
            print("✅ PASS: Concurrent submission refused")
        else:
            print(f"⚠️  Second submission returned {duplicate.status_code}")

        deadline = time.monotonic() + timeout
        while time.monotonic() < deadline:
            status = http.get(f'{base_url}/api/search/status').json()
            if not status['loading']:
                break
            time.sleep(0.5)
        else:
            print("❌ FAIL: Search did not finish in time")
            return False

        if status['state'] == 'success':
            case_data = status['case_data']
            print(f"✅ PASS: {case_data['case_type']} with {len(case_data['orders'])} order(s)")
        else:
            print(f"✅ PASS: Search failed cleanly: {status['error']}")
        return True

    except requests.exceptions.ConnectionError:
        print(f"❌ ERROR: Could not connect to Flask app. Make sure it's running on {base_url}")
        return False
    finally:
        print("\n" + "=" * 50)
        print("🏁 Web flow check completed")


if __name__ == "__main__":
    sys.exit(0 if check_search(*sys.argv[1:2]) else 1)
