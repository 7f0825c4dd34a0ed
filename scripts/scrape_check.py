#!/usr/bin/env python3
"""
Standalone liveness check for Docker/Kubernetes.
Scrapes the exporter's /metrics endpoint once and exits 0 on HTTP 200.
"""

import os
import sys
import time
import urllib.error
import urllib.request


def main():
    port = os.environ.get("METRICS_PORT", "9898")
    addr = os.environ.get("METRICS_ADDR_CHECK", "localhost")  # Use localhost for internal check

    url = f"http://{addr}:{port}/metrics"

    try:
        start_time = time.time()
        with urllib.request.urlopen(url, timeout=5) as response:
            if response.status == 200:
                body = response.read()
                print(f"Scrape check passed in {time.time() - start_time:.3f}s ({len(body)} bytes)")
                sys.exit(0)
            print(f"Scrape check failed with status: {response.status}")
            sys.exit(1)
    except urllib.error.HTTPError as e:
        print(f"Scrape check failed: HTTP {e.code}")
        sys.exit(1)
    except urllib.error.URLError as e:
        print(f"Scrape check failed: Connection error {e.reason}")
        sys.exit(1)
    except OSError as e:
        print(f"Scrape check failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
